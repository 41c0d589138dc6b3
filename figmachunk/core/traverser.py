"""Chunked traversal of design-file trees.

The ChunkedTraverser walks a document snapshot in pre-order, depth-first,
keeping document order among siblings. Each call emits at most one page of
admitted nodes and a cursor that lets the next call resume the same walk.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..config import TraversalConfig
from .admission import AdmissionFilter, SkipReason
from .cursor import format_cursor, parse_cursor
from .node import FigmaDocument, FigmaNode
from .session import TraversalSession

logger = logging.getLogger(__name__)


class NodeStack:
    """Explicit stack of (node, depth) entries for pre-order walking.

    Children are pushed in reverse so the first child is popped first,
    which yields document order among siblings.
    """

    def __init__(self):
        self._entries: List[Tuple[FigmaNode, int]] = []

    @classmethod
    def seed(cls, nodes: List[FigmaNode], depth: int = 0) -> 'NodeStack':
        stack = cls()
        stack.push_children(nodes, depth)
        return stack

    def push(self, node: FigmaNode, depth: int) -> None:
        self._entries.append((node, depth))

    def push_children(self, children: List[FigmaNode], depth: int) -> None:
        for child in reversed(children):
            self._entries.append((child, depth))

    def pop(self) -> Tuple[FigmaNode, int]:
        return self._entries.pop()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)


@dataclass
class TraversalResult:
    """One page of a chunked traversal.

    ``memory_usage`` is the session's cumulative admitted size in MB, which
    spans every call made through the same traverser.
    """
    nodes: List[Dict[str, Any]] = field(default_factory=list)
    memory_usage: float = 0.0
    next_cursor: Optional[str] = None
    has_more: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Plain structure ready for JSON serialization."""
        data = {
            "nodes": self.nodes,
            "memoryUsage": self.memory_usage,
            "hasMore": self.has_more,
        }
        if self.next_cursor is not None:
            data["nextCursor"] = self.next_cursor
        return data


class ChunkedTraverser:
    """Stateful, resumable page producer over document snapshots.

    The traverser owns one TraversalSession. Every node it admits stays
    admitted for the traverser's lifetime, so later calls skip those ids
    even if the config changes between calls. Calls on one instance must
    not overlap; separate instances share nothing.

    Args:
        config: Default configuration for calls that don't pass their own
        session: Session to use (a fresh one by default)
    """

    def __init__(self,
                 config: Optional[TraversalConfig] = None,
                 session: Optional[TraversalSession] = None):
        self.config = (config or TraversalConfig()).ensure_valid()
        self.session = session or TraversalSession()

    def traverse(self,
                 document: FigmaDocument,
                 cursor: Optional[str] = None,
                 config: Optional[TraversalConfig] = None) -> TraversalResult:
        """Produce the next page of admitted nodes.

        Args:
            document: Snapshot to walk; never mutated
            cursor: Cursor from a previous page of the same snapshot
            config: Per-call configuration overriding the default

        Returns:
            TraversalResult with the page, cumulative size, and resume cursor

        Raises:
            InvalidCursor: If the cursor cannot be parsed
            InvalidConfiguration: If the per-call config is invalid
        """
        config = config.ensure_valid() if config is not None else self.config
        skip = parse_cursor(cursor)
        admission = AdmissionFilter(config, self.session)

        logger.debug("Traversing document %s from position %d with %s",
                     document.identifier(), skip, config.describe())

        stack = NodeStack.seed(document.children())
        position = self._fast_forward(stack, config, skip)

        page: List[Dict[str, Any]] = []
        halt = "drained"
        while stack:
            if len(page) >= config.page_size:
                halt = "page full"
                break

            node, depth = stack.pop()
            decision = admission.evaluate(node, depth)

            if decision.reason is SkipReason.OVER_BUDGET:
                # Leave the refused node for a later call with more room
                stack.push(node, depth)
                halt = "over budget"
                logger.debug("Node %s (%.6f MB) does not fit remaining budget",
                             node.identifier(), decision.size)
                break

            position += 1
            if decision.admitted:
                page.append(decision.node)
            self._expand(stack, config, node, depth)

            if self.session.has_reached(admission.budget):
                halt = "budget reached"
                break

        has_more = bool(stack)
        logger.debug("Halted (%s) with %d nodes, %d entries pending",
                     halt, len(page), len(stack))

        return TraversalResult(
            nodes=page,
            memory_usage=self.session.current_size,
            next_cursor=format_cursor(position) if has_more else None,
            has_more=has_more,
        )

    def _fast_forward(self,
                      stack: NodeStack,
                      config: TraversalConfig,
                      skip: int) -> int:
        """Replay ``skip`` walk steps without admitting anything.

        Returns:
            The walk position reached (less than ``skip`` if the walk ran out)
        """
        position = 0
        while position < skip and stack:
            node, depth = stack.pop()
            self._expand(stack, config, node, depth)
            position += 1
        return position

    @staticmethod
    def _expand(stack: NodeStack,
                config: TraversalConfig,
                node: FigmaNode,
                depth: int) -> None:
        # Children below max_depth could never be admitted
        if node.is_leaf() or not config.explores_below(depth):
            return
        stack.push_children(node.children(), depth + 1)

    def reset(self) -> None:
        """Forget every admission and start a fresh session."""
        self.session = TraversalSession()
