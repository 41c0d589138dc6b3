"""Node admission for chunked traversal.

The AdmissionFilter decides, one node at a time, whether a node joins the
current page. Checks run in a fixed order and short-circuit:

1. already admitted by this session (dedup by id)
2. type not in the configured allow-list
3. deeper than the configured maximum depth
4. estimated size would push the session total over the budget

An admitted node is returned transformed (property exclusion, then optional
summarization) and its size is charged to the session.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional

from ..config import TraversalConfig
from .._common import NodeType
from .node import FigmaNode
from .session import TraversalSession


BYTES_PER_MB = 1024 * 1024

# Style attached to every summarized TEXT node
DEFAULT_TEXT_STYLE = {
    "fontFamily": "Inter",
    "fontWeight": 400,
    "fontSize": 16,
    "textAlignHorizontal": "LEFT",
    "letterSpacing": 0,
    "lineHeightUnit": "PIXELS",
}


def estimate_node_size(node: Mapping[str, Any]) -> float:
    """Estimate the serialized size of a node in megabytes.

    Uses the UTF-8 byte length of a canonical JSON encoding (sorted keys,
    no whitespace), so equal nodes always get equal estimates. The estimate
    covers the whole mapping, including any nested children.
    """
    encoded = json.dumps(node, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return len(encoded.encode("utf-8")) / BYTES_PER_MB


def filter_properties(node: Mapping[str, Any], excluded: FrozenSet[str]) -> Dict[str, Any]:
    """Return a shallow copy of ``node`` without the excluded keys.

    ``id`` and ``type`` are kept whatever the exclusion list says.
    """
    return {
        key: value for key, value in node.items()
        if key not in excluded or key in ("id", "type")
    }


# Per-type summary shapes

def _base_summary(node: Mapping[str, Any]) -> Dict[str, Any]:
    visible = node.get("visible")
    return {
        "id": node["id"],
        "name": node.get("name") or "",
        "visible": True if visible is None else visible,
        "type": node["type"],
    }


def _children_of(node: Mapping[str, Any]) -> list:
    return node.get("children", [])


def _summarize_frame(node):
    return dict(_base_summary(node), children=_children_of(node), background=[])


def _summarize_group(node):
    return dict(_base_summary(node), children=_children_of(node))


def _summarize_shape(node):
    return _base_summary(node)


def _summarize_boolean_operation(node):
    return dict(_base_summary(node), children=_children_of(node), booleanOperation="UNION")


def _summarize_star(node):
    return dict(_base_summary(node), pointCount=5, innerRadius=0.5)


def _summarize_text(node):
    return dict(
        _base_summary(node),
        characters=node.get("characters", ""),
        style=dict(DEFAULT_TEXT_STYLE),
    )


def _summarize_component(node):
    return dict(
        _base_summary(node),
        children=_children_of(node),
        componentId=node.get("componentId", ""),
    )


def _summarize_canvas(node):
    return dict(
        _base_summary(node),
        children=_children_of(node),
        backgroundColor={"r": 1, "g": 1, "b": 1, "a": 1},
    )


def _summarize_unknown(node):
    summary = _base_summary(node)
    if "children" in node:
        summary["children"] = node["children"]
    return summary


_SUMMARIZERS: Dict[NodeType, Callable[[Mapping[str, Any]], Dict[str, Any]]] = {
    NodeType.FRAME: _summarize_frame,
    NodeType.GROUP: _summarize_group,
    NodeType.VECTOR: _summarize_shape,
    NodeType.BOOLEAN_OPERATION: _summarize_boolean_operation,
    NodeType.STAR: _summarize_star,
    NodeType.LINE: _summarize_shape,
    NodeType.TEXT: _summarize_text,
    NodeType.COMPONENT: _summarize_component,
    NodeType.INSTANCE: _summarize_component,
    NodeType.CANVAS: _summarize_canvas,
    NodeType.UNKNOWN: _summarize_unknown,
}


def summarize_node(node: Mapping[str, Any]) -> Dict[str, Any]:
    """Reduce a node to the minimal shape of its type.

    Every shape carries id, name, visible and type. Containers keep their
    children; TEXT keeps its characters with a fixed default style; types
    outside the recognised set get the base shape plus children if present.
    """
    return _SUMMARIZERS[NodeType.parse(node["type"])](node)


class SkipReason(Enum):
    """Why a node was left out of the page."""
    DUPLICATE = "duplicate"
    TYPE_FILTERED = "type_filtered"
    TOO_DEEP = "too_deep"
    OVER_BUDGET = "over_budget"


@dataclass(frozen=True)
class Decision:
    """Outcome of evaluating one node.

    Exactly one of ``node`` (admitted, already transformed) and ``reason``
    (skipped) is set. ``size`` is the charged estimate for admitted nodes and
    the refused estimate for OVER_BUDGET skips.
    """
    node: Optional[Dict[str, Any]] = None
    reason: Optional[SkipReason] = None
    size: float = 0.0

    @classmethod
    def admit(cls, node: Dict[str, Any], size: float) -> 'Decision':
        return cls(node=node, size=size)

    @classmethod
    def skip(cls, reason: SkipReason, size: float = 0.0) -> 'Decision':
        return cls(reason=reason, size=size)

    @property
    def admitted(self) -> bool:
        return self.reason is None


class AdmissionFilter:
    """Pure decision function over a config and a session.

    The session is shared with (and owned by) the caller; the filter only
    reads and updates it. Not reentrant without external synchronization.

    Args:
        config: Validated traversal configuration
        session: Session whose dedup set and size total are consulted
    """

    def __init__(self, config: TraversalConfig, session: TraversalSession):
        self.config = config
        self.session = session
        self.budget = config.effective_budget_mb
        self._excluded = config.excluded_props

    def evaluate(self, node: FigmaNode, depth: int) -> Decision:
        """Decide whether ``node`` at ``depth`` is admitted.

        Args:
            node: Candidate node
            depth: Its depth, where the document's children are depth 0

        Returns:
            Decision.admit with the transformed node, or Decision.skip
        """
        node_id = node.identifier()
        if self.session.has_seen(node_id):
            return Decision.skip(SkipReason.DUPLICATE)
        if not self.config.admits_type(node.type):
            return Decision.skip(SkipReason.TYPE_FILTERED)
        if not self.config.within_depth(depth):
            return Decision.skip(SkipReason.TOO_DEEP)

        # Size is charged on the node as it will be emitted
        transformed = self.transform(node.raw)
        size = estimate_node_size(transformed)
        if self.session.would_exceed(size, self.budget):
            return Decision.skip(SkipReason.OVER_BUDGET, size)

        self.session.record(node_id, size)
        return Decision.admit(transformed, size)

    def transform(self, raw: Mapping[str, Any]) -> Dict[str, Any]:
        """Apply property exclusion, then summarization if enabled."""
        transformed = filter_properties(raw, self._excluded)
        if self.config.summarize_nodes:
            transformed = summarize_node(transformed)
        return transformed
