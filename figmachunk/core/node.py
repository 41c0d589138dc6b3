"""Node abstractions for design-file trees.

Nodes are kept simple: each wraps one raw node mapping as delivered by the
upstream source, and the raw mappings themselves are never mutated.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping

from ..errors import InvalidUpstreamData


class TreeNode(ABC):
    """Abstract base class for nodes in a traversable tree.

    Identity is all the traverser relies on: two nodes with the same
    identifier are the same node, whichever fetch they came from.
    """

    @abstractmethod
    def identifier(self) -> str:
        """Return an identifier unique within the tree and stable across fetches."""
        pass

    @abstractmethod
    def is_leaf(self) -> bool:
        """Check if this node has no children."""
        pass

    def __str__(self) -> str:
        return self.identifier()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.identifier()!r})"

    def __eq__(self, other: object) -> bool:
        """Nodes are equal if they have the same identifier."""
        if not isinstance(other, TreeNode):
            return NotImplemented
        return self.identifier() == other.identifier()

    def __hash__(self) -> int:
        return hash(self.identifier())


class FigmaNode(TreeNode):
    """One element of a design-file tree.

    Wraps the raw mapping and validates the fields every node must carry.
    ``raw`` is the mapping exactly as delivered; callers that transform a
    node must copy it first.

    Args:
        raw: Raw node mapping with at least ``id`` and ``type``

    Raises:
        InvalidUpstreamData: If the mapping lacks an id or a type
    """

    def __init__(self, raw: Mapping[str, Any]):
        if not isinstance(raw, Mapping):
            raise InvalidUpstreamData(f"Node must be an object, got {type(raw).__name__}")
        if not isinstance(raw.get("id"), str):
            raise InvalidUpstreamData(f"Node is missing a string id: {_preview(raw)}")
        if not isinstance(raw.get("type"), str):
            raise InvalidUpstreamData(f"Node {raw['id']!r} is missing a type")
        self.raw = raw

    def identifier(self) -> str:
        return self.raw["id"]

    @property
    def type(self) -> str:
        """Raw type tag, which may be outside the recognised set."""
        return self.raw["type"]

    def is_leaf(self) -> bool:
        return not self.raw.get("children")

    def children(self) -> List['FigmaNode']:
        """Child nodes in document order."""
        return [FigmaNode(child) for child in self.raw.get("children") or ()]


class FigmaDocument(FigmaNode):
    """Root container of a design file.

    Its immediate children seed every traversal. Treated as an immutable
    snapshot fetched once per traversal call.
    """

    @classmethod
    def from_response(cls, payload: Any) -> 'FigmaDocument':
        """Extract the document root from an upstream file payload.

        Raises:
            InvalidUpstreamData: If the payload has no document root
        """
        if not isinstance(payload, Mapping) or not payload.get("document"):
            raise InvalidUpstreamData("Invalid response from Figma API: no document root")
        return cls(payload["document"])


def _preview(raw: Mapping[str, Any], limit: int = 80) -> str:
    text = repr(dict(raw))
    return text if len(text) <= limit else text[:limit] + "..."
