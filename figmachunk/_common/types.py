"""Type tags of design-file nodes."""

from enum import Enum
from typing import Optional


class NodeType(Enum):
    """Type tags of design-file nodes.

    UNKNOWN stands in for any tag outside the recognised set; such nodes are
    still traversed and admitted, they only get the generic summary shape.
    """
    FRAME = "FRAME"
    GROUP = "GROUP"
    VECTOR = "VECTOR"
    BOOLEAN_OPERATION = "BOOLEAN_OPERATION"
    STAR = "STAR"
    LINE = "LINE"
    TEXT = "TEXT"
    COMPONENT = "COMPONENT"
    INSTANCE = "INSTANCE"
    CANVAS = "CANVAS"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, tag: Optional[str]) -> 'NodeType':
        """Map a raw type tag to a NodeType, falling back to UNKNOWN."""
        try:
            return cls(tag)
        except ValueError:
            return cls.UNKNOWN

    @classmethod
    def is_known(cls, tag: str) -> bool:
        return tag != cls.UNKNOWN.value and cls.parse(tag) is not cls.UNKNOWN
