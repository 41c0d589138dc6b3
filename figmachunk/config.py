"""Configuration for chunked design-file traversal.

This module defines how callers specify a traversal page: how many nodes to
return, how much estimated size may be admitted, and which nodes to keep.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, FrozenSet, List, Optional

from ._common import NodeType
from .errors import InvalidConfiguration


DEFAULT_PAGE_SIZE = 100
DEFAULT_MAX_MEMORY_MB = 512
DEFAULT_MAX_RESPONSE_SIZE_MB = 50

# Properties that survive any exclusion list
PROTECTED_PROPS = frozenset({"id", "type"})

# Heavy visual properties dropped by TraversalConfig.summary_scan()
HEAVY_PROPS = (
    "fills",
    "strokes",
    "effects",
    "exportSettings",
    "absoluteBoundingBox",
    "absoluteRenderBounds",
    "constraints",
)

# Shell option names accepted by from_options()
_OPTION_ALIASES = {
    "pageSize": "page_size",
    "maxMemoryMB": "max_memory_mb",
    "maxResponseSize": "max_response_size_mb",
    "nodeTypes": "node_types",
    "maxDepth": "max_depth",
    "excludeProps": "exclude_props",
    "summarizeNodes": "summarize_nodes",
}


@dataclass
class TraversalConfig:
    """Complete configuration for one chunked traversal call.

    Budgets are expressed in megabytes of canonical JSON, the same unit the
    size estimator reports. When both budgets are set the smaller governs.
    """

    page_size: int = DEFAULT_PAGE_SIZE
    max_memory_mb: Optional[float] = DEFAULT_MAX_MEMORY_MB
    max_response_size_mb: Optional[float] = DEFAULT_MAX_RESPONSE_SIZE_MB

    # Node filtering
    node_types: Optional[FrozenSet[str]] = None
    max_depth: Optional[int] = None

    # Node transforms
    exclude_props: Optional[FrozenSet[str]] = None
    summarize_nodes: bool = False

    def __post_init__(self):
        # Accept any iterable for the set-valued options
        if self.node_types is not None and not isinstance(self.node_types, frozenset):
            self.node_types = frozenset(_as_tag(t) for t in self.node_types)
        if self.exclude_props is not None and not isinstance(self.exclude_props, frozenset):
            self.exclude_props = frozenset(self.exclude_props)

    @property
    def effective_budget_mb(self) -> float:
        """The size ceiling in force: the smaller of the configured budgets."""
        budgets = [b for b in (self.max_memory_mb, self.max_response_size_mb) if b is not None]
        if not budgets:
            return float("inf")
        return min(budgets)

    @property
    def excluded_props(self) -> FrozenSet[str]:
        """Exclusion list with id/type removed."""
        if not self.exclude_props:
            return frozenset()
        return self.exclude_props - PROTECTED_PROPS

    def admits_type(self, node_type: str) -> bool:
        if self.node_types is None:
            return True
        return node_type in self.node_types

    def within_depth(self, depth: int) -> bool:
        if self.max_depth is None:
            return True
        return depth <= self.max_depth

    def explores_below(self, depth: int) -> bool:
        """Check if children of a node at this depth can still be admitted."""
        if self.max_depth is None:
            return True
        return depth < self.max_depth

    # Convenience constructors for common configurations

    @classmethod
    def shallow_scan(cls, max_depth: int = 1, **overrides) -> 'TraversalConfig':
        """Create config for scanning the top levels of a document.

        Args:
            max_depth: Deepest level to admit (0 = top-level nodes only)

        Returns:
            TraversalConfig limited to the requested depth
        """
        return cls(max_depth=max_depth, **overrides)

    @classmethod
    def summary_scan(cls, page_size: int = DEFAULT_PAGE_SIZE, **overrides) -> 'TraversalConfig':
        """Create config that returns summarized nodes without heavy visuals.

        Args:
            page_size: Nodes per page

        Returns:
            TraversalConfig with summarization and property stripping enabled
        """
        overrides.setdefault("exclude_props", frozenset(HEAVY_PROPS))
        return cls(page_size=page_size, summarize_nodes=True, **overrides)

    @classmethod
    def from_options(cls, options: Optional[Dict[str, Any]] = None, **kwargs) -> 'TraversalConfig':
        """Build a config from tool-call style options.

        Both the shell's camelCase names (``pageSize``, ``maxMemoryMB`` ...)
        and the snake_case field names are accepted. ``None`` values fall back
        to defaults.

        Raises:
            InvalidConfiguration: If an option name is not recognised
        """
        merged = dict(options or {})
        merged.update(kwargs)

        known = {f.name for f in fields(cls)}
        values = {}
        unknown = []
        for key, value in merged.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                unknown.append(key)
                continue
            if value is not None:
                values[name] = value

        if unknown:
            raise InvalidConfiguration(
                [f"unknown option: {key}" for key in sorted(unknown)]
            )
        return cls(**values)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if isinstance(self.page_size, bool) or not isinstance(self.page_size, int) or self.page_size < 1:
            errors.append("page_size must be an integer >= 1")

        for name in ("max_memory_mb", "max_response_size_mb"):
            value = getattr(self, name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0):
                errors.append(f"{name} must be positive")

        if self.max_depth is not None:
            if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
                errors.append("max_depth must be an integer")
            elif self.max_depth < 0:
                errors.append("max_depth cannot be negative")

        if self.node_types is not None:
            if not self.node_types:
                errors.append("node_types cannot be empty")
            unknown = sorted(t for t in self.node_types if not NodeType.is_known(t))
            if unknown:
                errors.append(f"unrecognized node types: {', '.join(unknown)}")

        return errors

    def ensure_valid(self) -> 'TraversalConfig':
        """Raise InvalidConfiguration unless validate() is clean."""
        problems = self.validate()
        if problems:
            raise InvalidConfiguration(problems)
        return self

    def describe(self) -> Dict[str, Any]:
        """Compact summary suitable for debug logging."""
        return {
            "page_size": self.page_size,
            "budget_mb": self.effective_budget_mb,
            "node_types": sorted(self.node_types) if self.node_types is not None else None,
            "max_depth": self.max_depth,
            "exclude_props": sorted(self.excluded_props),
            "summarize": self.summarize_nodes,
        }


def _as_tag(value: Any) -> str:
    if isinstance(value, NodeType):
        return value.value
    return str(value)


def merge_config(base: TraversalConfig, **kwargs) -> TraversalConfig:
    """Return a copy of ``base`` with the given fields replaced.

    ``None`` values keep the base setting, matching from_options().
    """
    values = {f.name: getattr(base, f.name) for f in fields(base)}
    values.update({k: v for k, v in kwargs.items() if v is not None})
    return TraversalConfig(**values)
