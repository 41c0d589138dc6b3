"""Per-instance traversal state.

A TraversalSession carries everything admission decisions depend on across
calls: the ids already admitted and the running size total. It is owned by
exactly one traverser; independent sessions share nothing.
"""

from typing import Set


class TraversalSession:
    """Dedup set and size accumulator for one traverser.

    Not thread-safe. Calls that share a session must be serialized by the
    caller, because each admission changes what later calls may admit.
    """

    def __init__(self):
        self.seen_ids: Set[str] = set()
        self.current_size: float = 0.0

    def has_seen(self, node_id: str) -> bool:
        return node_id in self.seen_ids

    def would_exceed(self, size: float, budget: float) -> bool:
        """Check whether charging ``size`` would push the total over ``budget``."""
        return self.current_size + size > budget

    def record(self, node_id: str, size: float) -> None:
        """Mark a node admitted and charge its size. Admission is never undone."""
        self.seen_ids.add(node_id)
        self.current_size += size

    def has_reached(self, budget: float) -> bool:
        return self.current_size >= budget

    @property
    def admitted_count(self) -> int:
        return len(self.seen_ids)

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(admitted={self.admitted_count}, "
                f"size_mb={self.current_size:.6f})")
