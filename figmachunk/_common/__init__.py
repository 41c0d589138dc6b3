"""Shared definitions used by both the configuration and the core.

This internal package holds plain data definitions with no I/O.
It must NEVER import from core, config or client to avoid circular
dependencies.
"""

from .types import NodeType

__all__ = [
    'NodeType',
]
