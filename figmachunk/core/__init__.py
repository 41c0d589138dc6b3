"""Core components of figmachunk.

The node model, admission decisions and the chunked traverser that ties
them together.
"""

from .node import TreeNode, FigmaNode, FigmaDocument
from .session import TraversalSession
from .admission import (
    AdmissionFilter,
    Decision,
    SkipReason,
    estimate_node_size,
    filter_properties,
    summarize_node,
)
from .cursor import parse_cursor, format_cursor
from .traverser import ChunkedTraverser, NodeStack, TraversalResult

__all__ = [
    'TreeNode',
    'FigmaNode',
    'FigmaDocument',
    'TraversalSession',
    'AdmissionFilter',
    'Decision',
    'SkipReason',
    'estimate_node_size',
    'filter_properties',
    'summarize_node',
    'parse_cursor',
    'format_cursor',
    'ChunkedTraverser',
    'NodeStack',
    'TraversalResult',
]
