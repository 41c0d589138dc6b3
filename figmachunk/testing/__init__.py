"""Testing utilities for figmachunk consumers."""

from .fixtures import (
    make_node,
    make_frame,
    make_text,
    make_payload,
    make_document,
    sample_tree,
    SAMPLE_TREE_ORDER,
    SAMPLE_TREE_DEPTHS,
)

__all__ = [
    'make_node',
    'make_frame',
    'make_text',
    'make_payload',
    'make_document',
    'sample_tree',
    'SAMPLE_TREE_ORDER',
    'SAMPLE_TREE_DEPTHS',
]
