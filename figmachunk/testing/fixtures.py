"""Test fixtures for figmachunk consumers.

Builders for raw design-file payloads, so test suites can describe small
trees without spelling out the full API shape every time.
"""

import itertools
from typing import Any, Dict, Iterable, Optional

from ..core.node import FigmaDocument

_ids = itertools.count(1)


def _next_id() -> str:
    return f"1:{next(_ids)}"


def make_node(node_type: str,
              node_id: Optional[str] = None,
              name: Optional[str] = None,
              children: Optional[Iterable[Dict[str, Any]]] = None,
              **props) -> Dict[str, Any]:
    """Build one raw node mapping.

    Args:
        node_type: Type tag (FRAME, TEXT, ...)
        node_id: Explicit id; a fresh ``1:<n>`` id is generated otherwise
        name: Display name (defaults to the id)
        children: Child mappings; omitted from the node when None
        **props: Extra properties copied onto the node

    Returns:
        Raw node mapping
    """
    node_id = node_id or _next_id()
    node = {"id": node_id, "name": name if name is not None else node_id, "type": node_type}
    node.update(props)
    if children is not None:
        node["children"] = list(children)
    return node


def make_frame(node_id: Optional[str] = None, children=None, **props) -> Dict[str, Any]:
    return make_node("FRAME", node_id, children=children if children is not None else [], **props)


def make_text(node_id: Optional[str] = None, characters: str = "", **props) -> Dict[str, Any]:
    props.setdefault("style", {"fontFamily": "Roboto", "fontSize": 12})
    return make_node("TEXT", node_id, characters=characters, **props)


def make_payload(*children: Dict[str, Any], document_id: str = "0:0") -> Dict[str, Any]:
    """Wrap top-level nodes in a file payload as returned by GET /files/{key}."""
    return {
        "name": "Test file",
        "document": {
            "id": document_id,
            "name": "Document",
            "type": "DOCUMENT",
            "children": list(children),
        },
    }


def make_document(*children: Dict[str, Any], document_id: str = "0:0") -> FigmaDocument:
    """Build a FigmaDocument snapshot around the given top-level nodes."""
    return FigmaDocument.from_response(make_payload(*children, document_id=document_id))


def sample_tree() -> FigmaDocument:
    """A small two-page design file.

    Structure (pre-order)::

        page-1 (CANVAS)
        ├── frame-1 (FRAME)
        │   ├── title (TEXT)
        │   └── icon (VECTOR)
        └── button (COMPONENT)
            └── label (TEXT)
        page-2 (CANVAS)
        └── group-1 (GROUP)
            ├── star (STAR)
            └── rule (LINE)
    """
    return make_document(
        make_node("CANVAS", "page-1", children=[
            make_frame("frame-1", children=[
                make_text("title", characters="Hello"),
                make_node("VECTOR", "icon"),
            ]),
            make_node("COMPONENT", "button", componentId="c-1", children=[
                make_text("label", characters="OK"),
            ]),
        ]),
        make_node("CANVAS", "page-2", children=[
            make_node("GROUP", "group-1", children=[
                make_node("STAR", "star"),
                make_node("LINE", "rule"),
            ]),
        ]),
    )


# Pre-order ids of sample_tree()
SAMPLE_TREE_ORDER = [
    "page-1", "frame-1", "title", "icon", "button", "label",
    "page-2", "group-1", "star", "rule",
]

# Depths of sample_tree() nodes, document children at depth 0
SAMPLE_TREE_DEPTHS = {
    "page-1": 0, "frame-1": 1, "title": 2, "icon": 2, "button": 1, "label": 2,
    "page-2": 0, "group-1": 1, "star": 2, "rule": 2,
}
