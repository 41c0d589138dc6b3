"""High-level API for figmachunk.

Simple functional interfaces for the common cases. These wrap the
ChunkedTraverser and ChunkedFigmaClient for callers who don't want to
manage traverser instances themselves.
"""

import logging
from typing import Any, Dict, Iterator, Optional, Union

from .client import ChunkedFigmaClient, FigmaClient
from .config import TraversalConfig
from .core.node import FigmaDocument
from .core.traverser import ChunkedTraverser, TraversalResult

logger = logging.getLogger(__name__)

DocumentLike = Union[FigmaDocument, Dict[str, Any]]


def traverse_document(document: DocumentLike,
                      cursor: Optional[str] = None,
                      **options) -> TraversalResult:
    """Return one page of a document with a fresh traverser.

    Args:
        document: FigmaDocument, or a raw file payload with a ``document`` key
        cursor: Cursor from a previous page of the same document
        **options: Config options, camelCase or snake_case (see TraversalConfig.from_options)

    Returns:
        TraversalResult for the page

    Example:
        >>> page = traverse_document(payload, pageSize=50, nodeTypes=["TEXT"])
        >>> page.has_more, page.next_cursor
    """
    config = TraversalConfig.from_options(options)
    return ChunkedTraverser(config).traverse(_as_document(document), cursor)


def iter_pages(document: DocumentLike,
               cursor: Optional[str] = None,
               **options) -> Iterator[TraversalResult]:
    """Yield successive pages of a document from one traverser.

    Each page's cursor is fed into the next call. Iteration stops when a
    page reports no more data, or when a page admits nothing because the
    remaining budget cannot fit the next node.

    Args:
        document: FigmaDocument, or a raw file payload with a ``document`` key
        cursor: Where to start (None = beginning)
        **options: Config options, camelCase or snake_case

    Yields:
        TraversalResult pages in walk order
    """
    config = TraversalConfig.from_options(options)
    traverser = ChunkedTraverser(config)
    snapshot = _as_document(document)

    while True:
        page = traverser.traverse(snapshot, cursor)
        yield page
        if not page.has_more:
            return
        if not page.nodes:
            # Only an over-budget refusal leaves a page empty with more pending
            logger.debug("No progress at cursor %s; budget exhausted", page.next_cursor)
            return
        cursor = page.next_cursor


def get_file_data(client: FigmaClient,
                  file_key: str,
                  cursor: Optional[str] = None,
                  depth: Optional[int] = None,
                  **options) -> TraversalResult:
    """Fetch a file and return one page of its nodes.

    Args:
        client: Upstream client
        file_key: Figma file key
        cursor: Cursor from a previous page of the same file
        depth: Fetch depth hint passed to the API
        **options: Config options, camelCase or snake_case

    Returns:
        TraversalResult for the page
    """
    config = TraversalConfig.from_options(options)
    return ChunkedFigmaClient(client, config).get_file_data(file_key, cursor, depth)


def _as_document(document: DocumentLike) -> FigmaDocument:
    if isinstance(document, FigmaDocument):
        return document
    return FigmaDocument.from_response(document)
