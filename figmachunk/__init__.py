"""figmachunk - bounded, resumable pagination over design-file node trees.

A design file can be far too large to return in one response. figmachunk
walks the fetched node tree in pre-order and hands it out a page at a time,
within a size budget, together with a cursor for the next page.

Typical use:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from figmachunk import FigmaClient, ChunkedFigmaClient

    with FigmaClient.from_environment() as client:
        chunked = ChunkedFigmaClient(client)
        page = chunked.get_file_data("FILE_KEY", page_size=50)
        while page.has_more:
            page = chunked.get_file_data("FILE_KEY", cursor=page.next_cursor)
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from ._common import NodeType
from .config import TraversalConfig
from .errors import (
    FigmaChunkError,
    InvalidUpstreamData,
    InvalidCursor,
    UpstreamUnavailable,
    InvalidConfiguration,
    MissingCredentials,
    BudgetExhausted,
)
from .core import (
    FigmaNode,
    FigmaDocument,
    TraversalSession,
    AdmissionFilter,
    Decision,
    SkipReason,
    ChunkedTraverser,
    TraversalResult,
)
from .client import FigmaClient, ChunkedFigmaClient
from .credentials import load_access_token
from .api import traverse_document, iter_pages, get_file_data

__all__ = [
    "__version__",
    # Config
    "NodeType",
    "TraversalConfig",
    # Errors
    "FigmaChunkError",
    "InvalidUpstreamData",
    "InvalidCursor",
    "UpstreamUnavailable",
    "InvalidConfiguration",
    "MissingCredentials",
    "BudgetExhausted",
    # Core
    "FigmaNode",
    "FigmaDocument",
    "TraversalSession",
    "AdmissionFilter",
    "Decision",
    "SkipReason",
    "ChunkedTraverser",
    "TraversalResult",
    # Client
    "FigmaClient",
    "ChunkedFigmaClient",
    "load_access_token",
    # API
    "traverse_document",
    "iter_pages",
    "get_file_data",
]
