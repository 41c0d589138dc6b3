"""Figma REST client and the chunked file-data front end.

FigmaClient is the upstream fetch collaborator: one blocking request per
call, no retries. ChunkedFigmaClient binds a client to a ChunkedTraverser so
that successive get_file_data calls share one admission session.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from .config import TraversalConfig, merge_config
from .core.node import FigmaDocument
from .core.traverser import ChunkedTraverser, TraversalResult
from .credentials import load_access_token
from .errors import BudgetExhausted, InvalidUpstreamData, UpstreamUnavailable

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.figma.com/v1"
DEFAULT_TIMEOUT = 30.0

# Node ids requested per /nodes call
NODE_BATCH_SIZE = 50


class FigmaClient:
    """Blocking client for the Figma REST API.

    Args:
        access_token: Personal access token sent as ``X-Figma-Token``
        base_url: API root
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
    """

    def __init__(self,
                 access_token: str,
                 base_url: str = DEFAULT_BASE_URL,
                 timeout: float = DEFAULT_TIMEOUT,
                 transport: Optional[httpx.BaseTransport] = None):
        self.base_url = base_url
        self.timeout = timeout
        self._access_token = access_token
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @classmethod
    def from_environment(cls, **kwargs) -> 'FigmaClient':
        """Create a client with the token found by load_access_token()."""
        return cls(load_access_token(), **kwargs)

    @property
    def client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers={
                    "X-Figma-Token": self._access_token,
                    "Accept": "application/json",
                },
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> 'FigmaClient':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        params = {k: v for k, v in (params or {}).items() if v is not None}
        logger.debug("GET %s %s", path, params)
        try:
            response = self.client.get(path, params=params)
        except httpx.TimeoutException as e:
            raise UpstreamUnavailable(f"Figma API timeout on {path}") from e
        except httpx.HTTPError as e:
            raise UpstreamUnavailable(f"Figma API unreachable: {e}") from e
        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> Any:
        """Decode a response, mapping HTTP errors to UpstreamUnavailable."""
        if response.status_code >= 400:
            raise UpstreamUnavailable(
                f"Figma API error: {_error_message(response)}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except json.JSONDecodeError as e:
            raise InvalidUpstreamData("Invalid response format from Figma API") from e

    def fetch_document(self, file_key: str, depth: Optional[int] = None) -> FigmaDocument:
        """Fetch a file and return its document root.

        Args:
            file_key: Figma file key
            depth: How deep into the document the API should go (None = all)

        Raises:
            UpstreamUnavailable: If the API cannot be reached or answers an error
            InvalidUpstreamData: If the payload has no document root
        """
        payload = self._get(f"/files/{file_key}", {"depth": depth})
        return FigmaDocument.from_response(payload)

    # Pass-through endpoints

    def list_files(self, project_id: Optional[str] = None, team_id: Optional[str] = None) -> Any:
        return self._get("/files", {"project_id": project_id, "team_id": team_id})

    def get_file_versions(self, file_key: str) -> Any:
        return self._get(f"/files/{file_key}/versions")

    def get_file_comments(self, file_key: str) -> Any:
        return self._get(f"/files/{file_key}/comments")

    def get_components(self, file_key: str) -> Any:
        return self._get(f"/files/{file_key}/components")

    def get_styles(self, file_key: str) -> Any:
        return self._get(f"/files/{file_key}/styles")

    def get_file_nodes(self, file_key: str, ids: Sequence[str]) -> Dict[str, Any]:
        """Fetch specific nodes, NODE_BATCH_SIZE ids per request.

        Returns:
            ``{"nodes": {...}}`` merged across all batches

        Raises:
            ValueError: If ``ids`` is empty
        """
        ids = list(ids)
        if not ids:
            raise ValueError("ids must not be empty")

        merged: Dict[str, Any] = {}
        for batch in _batches(ids, NODE_BATCH_SIZE):
            data = self._get(f"/files/{file_key}/nodes", {"ids": ",".join(batch)})
            merged.update(data.get("nodes") or {})
        return {"nodes": merged}


class ChunkedFigmaClient:
    """File-data access through a shared chunked traverser.

    All calls go through one ChunkedTraverser, so a node returned once is
    not returned again and the size budget is spent across calls. The
    pass-through endpoints refuse to run once that budget is used up, using
    the budget of the most recent get_file_data call.

    Args:
        client: Upstream client
        config: Default traversal configuration
    """

    def __init__(self, client: FigmaClient, config: Optional[TraversalConfig] = None):
        self.client = client
        self.traverser = ChunkedTraverser(config)
        # Config of the latest get_file_data call; its budget governs the pass-through calls
        self._active_config = self.traverser.config

    @property
    def config(self) -> TraversalConfig:
        return self.traverser.config

    def get_file_data(self,
                      file_key: str,
                      cursor: Optional[str] = None,
                      depth: Optional[int] = None,
                      **options) -> TraversalResult:
        """Fetch a file and return the next page of its nodes.

        Args:
            file_key: Figma file key
            cursor: Cursor from the previous page of this file
            depth: Fetch depth hint; defaults to what max_depth needs
            **options: TraversalConfig fields overriding the default for this call

        Returns:
            TraversalResult for the page
        """
        config = merge_config(self.config, **options) if options else None
        effective = config or self.config
        if depth is None and effective.max_depth is not None:
            # The API counts the document root as depth 0
            depth = effective.max_depth + 1

        document = self.client.fetch_document(file_key, depth)
        result = self.traverser.traverse(document, cursor, config)
        self._active_config = effective
        return result

    def _ensure_budget(self, what: str) -> None:
        if self.traverser.session.has_reached(self._active_config.effective_budget_mb):
            logger.debug("Memory limit reached before fetching %s", what)
            raise BudgetExhausted(f"Memory limit exceeded while processing {what}")

    def list_files(self, project_id: Optional[str] = None, team_id: Optional[str] = None) -> Any:
        self._ensure_budget("files")
        return self.client.list_files(project_id=project_id, team_id=team_id)

    def get_file_versions(self, file_key: str) -> Any:
        self._ensure_budget("versions")
        return self.client.get_file_versions(file_key)

    def get_file_comments(self, file_key: str) -> Any:
        self._ensure_budget("comments")
        return self.client.get_file_comments(file_key)

    def get_components(self, file_key: str) -> Any:
        self._ensure_budget("components")
        return self.client.get_components(file_key)

    def get_styles(self, file_key: str) -> Any:
        self._ensure_budget("styles")
        return self.client.get_styles(file_key)

    def get_file_nodes(self, file_key: str, ids: Sequence[str]) -> Dict[str, Any]:
        self._ensure_budget("nodes")
        return self.client.get_file_nodes(file_key, ids)


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except json.JSONDecodeError:
        return f"HTTP {response.status_code}"
    if isinstance(data, dict):
        return str(data.get("err") or data.get("message") or f"HTTP {response.status_code}")
    return f"HTTP {response.status_code}"


def _batches(items: List[str], size: int):
    for start in range(0, len(items), size):
        yield items[start:start + size]
