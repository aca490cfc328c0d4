"""Data providers: the boundary that supplies metric trees.

The engine never talks to a host directly; it is handed a ``DataProvider``
and awaits ``fetch_tree(query)``. Every failure at this boundary surfaces as
``DataFetchError`` so the render cycle can abort cleanly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import httpx
import orjson
from loguru import logger
from pydantic import ValidationError

from ..config.defaults import DEFAULT_PROVIDER_TIMEOUT, XSSI_PREFIX
from .exceptions import DataFetchError
from .models import Node
from .tree_builder import (
    build_tree,
    exclusive_prefixes,
    filter_tree,
    propagate_inherited,
)


@runtime_checkable
class DataProvider(Protocol):
    """Supplies the tree for a filter query."""

    async def fetch_tree(self, query: str | None = None) -> Node | None: ...


def parse_tree_payload(payload: Any) -> Node | None:
    """Turn a decoded JSON payload into a tree.

    Accepts either a nested tree object or a flat list of project records
    (``{name, parent, values, exclusive}``). ``null`` means an empty tree.

    Raises:
        DataFetchError: If the payload has neither shape
    """
    if payload is None:
        return None
    try:
        if isinstance(payload, list):
            root = build_tree(payload)
            return propagate_inherited(root, exclusive_prefixes(payload))
        if isinstance(payload, dict):
            return Node.from_json(payload)
    except ValidationError as e:
        raise DataFetchError(f"Malformed tree data: {e}") from e
    raise DataFetchError(
        f"Unexpected tree payload type: {type(payload).__name__}",
        context={"type": type(payload).__name__},
    )


def _decode_body(content: bytes) -> Any:
    text = content.lstrip()
    prefix = XSSI_PREFIX.encode()
    if text.startswith(prefix):
        text = text[len(prefix) :]
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError as e:
        raise DataFetchError(f"Provider returned invalid JSON: {e}") from e


class HttpTreeProvider:
    """Fetch trees from a REST endpoint: ``GET {base_url}/tree?query=...``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_PROVIDER_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize provider.

        Args:
            base_url: Endpoint prefix, the ``/tree`` path is appended
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def fetch_tree(self, query: str | None = None) -> Node | None:
        params = {"query": query} if query else {}
        url = f"{self.base_url}/tree"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Tree request failed: {e.response.status_code} {url}")
            raise DataFetchError(
                f"Provider returned HTTP {e.response.status_code}",
                context={"url": url, "status": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Tree request failed: {e}")
            raise DataFetchError(
                f"Provider request failed: {e}", context={"url": url}
            ) from e

        return parse_tree_payload(_decode_body(response.content))


class JsonFileTreeProvider:
    """Serve trees from a JSON file, applying the filter query locally.

    The file is re-read on every fetch so edits show up on the next render.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    async def fetch_tree(self, query: str | None = None) -> Node | None:
        try:
            content = self.path.read_bytes()
        except OSError as e:
            raise DataFetchError(
                f"Cannot read tree data from {self.path}: {e}",
                context={"path": str(self.path)},
            ) from e

        root = parse_tree_payload(_decode_body(content))
        return filter_tree(root, query)
