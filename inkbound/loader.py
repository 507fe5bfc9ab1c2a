"""Book loading: fetch a JSON document and parse it into a Book.

The interpreter is given a loader matching the protocol:

    async def __call__(self, path: str) -> Book: ...

Implementations:

    HttpBookLoader    GET over HTTP(S) with httpx.
    FileBookLoader    reads from a books directory on disk.
    DefaultBookLoader picks one of the above from the locator's scheme.

Every failure (network, file system, JSON or schema) is raised as
BookLoadError so the interpreter can report it without touching its state.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol

import httpx
from pydantic import ValidationError

from inkbound.models import Book
from inkbound.validation import find_content_errors

logger = logging.getLogger(__name__)


class BookLoader(Protocol):
    async def __call__(self, path: str) -> Book: ...


class BookLoadError(RuntimeError):
    """Raised when a book cannot be fetched or parsed."""


def parse_book(raw: str | bytes, source: str) -> Book:
    """Parse a JSON document into a Book, logging any content errors found."""
    try:
        book = Book.model_validate_json(raw)
    except ValidationError as e:
        raise BookLoadError(
            f"Invalid book at {source}: {e.error_count()} validation error(s)"
        ) from e

    for problem in find_content_errors(book):
        logger.warning("content error in %s: %s", source, problem)
    return book


def is_url(path: str) -> bool:
    return path.startswith(("http://", "https://"))


# ---------------------------------------------------------------------------
# HttpBookLoader
# ---------------------------------------------------------------------------

class HttpBookLoader:
    """Fetches books over HTTP.

    Args:
        base_url: Prefix for relative locators, e.g. "https://cdn.example/books".
                  Absolute URLs are fetched as-is.
        timeout:  HTTP timeout in seconds. Defaults to 30.
    """

    def __init__(self, base_url: str = "", timeout: float = 30.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def _url(self, path: str) -> str:
        if is_url(path) or not self._base_url:
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    async def __call__(self, path: str) -> Book:
        url = self._url(path)
        logger.debug("fetching book url=%s", url)
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.get(url)
                resp.raise_for_status()
        except httpx.ConnectError as e:
            raise BookLoadError(f"Cannot connect to {url}") from e
        except httpx.HTTPStatusError as e:
            raise BookLoadError(
                f"Book server returned HTTP {e.response.status_code} for {url}"
            ) from e
        except httpx.TimeoutException as e:
            raise BookLoadError(f"Fetching {url} timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            raise BookLoadError(f"Fetching {url} failed: {type(e).__name__}: {e}") from e

        return parse_book(resp.content, url)


# ---------------------------------------------------------------------------
# FileBookLoader
# ---------------------------------------------------------------------------

class FileBookLoader:
    """Reads books from disk, relative to `root` unless the path is absolute."""

    def __init__(self, root: Path = Path(".")) -> None:
        self._root = root

    def _resolve(self, path: str) -> Path:
        candidate = Path(path)
        return candidate if candidate.is_absolute() else self._root / candidate

    async def __call__(self, path: str) -> Book:
        file = self._resolve(path)
        logger.debug("reading book file=%s", file)
        try:
            raw = await asyncio.to_thread(file.read_bytes)
        except OSError as e:
            raise BookLoadError(f"Cannot read {file}: {e.strerror or e}") from e
        return parse_book(raw, str(file))


# ---------------------------------------------------------------------------
# DefaultBookLoader
# ---------------------------------------------------------------------------

class DefaultBookLoader:
    """URLs go to HttpBookLoader, everything else to FileBookLoader."""

    def __init__(self, books_dir: Path = Path("."), timeout: float = 30.0) -> None:
        self._http = HttpBookLoader(timeout=timeout)
        self._files = FileBookLoader(books_dir)

    async def __call__(self, path: str) -> Book:
        if is_url(path):
            return await self._http(path)
        return await self._files(path)
