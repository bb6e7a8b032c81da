"""Retrieval of manifests, reference documents and schemas."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final
from urllib.parse import urldefrag, urlparse
from urllib.request import url2pathname

import requests

from .errors import TransportError
from .schema_loader import load_document, parse_document

DEFAULT_TIMEOUT: Final[float] = 30.0


def _local_path(url: str) -> Path | None:
    """Return the filesystem path for file:// URLs and bare paths."""
    parsed = urlparse(url)
    if parsed.scheme in ("http", "https"):
        return None
    if parsed.scheme == "file":
        path_str = url2pathname(parsed.path or "")
        if parsed.netloc and not path_str.startswith(parsed.netloc):
            path_str = parsed.netloc + path_str
        return Path(path_str)
    return Path(url)


class HttpFetcher:
    """Fetch and decode JSON documents, one attempt per URL.

    HTTP(S) URLs go through a single ``requests`` session; ``file://`` URLs
    and plain paths are read from disk (JSON, or YAML by extension).
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout = timeout
        self._session = session or requests.Session()

    def __call__(self, url: str) -> Any:
        """Return the decoded document at ``url``.

        Raises:
            TransportError: On network failure or a non-success status.
            DecodeError: If the body is not valid JSON.
        """
        location, _ = urldefrag(url)
        path = _local_path(location)
        if path is not None:
            return load_document(path)

        try:
            response = self._session.get(location, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(f"Request failed: {e}", url) from e
        return parse_document(response.text, url)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> HttpFetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
