"""HTTP client for fetching RFC HTML documents.

This module provides DocumentClient, which resolves document identifiers
("5280") to URLs, streams the response body, and validates status and
content type before any tokenizing starts.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from urllib.parse import unquote, urlparse

import requests
from requests.exceptions import RequestException

from rfcsections.lib.errors import (
    DocumentConnectionError,
    RetrievalError,
    UnsupportedContentType,
)
from rfcsections.lib.logging_config import get_logger
from rfcsections.lib.tokens import TokenCursor
from rfcsections.models.config import RetrievalConfig

logger = get_logger(__name__)

DEFAULT_ENCODING = "utf-8"


@dataclass
class RetrievedDocument:
    """An open, validated document response.

    Attributes:
        locator: Resolved URL
        status_code: HTTP status code
        content_type: Declared Content-Type header
        encoding: Encoding used to decode the body
        chunks: Lazy iterator over the raw body
    """

    locator: str
    status_code: int
    content_type: str
    encoding: str
    chunks: Iterator[bytes]

    def cursor(self) -> TokenCursor:
        """Return a token cursor that reads the body on demand."""
        return TokenCursor.from_chunks(self.chunks, self.encoding)


class DocumentClient:
    """Client for retrieving RFC HTML documents.

    Example:
        >>> client = DocumentClient()
        >>> with client.open(client.resolve_locator("5280")) as document:
        ...     cursor = document.cursor()
    """

    def __init__(
        self,
        config: RetrievalConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize client with retrieval settings.

        Args:
            config: Base URL, timeout and content type settings
            session: Optional pre-configured requests session
        """
        self.config = config or RetrievalConfig()
        self._session = session or requests.Session()

    def resolve_locator(self, identifier: str) -> str:
        """Turn a document identifier into a URL.

        Full http(s) URLs are returned unchanged; anything else is appended
        to the configured base URL ("5280" -> ".../html/rfc5280").
        """
        identifier = identifier.strip()
        if identifier.startswith(("http://", "https://")):
            return identifier
        return f"{self.config.base_url}{identifier}"

    @staticmethod
    def output_name(locator: str) -> str:
        """Derive the output file stem from a resolved URL.

        Uses the last path component, without an .html/.htm suffix, falling
        back to the host name for bare URLs.
        """
        parsed = urlparse(locator)
        name = posixpath.basename(unquote(parsed.path).rstrip("/"))
        for suffix in (".html", ".htm"):
            if name.lower().endswith(suffix):
                name = name[: -len(suffix)]
                break
        return name or parsed.netloc or "document"

    @contextmanager
    def open(self, locator: str) -> Iterator[RetrievedDocument]:
        """Open a streaming response and validate it.

        The response is closed when the context exits.

        Raises:
            DocumentConnectionError: Network/timeout issues
            RetrievalError: Non-2xx status code
            UnsupportedContentType: Content-Type is not HTML
        """
        logger.debug(f"GET {locator}")
        try:
            response = self._session.get(
                locator, stream=True, timeout=self.config.timeout
            )
        except RequestException as e:
            raise DocumentConnectionError(locator, original_error=e) from e

        try:
            if response.status_code // 100 != 2:
                raise RetrievalError(locator, response.status_code, response.reason)

            content_type = response.headers.get("Content-Type", "")
            if not content_type.lower().startswith(
                tuple(t.lower() for t in self.config.accepted_content_types)
            ):
                raise UnsupportedContentType(locator, content_type)

            # requests assumes ISO-8859-1 for text/* without a charset
            encoding = DEFAULT_ENCODING
            if "charset=" in content_type.lower() and response.encoding:
                encoding = response.encoding

            logger.info(f"Retrieved {locator} ({content_type})")
            yield RetrievedDocument(
                locator=locator,
                status_code=response.status_code,
                content_type=content_type,
                encoding=encoding,
                chunks=response.iter_content(chunk_size=self.config.chunk_size),
            )
        finally:
            response.close()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()
