"""Section extraction from a flat HTML token stream.

RFC-style HTML marks each numbered section with an anchor such as
``<a class="selflink" name="section-4.1" href="#section-4.1">4.1</a>``
followed by the heading text and then the plain-text body, with no
enclosing element per section. This module walks the token stream once and
rebuilds (category, name, title, description) records from that flat
sequence.

Key Features:
- Boundary detection on ``<a name="section...">`` start tags
- Bounded scans that raise MalformedDocument instead of looping forever
- Elision of hidden/print-only subtrees (class "invisible", "grey", "*noprint*")
- Body normalization: blank-line collapsing and indentation stripping
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from rfcsections.lib.errors import MalformedDocument
from rfcsections.lib.logging_config import get_logger
from rfcsections.lib.tokens import Token, TokenCursor, TokenKind
from rfcsections.models.config import ExtractionConfig
from rfcsections.models.section import Section

logger = get_logger(__name__)

_BLANK_LINES = re.compile(r"^\n+", re.MULTILINE)


class SectionExtractor:
    """Extracts Section records from a token cursor.

    The extractor holds only configuration; all scan state lives in the
    cursor passed to extract(), so one extractor can process many documents.

    Example:
        >>> extractor = SectionExtractor()
        >>> cursor = TokenCursor.from_text(html)
        >>> for section in extractor.extract(cursor):
        ...     print(section.name, section.title)
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        """Initialize the extractor.

        Args:
            config: Scanning rules; defaults match tools.ietf.org markup
        """
        self.config = config or ExtractionConfig()
        self._indent = (
            re.compile(rf"^ {{{self.config.indent_width}}}", re.MULTILINE)
            if self.config.indent_width
            else None
        )

    def is_boundary(self, token: Token) -> bool:
        """Check whether a token starts a new section."""
        if token.kind is not TokenKind.START_TAG:
            return False
        if token.tag != self.config.anchor_tag:
            return False
        name = token.attr("name")
        return name is not None and name.startswith(self.config.section_prefix)

    def is_blocked(self, token: Token) -> bool:
        """Check whether a tag hides its content from the extracted text."""
        if token.kind not in (TokenKind.START_TAG, TokenKind.SELF_CLOSING):
            return False
        css_class = token.attr("class")
        if css_class is None:
            return False
        if css_class in self.config.blocked_classes:
            return True
        return any(part in css_class for part in self.config.blocked_class_substrings)

    def extract(self, cursor: TokenCursor) -> Iterator[Section]:
        """Yield every section with a non-empty body, in document order.

        Args:
            cursor: Token cursor positioned anywhere before the first section

        Yields:
            Completed Section records

        Raises:
            MalformedDocument: If a bounded scan hits its cap or the stream
                ends before a section's name/title
            StreamError: If the underlying stream fails
        """
        category = ""
        emitted = 0
        dropped = 0

        while (token := cursor.next()) is not None:
            if not self.is_boundary(token):
                continue

            name = self.next_text(cursor, "section name")
            title = self.next_text(cursor, "section title")
            title = title.removeprefix(self.config.title_strip_prefix).strip()

            if self.config.separator not in name:
                category = title

            description = self.collect_body(cursor)
            if not description:
                dropped += 1
                logger.debug(f"Dropping section {name!r}: empty body")
                continue

            emitted += 1
            logger.debug(f"Extracted section {name!r} ({title!r}) in {category!r}")
            yield Section(
                category=category,
                name=name,
                title=title,
                description=description,
            )

        logger.info(
            f"Extraction finished: {emitted} sections, {dropped} empty, "
            f"{cursor.consumed} tokens"
        )

    def next_text(self, cursor: TokenCursor, what: str = "text") -> str:
        """Consume tokens up to and including the next text token.

        Args:
            cursor: Token cursor
            what: Description used in error messages

        Returns:
            The text token's data

        Raises:
            MalformedDocument: If the stream ends or the lookup cap is reached
        """
        for scanned in range(1, self.config.max_lookup_tokens + 1):
            token = cursor.next()
            if token is None:
                raise MalformedDocument(
                    f"stream ended while looking for {what}", tokens_scanned=scanned
                )
            if token.is_text:
                return token.data
        raise MalformedDocument(
            f"no {what} within {self.config.max_lookup_tokens} tokens",
            tokens_scanned=self.config.max_lookup_tokens,
        )

    def skip_subtree(self, cursor: TokenCursor, opener: Token) -> None:
        """Consume tokens through the end tag matching an already consumed opener.

        Nested elements with the same name are tracked by depth. Reaching the
        end of the stream ends the skip.

        Raises:
            MalformedDocument: If the lookup cap is reached
        """
        depth = 1
        for _ in range(self.config.max_lookup_tokens):
            token = cursor.next()
            if token is None:
                return
            if token.tag == opener.tag:
                if token.kind is TokenKind.START_TAG:
                    depth += 1
                elif token.kind is TokenKind.END_TAG:
                    depth -= 1
                    if depth == 0:
                        return
        raise MalformedDocument(
            f"no closing </{opener.tag}> within "
            f"{self.config.max_lookup_tokens} tokens",
            tokens_scanned=self.config.max_lookup_tokens,
        )

    def collect_body(self, cursor: TokenCursor) -> str:
        """Collect and normalize body text up to the next section boundary.

        The boundary token itself is left on the cursor.

        Raises:
            MalformedDocument: If the body cap is reached
        """
        parts: list[str] = []
        for _ in range(self.config.max_body_tokens + 1):
            token = cursor.peek()
            if token is None:
                break
            if self.is_blocked(token):
                cursor.next()
                if token.kind is TokenKind.START_TAG:
                    self.skip_subtree(cursor, token)
                continue
            if self.is_boundary(token):
                break

            cursor.next()
            if token.is_text:
                parts.append(token.data)
        else:
            raise MalformedDocument(
                f"section body exceeds {self.config.max_body_tokens} tokens",
                tokens_scanned=self.config.max_body_tokens,
            )

        return self.normalize_body("".join(parts))

    def normalize_body(self, text: str) -> str:
        """Collapse blank lines, strip body indentation, and trim."""
        text = _BLANK_LINES.sub("\n", text)
        if self._indent is not None:
            text = self._indent.sub("", text)
        return text.strip()


def extract_sections(
    cursor: TokenCursor, config: ExtractionConfig | None = None
) -> Iterator[Section]:
    """Convenience wrapper around SectionExtractor.extract."""
    return SectionExtractor(config).extract(cursor)
