"""Forward-only HTML token cursor.

Wraps the standard library's html.parser lexer so callers can pull one
token at a time from a document that is still arriving over the network.
Nothing here builds a tree: a token is a start tag, end tag, self-closing
tag, text run, comment, or doctype, in document order.

Example:
    cursor = TokenCursor.from_chunks(response.iter_content(8192), "utf-8")
    while (token := cursor.next()) is not None:
        ...
"""

from __future__ import annotations

import codecs
from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from html.parser import HTMLParser

from rfcsections.lib.errors import StreamError


class TokenKind(str, Enum):
    """Lexical token kinds produced by the cursor."""

    START_TAG = "start_tag"
    END_TAG = "end_tag"
    SELF_CLOSING = "self_closing"
    TEXT = "text"
    COMMENT = "comment"
    DOCTYPE = "doctype"


@dataclass(frozen=True)
class Token:
    """A single lexical unit.

    Attributes:
        kind: Token kind
        tag: Lower-cased element name ("" for text, comments and doctypes)
        attrs: Attribute (key, value) pairs in source order; value is None
            for attributes written without one
        data: Unescaped character data for text, comment and doctype tokens
    """

    kind: TokenKind
    tag: str = ""
    attrs: tuple[tuple[str, str | None], ...] = ()
    data: str = ""

    def attr(self, key: str) -> str | None:
        """Return the value of the first attribute named key, if any."""
        for name, value in self.attrs:
            if name == key:
                return value
        return None

    @property
    def is_text(self) -> bool:
        return self.kind is TokenKind.TEXT

    @classmethod
    def start(cls, tag: str, **attrs: str | None) -> Token:
        """Build a start tag token, mostly for fixtures."""
        return cls(TokenKind.START_TAG, tag, tuple(attrs.items()))

    @classmethod
    def end(cls, tag: str) -> Token:
        """Build an end tag token."""
        return cls(TokenKind.END_TAG, tag)

    @classmethod
    def text(cls, data: str) -> Token:
        """Build a text token."""
        return cls(TokenKind.TEXT, data=data)


class _TokenCollector(HTMLParser):
    """HTMLParser subclass that queues tokens instead of handling them."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.tokens: deque[Token] = deque()

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.tokens.append(Token(TokenKind.START_TAG, tag, tuple(attrs)))

    def handle_startendtag(
        self, tag: str, attrs: list[tuple[str, str | None]]
    ) -> None:
        self.tokens.append(Token(TokenKind.SELF_CLOSING, tag, tuple(attrs)))

    def handle_endtag(self, tag: str) -> None:
        self.tokens.append(Token(TokenKind.END_TAG, tag))

    def handle_data(self, data: str) -> None:
        # The lexer can split one run of text (e.g. around a stray "<");
        # downstream expects one token per run.
        if self.tokens and self.tokens[-1].kind is TokenKind.TEXT:
            previous = self.tokens.pop()
            data = previous.data + data
        self.tokens.append(Token(TokenKind.TEXT, data=data))

    def handle_comment(self, data: str) -> None:
        self.tokens.append(Token(TokenKind.COMMENT, data=data))

    def handle_decl(self, decl: str) -> None:
        self.tokens.append(Token(TokenKind.DOCTYPE, data=decl))

    def pop_token(self) -> Token:
        """Dequeue the oldest token, with CR and CRLF in text folded to LF."""
        token = self.tokens.popleft()
        if token.is_text and "\r" in token.data:
            data = token.data.replace("\r\n", "\n").replace("\r", "\n")
            token = Token(TokenKind.TEXT, data=data)
        return token


def tokenize(chunks: Iterable[bytes | str], encoding: str = "utf-8") -> Iterator[Token]:
    """Lazily lex a document delivered as a sequence of chunks.

    Args:
        chunks: Byte or str chunks in document order
        encoding: Encoding used to decode byte chunks

    Yields:
        Tokens in document order

    Raises:
        StreamError: If reading a chunk or decoding it fails
    """
    try:
        decoder = codecs.getincrementaldecoder(encoding)(errors="strict")
    except LookupError as e:
        raise StreamError(f"unknown document encoding '{encoding}'") from e

    parser = _TokenCollector()
    try:
        for chunk in chunks:
            text = decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
            if text:
                parser.feed(text)
            # A trailing text token may still grow with the next chunk, and a
            # CR ending this chunk may pair with an LF starting the next
            while parser.tokens and not (
                len(parser.tokens) == 1 and parser.tokens[0].is_text
            ):
                yield parser.pop_token()
        parser.feed(decoder.decode(b"", final=True))
        parser.close()
    except UnicodeDecodeError as e:
        raise StreamError(f"document is not valid {encoding}: {e}") from e
    except OSError as e:
        raise StreamError(f"document stream failed: {e}") from e

    while parser.tokens:
        yield parser.pop_token()


_NOTHING = object()


class TokenCursor:
    """Forward-only, single-pass cursor over a token stream.

    Supports one token of lookahead via peek(). Once a token is returned by
    next() it cannot be revisited.

    Attributes:
        consumed: Number of tokens returned by next() so far
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        """Create a cursor over an existing token iterable."""
        self._source = iter(tokens)
        self._peeked: object = _NOTHING
        self.consumed = 0

    @classmethod
    def from_chunks(
        cls, chunks: Iterable[bytes | str], encoding: str = "utf-8"
    ) -> TokenCursor:
        """Create a cursor that lexes chunks on demand."""
        return cls(tokenize(chunks, encoding))

    @classmethod
    def from_text(cls, markup: str) -> TokenCursor:
        """Create a cursor over an in-memory document."""
        return cls(tokenize([markup]))

    def peek(self) -> Token | None:
        """Return the next token without consuming it, or None at the end."""
        if self._peeked is _NOTHING:
            self._peeked = next(self._source, None)
        return self._peeked  # type: ignore[return-value]

    def next(self) -> Token | None:
        """Consume and return the next token, or None at the end."""
        token = self.peek()
        self._peeked = _NOTHING
        if token is not None:
            self.consumed += 1
        return token

    def __iter__(self) -> Iterator[Token]:
        while (token := self.next()) is not None:
            yield token
