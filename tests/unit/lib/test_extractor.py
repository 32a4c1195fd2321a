"""Tests for SectionExtractor.

Covers boundary recognition, category carry-forward, blocked subtree
elision, body normalization, and the bounded-scan failure modes.
"""

import pytest

from rfcsections.lib.errors import MalformedDocument, StreamError
from rfcsections.lib.extractor import SectionExtractor, extract_sections
from rfcsections.lib.tokens import Token, TokenCursor, TokenKind
from rfcsections.models.config import ExtractionConfig


def _boundary(name: str) -> Token:
    return Token.start("a", **{"class": "selflink", "name": f"section-{name}"})


def _section(name: str, title: str, body: str) -> list[Token]:
    """Tokens for one section as rendered on tools.ietf.org."""
    return [
        _boundary(name),
        Token.text(name),
        Token.end("a"),
        Token.text(title),
        Token.end("h2"),
        Token.text(body),
    ]


def _extract(tokens: list[Token], **config: object) -> list:
    extractor = SectionExtractor(ExtractionConfig(**config))
    return list(extractor.extract(TokenCursor(tokens)))


def _html(markup: str) -> list:
    return list(extract_sections(TokenCursor.from_text(markup)))


class TestBoundaryRecognition:
    """Tests for is_boundary."""

    @pytest.fixture
    def extractor(self) -> SectionExtractor:
        return SectionExtractor()

    def test_anchor_with_section_name(self, extractor: SectionExtractor) -> None:
        """Test that <a name="section-..."> is a boundary."""
        assert extractor.is_boundary(Token.start("a", name="section-4.1"))

    def test_name_prefix_without_dash(self, extractor: SectionExtractor) -> None:
        """Test that any name starting with "section" counts."""
        assert extractor.is_boundary(Token.start("a", name="sectionA"))

    def test_other_anchor_names(self, extractor: SectionExtractor) -> None:
        """Test that appendix and page anchors are not boundaries."""
        assert not extractor.is_boundary(Token.start("a", name="appendix-A"))
        assert not extractor.is_boundary(Token.start("a", name="page-2"))

    def test_href_only_anchor(self, extractor: SectionExtractor) -> None:
        """Test that a link to a section is not itself a boundary."""
        assert not extractor.is_boundary(Token.start("a", href="#section-1"))

    def test_non_anchor_element(self, extractor: SectionExtractor) -> None:
        """Test that other elements with a section name are ignored."""
        assert not extractor.is_boundary(Token.start("div", name="section-1"))

    def test_end_and_self_closing_tags(self, extractor: SectionExtractor) -> None:
        """Test that only start tags can be boundaries."""
        attrs = (("name", "section-1"),)
        assert not extractor.is_boundary(Token(TokenKind.END_TAG, "a", attrs))
        assert not extractor.is_boundary(Token(TokenKind.SELF_CLOSING, "a", attrs))

    def test_valueless_name(self, extractor: SectionExtractor) -> None:
        """Test that <a name> without a value is not a boundary."""
        token = Token(TokenKind.START_TAG, "a", (("name", None),))
        assert not extractor.is_boundary(token)

    def test_custom_prefix(self) -> None:
        """Test a configured section prefix."""
        extractor = SectionExtractor(ExtractionConfig(section_prefix="sec-"))
        assert extractor.is_boundary(Token.start("a", name="sec-2"))
        assert not extractor.is_boundary(Token.start("a", name="section-2"))


class TestBlockedElements:
    """Tests for is_blocked."""

    @pytest.fixture
    def extractor(self) -> SectionExtractor:
        return SectionExtractor()

    @pytest.mark.parametrize(
        "class_value",
        ["invisible", "grey", "noprint", "top noprint", "noprint-header"],
    )
    def test_blocked_classes(
        self, extractor: SectionExtractor, class_value: str
    ) -> None:
        """Test exact and substring class matches."""
        assert extractor.is_blocked(Token.start("span", **{"class": class_value}))

    @pytest.mark.parametrize("class_value", ["greyish", "grey h2", "visible", ""])
    def test_unblocked_classes(
        self, extractor: SectionExtractor, class_value: str
    ) -> None:
        """Test that "invisible" and "grey" require an exact match."""
        assert not extractor.is_blocked(Token.start("span", **{"class": class_value}))

    def test_self_closing_can_be_blocked(self, extractor: SectionExtractor) -> None:
        """Test that a self-closing tag is checked too."""
        token = Token(TokenKind.SELF_CLOSING, "hr", (("class", "noprint"),))
        assert extractor.is_blocked(token)

    def test_text_is_never_blocked(self, extractor: SectionExtractor) -> None:
        """Test that text tokens are never blocked."""
        assert not extractor.is_blocked(Token.text("noprint"))


class TestExtractScenarios:
    """End-to-end extraction over token fixtures."""

    def test_two_sections(self) -> None:
        """Test the basic name/title/body layout."""
        tokens = _section("1", ". Introduction", "   Some intro text.\n")
        tokens += _section("2", ". Overview", "   Core overview.\n")

        sections = _extract(tokens)

        assert [(s.category, s.name, s.title, s.description) for s in sections] == [
            ("Introduction", "1", "Introduction", "Some intro text."),
            ("Overview", "2", "Overview", "Core overview."),
        ]
        assert all(s.notes == "" for s in sections)

    def test_category_carries_across_subsections(self) -> None:
        """Test that subsections inherit the last top-level title."""
        tokens: list[Token] = []
        for name, title in [
            ("1", "Alpha"),
            ("1.1", "Alpha One"),
            ("1.1.1", "Alpha One One"),
            ("2", "Beta"),
            ("2.1", "Beta One"),
        ]:
            tokens += _section(name, f".  {title}", "   body\n")

        sections = _extract(tokens)

        assert [(s.name, s.category) for s in sections] == [
            ("1", "Alpha"),
            ("1.1", "Alpha"),
            ("1.1.1", "Alpha"),
            ("2", "Beta"),
            ("2.1", "Beta"),
        ]

    def test_category_starts_empty(self) -> None:
        """Test that a leading subsection has an empty category."""
        sections = _extract(_section("1.1", ". Orphan", "text"))

        assert sections[0].category == ""

    def test_category_updates_even_when_body_is_empty(self) -> None:
        """Test that an empty top-level section still sets the category."""
        tokens = _section("3", ". Gamma", "\n\n")
        tokens += _section("3.1", ". Gamma One", "   text\n")

        sections = _extract(tokens)

        assert [(s.name, s.category) for s in sections] == [("3.1", "Gamma")]

    def test_empty_bodies_are_dropped(self) -> None:
        """Test that whitespace-only bodies produce no section."""
        tokens = _section("1", ". A", "   \n\n   \n")
        tokens += _section("2", ". B", "text")

        sections = _extract(tokens)

        assert [s.name for s in sections] == ["2"]

    def test_document_order_is_preserved(self) -> None:
        """Test that sections come out in boundary order."""
        names = ["1", "1.1", "1.2", "2", "10", "10.1"]
        tokens: list[Token] = []
        for name in names:
            tokens += _section(name, ". T", f"body {name}")

        assert [s.name for s in _extract(tokens)] == names

    def test_title_strip_removes_one_prefix(self) -> None:
        """Test title cleanup."""
        tokens = _section("1", ".  Spaced Title  ", "x")
        tokens += _section("2", "No Dot", "x")
        tokens += _section("3", "..Double", "x")

        assert [s.title for s in _extract(tokens)] == [
            "Spaced Title",
            "No Dot",
            ".Double",
        ]

    def test_custom_separator(self) -> None:
        """Test category detection with a different separator."""
        tokens = _section("A", ". Top", "x") + _section("A-1", ". Sub", "y")

        sections = _extract(tokens, separator="-")

        assert [s.category for s in sections] == ["Top", "Top"]

    def test_preamble_before_first_section_is_ignored(self) -> None:
        """Test that text before the first boundary produces nothing."""
        tokens = [Token.start("pre"), Token.text("Network Working Group\n")]
        tokens += _section("1", ". Intro", "body")

        sections = _extract(tokens)

        assert len(sections) == 1
        assert "Network" not in sections[0].description

    def test_no_sections(self) -> None:
        """Test a document without boundaries."""
        assert _extract([Token.start("p"), Token.text("x"), Token.end("p")]) == []

    def test_boundary_is_not_consumed_by_body_scan(self) -> None:
        """Test that back-to-back sections are all found."""
        tokens = [
            _boundary("1"),
            Token.text("1"),
            Token.text(". One"),
            Token.text("first"),
            _boundary("2"),
            Token.text("2"),
            Token.text(". Two"),
            Token.text("second"),
        ]

        assert [s.description for s in _extract(tokens)] == ["first", "second"]


class TestBodyCollection:
    """Tests for blocked subtree elision in section bodies."""

    def test_noprint_subtree_is_elided(self) -> None:
        """Test that a noprint div and its nested content are dropped."""
        sections = _html(
            '<a name="section-1">1</a>. Intro'
            '<div class="noprint">TEXT_A<span>NESTED</span></div>TEXT_B'
            '<a name="section-2">2</a>. Next body'
        )

        assert sections[0].description == "TEXT_B"
        assert "TEXT_A" not in sections[0].description
        assert "NESTED" not in sections[0].description

    def test_nested_same_element_is_depth_tracked(self) -> None:
        """Test that the skip ends at the matching close tag."""
        sections = _html(
            '<a name="section-1">1</a>. Intro'
            '<div class="invisible">A<div>B<div>C</div></div>D</div>E'
        )

        assert sections[0].description == "E"

    def test_blocked_self_closing_tag_is_skipped(self) -> None:
        """Test that a self-closing blocked tag does not swallow content."""
        sections = _html(
            '<a name="section-1">1</a>. Intro'
            '</h2>before<hr class="noprint" />after'
        )

        assert sections[0].description == "beforeafter"

    def test_grey_page_header_is_elided(self) -> None:
        """Test that grey pagination spans are removed from bodies."""
        sections = _html(
            '<a name="section-1">1</a>. Intro</h2>\n'
            "   First part.\n"
            '<span class="grey">Author   Standards Track   [Page 2]</span>\n'
            "   Second part.\n"
        )

        assert sections[0].description == "First part.\n\nSecond part."

    def test_unclosed_blocked_element_ends_at_stream_end(self) -> None:
        """Test that an unclosed blocked element hides the rest quietly."""
        sections = _html(
            '<a name="section-1">1</a>. Intro'
            '</h2>kept<span class="grey">hidden'
        )

        assert sections[0].description == "kept"

    def test_markup_inside_body_is_dropped(self) -> None:
        """Test that only text content contributes to the body."""
        sections = _html(
            '<a name="section-1">1</a>. Intro'
            '</h2>   See <a href="#section-2">Section 2</a> for &lt;details&gt;.\n'
        )

        assert sections[0].description == "See Section 2 for <details>."

    def test_crlf_body_is_normalized(self) -> None:
        """Test blank-line collapsing and indent stripping on CRLF pages."""
        sections = _html(
            '<a name="section-1">1</a>. Intro</h2>'
            "\r\n\r\n\r\n   line one\r\n   line two\r\n"
        )

        assert sections[0].description == "line one\nline two"

    def test_crlf_paragraph_break_across_chunks(self) -> None:
        """Test a CRLF body delivered in chunks that split the line breaks."""
        markup = (
            b'<a name="section-1">1</a>. Intro</h2>\r\n'
            b"   first\r\n\r\n\r\n   second\r\n"
        )
        chunks = [markup[i : i + 3] for i in range(0, len(markup), 3)]

        sections = list(extract_sections(TokenCursor.from_chunks(chunks)))

        assert sections[0].description == "first\n\nsecond"

    def test_comments_do_not_contribute(self) -> None:
        """Test that comments are ignored."""
        sections = _html(
            '<a name="section-1">1</a>. Intro</h2>a<!--NewPage-->b'
        )

        assert sections[0].description == "ab"


class TestNormalizeBody:
    """Tests for normalize_body."""

    def test_blank_lines_and_indentation(self) -> None:
        """Test the canonical normalization example."""
        extractor = SectionExtractor()

        assert (
            extractor.normalize_body("\n\n\nline one\n   line two\n")
            == "line one\nline two"
        )

    def test_blank_line_runs_collapse_to_one(self) -> None:
        """Test that paragraph breaks survive as a single blank line."""
        extractor = SectionExtractor()

        assert extractor.normalize_body("   a\n\n\n\n   b") == "a\n\nb"

    def test_only_fixed_indent_is_stripped(self) -> None:
        """Test that deeper indentation keeps the remainder."""
        extractor = SectionExtractor()

        assert extractor.normalize_body("   a\n      b\n  c") == "a\n   b\n  c"

    def test_custom_indent_width(self) -> None:
        """Test a configured indentation width."""
        extractor = SectionExtractor(ExtractionConfig(indent_width=2))

        assert extractor.normalize_body("x\n   y") == "x\n y"

    def test_zero_indent_width_disables_stripping(self) -> None:
        """Test that indent_width=0 keeps indentation."""
        extractor = SectionExtractor(ExtractionConfig(indent_width=0))

        assert extractor.normalize_body("x\n   y") == "x\n   y"

    def test_empty_input(self) -> None:
        """Test normalization of empty text."""
        assert SectionExtractor().normalize_body("\n\n   \n") == ""


class TestBoundedScans:
    """Tests for MalformedDocument and StreamError propagation."""

    def test_boundary_without_name_text(self) -> None:
        """Test a boundary followed only by tags until end of stream."""
        tokens = [_boundary("1"), Token.end("a"), Token.end("h2")]

        with pytest.raises(MalformedDocument, match="section name"):
            _extract(tokens)

    def test_boundary_without_title_text(self) -> None:
        """Test a boundary whose title never arrives."""
        tokens = [_boundary("1"), Token.text("1"), Token.end("a")]

        with pytest.raises(MalformedDocument, match="section title"):
            _extract(tokens)

    def test_no_record_before_malformed_section(self) -> None:
        """Test that earlier sections are yielded before the failure."""
        extractor = SectionExtractor()
        tokens = _section("1", ". Fine", "ok") + [_boundary("2")]
        iterator = extractor.extract(TokenCursor(tokens))

        first = next(iterator)
        assert first.name == "1"
        with pytest.raises(MalformedDocument):
            next(iterator)

    def test_name_lookup_cap(self) -> None:
        """Test that a long run of tags without text hits the lookup cap."""
        tokens = [_boundary("1")] + [Token.start("b")] * 10 + [Token.text("1")]

        with pytest.raises(MalformedDocument, match="within 5 tokens") as exc_info:
            _extract(tokens, max_lookup_tokens=5)

        assert exc_info.value.tokens_scanned == 5

    def test_body_cap(self) -> None:
        """Test that an overly long body hits the body cap."""
        tokens = _section("1", ". T", "x") + [Token.start("b")] * 20

        with pytest.raises(MalformedDocument, match="exceeds 10 tokens"):
            _extract(tokens, max_body_tokens=10)

    def test_body_exactly_at_cap(self) -> None:
        """Test that a body of exactly max_body_tokens tokens is accepted."""
        tokens = [_boundary("1"), Token.text("1"), Token.text(". T")]
        tokens += [Token.text("x")] + [Token.start("b")] * 4

        sections = _extract(tokens, max_body_tokens=5)

        assert sections[0].description == "x"

    def test_skip_cap(self) -> None:
        """Test that an unclosed blocked element longer than the cap fails."""
        tokens = _section("1", ". T", "x")
        tokens += [Token.start("div", **{"class": "grey"})]
        tokens += [Token.text("y")] * 10

        with pytest.raises(MalformedDocument, match="no closing </div>"):
            _extract(tokens, max_lookup_tokens=5)

    def test_stream_error_propagates(self) -> None:
        """Test that a failing byte source surfaces as StreamError."""

        def chunks():
            yield b'<a name="section-1">1</a>. Intro body'
            raise OSError("connection reset")

        extractor = SectionExtractor()
        with pytest.raises(StreamError):
            list(extractor.extract(TokenCursor.from_chunks(chunks())))


class TestSampleDocument:
    """Extraction over the bundled RFC-style HTML fixture."""

    def test_sample_sections(self, sample_rfc_html: str) -> None:
        """Test the full fixture, before category filtering."""
        sections = _html(sample_rfc_html)

        assert [(s.name, s.title, s.category) for s in sections] == [
            ("1", "Introduction", "Introduction"),
            ("1.1", "Requirements Language", "Introduction"),
            ("2", "Protocol Overview", "Protocol Overview"),
            ("2.1", "Frame Format", "Protocol Overview"),
            ("3", "IANA Considerations", "IANA Considerations"),
            ("3.1", "Registry", "IANA Considerations"),
        ]

    def test_sample_page_break_is_removed(self, sample_rfc_html: str) -> None:
        """Test that page headers and footers do not leak into bodies."""
        overview = next(s for s in _html(sample_rfc_html) if s.name == "2")

        assert overview.description == (
            "A client opens a widget stream & sends frames.\n\n"
            "Frames are never reordered."
        )
