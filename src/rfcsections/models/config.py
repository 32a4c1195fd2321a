"""Configuration models for rfcsections.

These Pydantic models hold every tunable used by the extractor, the
document client, and the output stage. Defaults come from
rfcsections.config.defaults so YAML files only need to override what
differs.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rfcsections.config.defaults import (
    DEFAULT_EXTRACTION_CONFIG,
    DEFAULT_OUTPUT_CONFIG,
    DEFAULT_RETRIEVAL_CONFIG,
)


class ExtractionConfig(BaseModel):
    """Token scanning rules for section extraction.

    Attributes:
        anchor_tag: Element name of section boundary markers
        section_prefix: Required prefix of the marker's name attribute
        separator: Character that marks a subsection designator ("4.1")
        title_strip_prefix: Leading character removed from titles
        blocked_classes: Class values whose subtree is elided (exact match)
        blocked_class_substrings: Class substrings whose subtree is elided
        indent_width: Number of leading spaces stripped from each body line
        max_lookup_tokens: Cap for name/title lookup and subtree skipping
        max_body_tokens: Cap for collecting one section body
    """

    model_config = ConfigDict(extra="forbid")

    anchor_tag: str = Field(default=DEFAULT_EXTRACTION_CONFIG["anchor_tag"])
    section_prefix: str = Field(default=DEFAULT_EXTRACTION_CONFIG["section_prefix"])
    separator: str = Field(default=DEFAULT_EXTRACTION_CONFIG["separator"])
    title_strip_prefix: str = Field(
        default=DEFAULT_EXTRACTION_CONFIG["title_strip_prefix"]
    )
    blocked_classes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTRACTION_CONFIG["blocked_classes"])
    )
    blocked_class_substrings: list[str] = Field(
        default_factory=lambda: list(
            DEFAULT_EXTRACTION_CONFIG["blocked_class_substrings"]
        )
    )
    indent_width: int = Field(default=DEFAULT_EXTRACTION_CONFIG["indent_width"], ge=0)
    max_lookup_tokens: int = Field(
        default=DEFAULT_EXTRACTION_CONFIG["max_lookup_tokens"], gt=0
    )
    max_body_tokens: int = Field(
        default=DEFAULT_EXTRACTION_CONFIG["max_body_tokens"], gt=0
    )

    @field_validator("anchor_tag")
    @classmethod
    def validate_anchor_tag(cls, v: str) -> str:
        """Validate anchor_tag is a non-empty element name."""
        if not v or not v.strip():
            raise ValueError("anchor_tag must be a non-empty string")
        return v.strip().lower()

    @field_validator("section_prefix", "separator")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        """Validate marker prefix and separator are not empty."""
        if not v:
            raise ValueError("must be a non-empty string")
        return v


class RetrievalConfig(BaseModel):
    """Document retrieval settings.

    Attributes:
        base_url: Prefix joined with bare document identifiers
        timeout: Request timeout in seconds
        chunk_size: Bytes read from the response per tokenizer feed
        accepted_content_types: Content-Type prefixes treated as HTML
    """

    model_config = ConfigDict(extra="forbid")

    base_url: str = Field(default=DEFAULT_RETRIEVAL_CONFIG["base_url"])
    timeout: float = Field(default=DEFAULT_RETRIEVAL_CONFIG["timeout"], gt=0)
    chunk_size: int = Field(default=DEFAULT_RETRIEVAL_CONFIG["chunk_size"], gt=0)
    accepted_content_types: list[str] = Field(
        default_factory=lambda: list(
            DEFAULT_RETRIEVAL_CONFIG["accepted_content_types"]
        )
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate base_url is an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v


class OutputConfig(BaseModel):
    """Output destination and category filtering.

    Attributes:
        output_dir: Directory receiving one CSV per document
        exclude_categories: Categories dropped before writing (case-insensitive)
    """

    model_config = ConfigDict(extra="forbid")

    output_dir: str = Field(default=DEFAULT_OUTPUT_CONFIG["output_dir"])
    exclude_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_OUTPUT_CONFIG["exclude_categories"])
    )


class AppConfig(BaseModel):
    """Top-level configuration as loaded from rfcsections.yaml."""

    model_config = ConfigDict(extra="forbid")

    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
