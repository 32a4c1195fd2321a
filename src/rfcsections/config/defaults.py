"""Default configuration values for rfcsections."""

from typing import Any

# Section scanning defaults
DEFAULT_EXTRACTION_CONFIG: dict[str, Any] = {
    "anchor_tag": "a",
    "section_prefix": "section",
    "separator": ".",
    "title_strip_prefix": ".",
    "blocked_classes": ["invisible", "grey"],
    "blocked_class_substrings": ["noprint"],
    "indent_width": 3,  # RFC body text is indented three spaces
    "max_lookup_tokens": 100_000,
    "max_body_tokens": 10_000,
}

# Document retrieval defaults
DEFAULT_RETRIEVAL_CONFIG: dict[str, Any] = {
    "base_url": "https://tools.ietf.org/html/rfc",
    "timeout": 30.0,  # seconds
    "chunk_size": 8192,  # bytes
    "accepted_content_types": ["text/html"],
}

# Output defaults
DEFAULT_OUTPUT_CONFIG: dict[str, Any] = {
    "output_dir": ".",
    "exclude_categories": [
        "Introduction",
        "Definitions",
        "IANA Considerations",
        "Acknowledgements",
        "References",
    ],
}

# Config file names searched in the working directory, in preference order
CONFIG_FILE_NAMES: tuple[str, ...] = ("rfcsections.yml", "rfcsections.yaml")

# Environment variable overrides: (section, field) -> variable name
ENV_VAR_MAP: dict[tuple[str, str], str] = {
    ("retrieval", "base_url"): "RFCSECTIONS_BASE_URL",
    ("retrieval", "timeout"): "RFCSECTIONS_TIMEOUT",
    ("output", "output_dir"): "RFCSECTIONS_OUTPUT_DIR",
}
