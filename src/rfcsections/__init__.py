"""rfcsections - Extract numbered sections from RFC HTML documents into CSV.

The RFC HTML renderings mark every numbered section with an anchor and no
enclosing element. rfcsections walks the token stream once, rebuilds
(category, name, title, description) records, drops boilerplate categories,
and streams the rest to one CSV file per document.

Main features:
- Single-pass, bounded section extraction over a forward-only token cursor
- Elision of hidden and print-only markup
- Configurable via rfcsections.yaml, RFCSECTIONS_* variables, or CLI flags
"""

__version__ = "0.1.0"

from rfcsections.lib.errors import (  # noqa: E402
    ConfigError,
    DocumentError,
    MalformedDocument,
    OutputError,
    RetrievalError,
    RfcSectionsError,
    StreamError,
    UnsupportedContentType,
)

__all__ = [
    "__version__",
    "ConfigError",
    "DocumentError",
    "MalformedDocument",
    "OutputError",
    "RetrievalError",
    "RfcSectionsError",
    "StreamError",
    "UnsupportedContentType",
]
