"""Validation utilities for rfcsections configuration."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError


def _describe(error: dict[str, Any]) -> str:
    """Render one pydantic error entry as ``Field '<dotted.path>': <msg>``."""
    loc = error.get("loc") or ("unknown",)
    field_path = ".".join(map(str, loc))
    message = f"Field '{field_path}': {error.get('msg', 'Unknown error')}"
    # Custom validators raise value_error; echo the rejected value for those
    if error.get("type") == "value_error":
        message += f" (received: {error.get('input')!r})"
    return message


def flatten_pydantic_errors(exc: PydanticValidationError) -> list[str]:
    """Turn a config ValidationError into one message per offending field.

    Example:
        >>> try:
        ...     AppConfig(extraction={"max_body_tokens": 0})
        ... except PydanticValidationError as e:
        ...     flatten_pydantic_errors(e)
        ["Field 'extraction.max_body_tokens': Input should be greater than 0"]
    """
    messages = [_describe(error) for error in exc.errors()]
    return messages or ["Validation failed with unknown error"]


def format_validation_error(exc: PydanticValidationError, source: str) -> str:
    """Render a validation failure as a single multi-line message.

    Args:
        exc: Pydantic ValidationError exception
        source: Where the values came from (file path, "environment", "cli")

    Returns:
        Message naming the source followed by one indented line per error
    """
    lines = [f"Invalid configuration from {source}:"]
    lines.extend(f"  {message}" for message in flatten_pydantic_errors(exc))
    return "\n".join(lines)
