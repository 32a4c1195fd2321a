"""Shared library code: tokens, extraction, output, pipeline, errors."""
