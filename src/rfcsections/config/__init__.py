"""Configuration loading, validation, and defaults for rfcsections.

Main components:
- ConfigLoader (rfcsections.config.loader): load rfcsections.yaml, apply
  RFCSECTIONS_* environment variables and CLI overrides
- flatten_pydantic_errors (rfcsections.config.validator): readable messages
- Default values (rfcsections.config.defaults)

Submodules are imported directly; this package does not re-export them
because rfcsections.models.config depends on the defaults module.
"""
