"""Shared fixtures for CLI command tests."""

from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from rfcsections.config.defaults import ENV_VAR_MAP


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def workdir(temp_dir: Path, monkeypatch: Any) -> Path:
    """Run the command from an empty directory with no RFCSECTIONS_* set.

    Returns:
        Path to the working directory
    """
    monkeypatch.chdir(temp_dir)
    for env_var in ENV_VAR_MAP.values():
        monkeypatch.delenv(env_var, raising=False)
    return temp_dir
