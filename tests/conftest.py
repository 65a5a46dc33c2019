"""Shared pytest fixtures for nullconf tests."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from nullconf.config.settings import NullconfSettings


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> NullconfSettings:
    """Default settings, isolated from any NULLCONF_* environment."""
    for name in (
        "NULLCONF_JSON_OUTPUT",
        "NULLCONF_QUIET",
        "NULLCONF_VERBOSE",
        "NULLCONF_LOG_JSON",
        "NULLCONF_WEAKLY_TYPED_INPUT",
        "NULLCONF_ERROR_UNUSED",
    ):
        monkeypatch.delenv(name, raising=False)
    return NullconfSettings()
