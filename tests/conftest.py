"""Shared test fixtures for restquery.

Provides reusable operation fixtures and an isolated config environment.
These fixtures are automatically discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from restquery.models import APIOperation, APIParameter, HTTPMethod, ParameterLocation


# ---------------------------------------------------------------------------
# Operation fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def search_operation() -> APIOperation:
    """An operation mixing path, header and query parameters."""
    return APIOperation(
        path="/repos/{owner}/issues",
        method=HTTPMethod.GET,
        operation_id="listIssues",
        server_url="https://api.example.com",
        parameters=[
            APIParameter(name="owner", location=ParameterLocation.PATH, required=True),
            APIParameter(name="state", default="open"),
            APIParameter(name="X-Trace", location=ParameterLocation.HEADER),
            APIParameter(name="q", required=True),
            APIParameter(name="page"),
        ],
    )


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME at a subdirectory of tmp_path so that tests never
    touch real user config, forces the XDG code path, clears all
    RESTQUERY_* environment variables and changes the working directory to
    tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("restquery.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))

    for var in ["RESTQUERY_MISSING_REQUIRED", "RESTQUERY_DEFAULT_STYLE"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path
