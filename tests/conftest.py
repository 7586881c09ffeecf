"""Pytest configuration shared across the suite."""

import pytest


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def staging_dir(tmp_path):
    """Directory where uploads are staged during a test request."""
    return tmp_path / "uploads"
