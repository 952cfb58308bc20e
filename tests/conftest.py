"""Root pytest configuration for all tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.utils import T0, touch


# Configure pytest-asyncio to use auto mode
# This is redundant with pyproject.toml but ensures it's set
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """A small site tree with every file last modified at T0."""
    touch(tmp_path / "index.html", T0, "<html><body>Hello</body></html>")
    touch(tmp_path / ".hidden", T0, "secret")
    touch(tmp_path / "style.css", T0, "body { color: red; }")
    touch(tmp_path / "app.js", T0, "console.log('hi');")
    touch(tmp_path / "nested" / "page.html", T0, "<body>Nested</body>")
    return tmp_path
