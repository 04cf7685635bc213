"""Shared fixtures for the pythemekit test suite."""

import base64

import pytest

from pythemekit.config import Configuration

# 1x1 PNG
PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAAEUlEQVR4nGJiYGBgAAQAAP//"
    "AA8AA/6P688AAAAASUVORK5CYII="
)


@pytest.fixture
def binary_data():
    """Raw bytes of a tiny PNG image."""
    return base64.b64decode(PNG_BASE64)


@pytest.fixture
def config(tmp_path):
    """Configuration for a numbered theme rooted in a temp directory."""
    return Configuration(
        domain="test.myshopify.com",
        access_token="sharknado",
        theme_id=123,
        directory=tmp_path,
    )


@pytest.fixture
def project(tmp_path, binary_data):
    """A small theme project on disk."""
    files = {
        "assets/application.js": "this is js content\n",
        "config/settings_data.json": '{"current": "Default"}',
        "layout/theme.liquid": "<html>{{ content_for_layout }}</html>",
        "snippets/header.liquid": "<header></header>",
        "templates/index.liquid": "index",
        "templates/customers/login.liquid": "login",
        "assets/.gitkeep": "",
        "README.md": "not a theme file",
    }
    for name, content in files.items():
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    (tmp_path / "assets" / "image.png").write_bytes(binary_data)
    return tmp_path


@pytest.fixture
def collect_events():
    """Wait for an operation to finish and return every event it reported."""

    def collect(event_log, done, timeout=5.0):
        assert done.wait(timeout), "operation did not complete"
        event_log.close()
        return list(event_log)

    return collect

