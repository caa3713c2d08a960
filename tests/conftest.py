"""Pytest fixtures for realtime console tests."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import httpx
import pytest

from realtime_console.config import ConsoleConfig, RealtimeConfig, RenderConfig, ServerConfig

TEMPLATE = """<!doctype html>
<html>
  <head>
    <title>Console</title>
    <link rel="stylesheet" href="/app.css" />
  </head>
  <body>
    <div id="root"><!--ssr-outlet--></div>
    <script type="module" src="/app.js"></script>
  </body>
</html>
"""

LIVE_ENTRY = '''
def render(url):
    return {"html": f"<div data-url={url!r}>live</div>"}
'''

COMPILED_ENTRY = '''
def render(url):
    return {"html": "<div>X</div>"}
'''

SESSIONS_URL = "https://upstream.test/v1/realtime/sessions"


def write_source(path: Path, text: str) -> None:
    """Write ``text`` and push the mtime forward so change detection always sees it."""
    existed = path.exists()
    previous = path.stat().st_mtime_ns if existed else 0
    path.write_text(text, encoding="utf-8")
    if existed:
        bumped = previous + 1_000_000_000
        os.utime(path, ns=(bumped, bumped))


@pytest.fixture
def client_root(tmp_path: Path) -> Path:
    """Client sources as used in live mode."""
    root = tmp_path / "client"
    root.mkdir()
    (root / "index.html").write_text(TEMPLATE, encoding="utf-8")
    (root / "entry_server.py").write_text(LIVE_ENTRY, encoding="utf-8")
    (root / "app.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    (root / "app.js").write_text("console.log('live');\n", encoding="utf-8")
    return root


@pytest.fixture
def dist_root(tmp_path: Path) -> Path:
    """Compiled bundle as used in production mode."""
    root = tmp_path / "dist"
    (root / "client" / "assets").mkdir(parents=True)
    (root / "server").mkdir()
    (root / "client" / "index.html").write_text(TEMPLATE, encoding="utf-8")
    (root / "client" / "app.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    (root / "client" / "app.js").write_text("console.log('compiled');\n", encoding="utf-8")
    (root / "client" / "assets" / "logo.svg").write_text("<svg></svg>\n", encoding="utf-8")
    (root / "server" / "entry_server.py").write_text(COMPILED_ENTRY, encoding="utf-8")
    return root


@pytest.fixture
def render_config(client_root: Path, dist_root: Path) -> RenderConfig:
    return RenderConfig(
        client_root=client_root,
        dist_root=dist_root,
        static_max_age=3600,
        live_poll_interval=0.05,
    )


@pytest.fixture
def realtime_config() -> RealtimeConfig:
    return RealtimeConfig(
        api_key="sk-test-secret",
        sessions_url=SESSIONS_URL,
        model="gpt-4o-mini-realtime-preview-2024-12-17",
        voice="verse",
        timeout_s=None,
    )


@pytest.fixture
def console_config(render_config: RenderConfig, realtime_config: RealtimeConfig) -> ConsoleConfig:
    return ConsoleConfig(
        server=ServerConfig(host="127.0.0.1", port=3000),
        realtime=realtime_config,
        render=render_config,
    )


@pytest.fixture
def upstream() -> Callable[..., httpx.MockTransport]:
    """Build a mock upstream transport from a request handler."""

    def _make(handler) -> httpx.MockTransport:
        return httpx.MockTransport(handler)

    return _make
