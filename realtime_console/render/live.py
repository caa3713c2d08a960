"""Live development engine.

One instance exists per process in live mode. It transforms the page
template, hot-reloads the render entry, points tracebacks at client
sources and serves the small reload client under ``/@live``.
"""

from __future__ import annotations

import asyncio
import logging
import re
import traceback
from pathlib import Path
from typing import Optional

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles

from realtime_console.render.modules import HotReloadProvider, RenderFunction, source_stamp

logger = logging.getLogger(__name__)

LIVE_PREFIX = "/@live"

# Root-relative src/href attributes, e.g. src="/app.js"
ASSET_URL_RE = re.compile(r"""\b(src|href)=(["'])/(?!/|@)([^"'?#]+)\2""")

RELOAD_CLIENT_JS = """\
let current = null;
async function poll() {
  try {
    const res = await fetch("%(prefix)s/version", { cache: "no-store" });
    const { version } = await res.json();
    if (current !== null && version !== current) {
      location.reload();
      return;
    }
    current = version;
  } catch (e) {
    // server restarting; keep polling
  }
  setTimeout(poll, %(interval_ms)d);
}
poll();
"""


class LiveEngineError(Exception):
    """Raised when the live engine cannot be started."""


class LiveEngine:
    """Transform and reload engine backing the live render pipeline."""

    def __init__(self, root: Path, poll_interval: float = 0.5):
        self.root = root
        self.poll_interval = poll_interval
        self.version = ""
        self._provider = HotReloadProvider(root)
        self._watch_task: Optional[asyncio.Task] = None

    @property
    def started(self) -> bool:
        return self._watch_task is not None and not self._watch_task.done()

    async def start(self) -> None:
        """Scan the client sources and begin watching them for changes."""
        if not self.root.is_dir():
            raise LiveEngineError(f"Client source directory not found: {self.root}")
        try:
            self.version = await asyncio.to_thread(source_stamp, self.root)
        except OSError as e:
            raise LiveEngineError(f"Cannot scan client sources: {e}") from e

        self._watch_task = asyncio.create_task(self._watch())
        logger.info(f"Live engine watching {self.root.resolve()}")

    async def close(self) -> None:
        if self._watch_task and not self._watch_task.done():
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
        self._watch_task = None

    async def _watch(self) -> None:
        while True:
            await asyncio.sleep(self.poll_interval)
            try:
                stamp = await asyncio.to_thread(source_stamp, self.root)
            except OSError as e:
                logger.debug(f"Source scan failed: {e}")
                continue
            if stamp != self.version:
                logger.info("Client sources changed")
                self.version = stamp

    def _rewrite_asset_url(self, match: re.Match) -> str:
        attr, quote, path = match.group(1), match.group(2), match.group(3)
        if (self.root / path).is_file():
            return f"{attr}={quote}{LIVE_PREFIX}/fs/{path}{quote}"
        return match.group(0)

    def transform_index_html(self, url: str, html: str) -> str:
        """Point asset URLs at the client sources and inject the reload client.

        ``/app.js`` becomes ``/@live/fs/app.js`` when ``client/app.js`` exists.
        """
        html = ASSET_URL_RE.sub(self._rewrite_asset_url, html)
        tag = f'<script type="module" src="{LIVE_PREFIX}/client.js"></script>'
        if "</head>" in html:
            return html.replace("</head>", f"  {tag}\n  </head>", 1)
        return tag + "\n" + html

    async def load_render_entry(self, path: Path) -> RenderFunction:
        """Return the current render function, scanning the sources off the event loop."""
        stamp = await asyncio.to_thread(source_stamp, self.root)
        return self._provider.load_render_entry(path, stamp)

    def fix_stacktrace(self, exc: BaseException) -> None:
        """Annotate ``exc`` with the traceback frames that live in client sources."""
        root = self.root.resolve()
        for frame in traceback.extract_tb(exc.__traceback__):
            try:
                source = Path(frame.filename).resolve()
            except OSError:
                continue
            if source.is_relative_to(root):
                exc.add_note(
                    f"  at {source.relative_to(root)}:{frame.lineno} in {frame.name}"
                )

    def asgi_app(self) -> Starlette:
        """Routes served under ``/@live`` while in live mode."""

        async def client_js(request: Request) -> Response:
            body = RELOAD_CLIENT_JS % {
                "prefix": LIVE_PREFIX,
                "interval_ms": int(self.poll_interval * 1000),
            }
            return Response(
                body,
                media_type="application/javascript",
                headers={"Cache-Control": "no-cache"},
            )

        async def version(request: Request) -> JSONResponse:
            return JSONResponse(
                {"version": str(self.version)}, headers={"Cache-Control": "no-store"}
            )

        return Starlette(
            routes=[
                Route("/client.js", client_js),
                Route("/version", version),
                Mount(
                    "/fs",
                    app=StaticFiles(directory=str(self.root), check_dir=False),
                    name="live-fs",
                ),
            ]
        )
