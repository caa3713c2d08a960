"""Server-side render pipelines.

Both pipelines take a request URL and return a complete HTML document:
the page template with the render entry's output placed at the outlet.
"""

from __future__ import annotations

import inspect
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Protocol

from realtime_console.config import RenderConfig
from realtime_console.render.live import LiveEngine
from realtime_console.render.mode import RenderMode
from realtime_console.render.modules import CompiledModuleProvider, ModuleProvider
from realtime_console.server.metrics import RENDER_LATENCY

logger = logging.getLogger(__name__)

SSR_OUTLET = "<!--ssr-outlet-->"


class RenderError(Exception):
    """A page could not be rendered; the cause is chained."""

    def __init__(self, url: str, mode: RenderMode):
        super().__init__(f"Failed to render {url} ({mode.value})")
        self.url = url
        self.mode = mode


@dataclass(frozen=True)
class RenderedPage:
    """Template plus body markup for a single response."""

    template: str
    body_html: Optional[str]

    def html(self) -> str:
        # Outlets inside the body itself are dropped so none survive substitution
        body = (self.body_html or "").replace(SSR_OUTLET, "")
        return self.template.replace(SSR_OUTLET, body)


def _extract_html(result: Any) -> Optional[str]:
    if result is None:
        return None
    if isinstance(result, dict):
        html = result.get("html")
    else:
        html = getattr(result, "html", None)
    return None if html is None else str(html)


async def call_render(render, url: str) -> Optional[str]:
    """Call a render function (sync or async) and return its body markup."""
    result = render(url)
    if inspect.isawaitable(result):
        result = await result
    return _extract_html(result)


class RenderPipeline(Protocol):
    mode: RenderMode

    async def start(self) -> None: ...

    async def close(self) -> None: ...

    async def render(self, url: str) -> str: ...


class LivePipeline:
    """Reads, transforms and renders from the client sources on every request."""

    mode = RenderMode.LIVE

    def __init__(self, engine: LiveEngine, template_path: Path, entry_path: Path):
        self.engine = engine
        self.template_path = template_path
        self.entry_path = entry_path

    async def start(self) -> None:
        await self.engine.start()

    async def close(self) -> None:
        await self.engine.close()

    async def render(self, url: str) -> str:
        t0 = time.perf_counter()
        try:
            raw = self.template_path.read_text(encoding="utf-8")
            template = self.engine.transform_index_html(url, raw)
            render = await self.engine.load_render_entry(self.entry_path)
            body = await call_render(render, url)
            html = RenderedPage(template, body).html()
        except Exception as e:
            self.engine.fix_stacktrace(e)
            logger.exception(f"Live render failed for {url}")
            raise RenderError(url, self.mode) from e

        RENDER_LATENCY.labels(self.mode.value).observe(time.perf_counter() - t0)
        return html


class CompiledPipeline:
    """Renders from the prebuilt bundle; template and entry are loaded once."""

    mode = RenderMode.COMPILED

    def __init__(
        self,
        template_path: Path,
        entry_path: Path,
        provider: Optional[ModuleProvider] = None,
    ):
        self.template_path = template_path
        self.entry_path = entry_path
        self.provider = provider or CompiledModuleProvider()
        self._template: Optional[str] = None

    async def start(self) -> None:
        pass

    async def close(self) -> None:
        pass

    def _load_template(self) -> str:
        if self._template is None:
            self._template = self.template_path.read_text(encoding="utf-8")
        return self._template

    async def render(self, url: str) -> str:
        t0 = time.perf_counter()
        try:
            template = self._load_template()
            render = self.provider.load_render_entry(self.entry_path)
            body = await call_render(render, url)
            html = RenderedPage(template, body).html()
        except Exception as e:
            logger.exception(f"Compiled render failed for {url}")
            raise RenderError(url, self.mode) from e

        RENDER_LATENCY.labels(self.mode.value).observe(time.perf_counter() - t0)
        return html


def build_pipeline(mode: RenderMode, render_config: RenderConfig) -> RenderPipeline:
    """Create the single pipeline used for the lifetime of the process."""
    if mode is RenderMode.LIVE:
        engine = LiveEngine(render_config.client_root, render_config.live_poll_interval)
        return LivePipeline(engine, render_config.live_template, render_config.live_entry)
    return CompiledPipeline(render_config.compiled_template, render_config.compiled_entry)
