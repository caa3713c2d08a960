"""FastAPI application for the realtime console server."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

from realtime_console.config import ConsoleConfig, config as default_config
from realtime_console.render.assets import CompiledAssets
from realtime_console.render.live import LIVE_PREFIX
from realtime_console.render.mode import RenderMode
from realtime_console.render.pipeline import (
    LivePipeline,
    RenderError,
    RenderPipeline,
    build_pipeline,
)
from realtime_console.server.dispatch import RequestDispatcher
from realtime_console.server.metrics import REQUESTS, prom_latest
from realtime_console.server.token import TokenProxy

logger = logging.getLogger(__name__)


def create_app(
    mode: RenderMode,
    cfg: Optional[ConsoleConfig] = None,
    *,
    pipeline: Optional[RenderPipeline] = None,
    proxy: Optional[TokenProxy] = None,
) -> FastAPI:
    """Build the application for a render mode chosen at startup."""
    cfg = cfg or default_config
    pipeline = pipeline or build_pipeline(mode, cfg.render)
    proxy = proxy or TokenProxy(cfg.realtime)
    assets = None
    if mode is RenderMode.COMPILED:
        assets = CompiledAssets(
            cfg.render.compiled_assets_dir, max_age=cfg.render.static_max_age
        )
    dispatcher = RequestDispatcher(mode, pipeline, proxy, assets)

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        # Requests are only accepted once the pipeline is ready; a failure here
        # aborts startup.
        await pipeline.start()
        logger.info(f"Render pipeline ready ({mode.value})")
        try:
            yield
        finally:
            await pipeline.close()

    app = FastAPI(
        title="Realtime Console",
        description="Realtime voice console: token issuance and server rendering",
        version="0.1.0",
        lifespan=_lifespan,
    )
    app.state.render_mode = mode
    app.state.dispatcher = dispatcher

    @app.exception_handler(RenderError)
    async def _render_error_handler(request: Request, exc: RenderError) -> HTMLResponse:
        REQUESTS.labels("page", request.method, "500").inc()
        return HTMLResponse(content="Internal Server Error", status_code=500)

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/healthz")
    async def healthz():
        """Health check endpoint."""
        return {"ok": True, "service": "realtime-console", "mode": mode.value}

    @app.get("/metrics")
    async def metrics_endpoint():
        """Prometheus metrics endpoint."""
        body, content_type = prom_latest()
        return Response(content=body, media_type=content_type)

    @app.get("/token")
    async def token():
        """Issue a short-lived realtime session token."""
        return await dispatcher.issue_token()

    if isinstance(pipeline, LivePipeline):
        app.mount(LIVE_PREFIX, pipeline.engine.asgi_app(), name="live")

    @app.get("/{full_path:path}")
    async def page(request: Request, full_path: str):
        """Compiled assets, or the server-rendered client application."""
        return await dispatcher.handle_page(request)

    return app


def run_server(
    mode: RenderMode,
    host: Optional[str] = None,
    port: Optional[int] = None,
    cfg: Optional[ConsoleConfig] = None,
):
    """Run the FastAPI server."""
    import uvicorn

    cfg = cfg or default_config
    host = host or cfg.server.host
    port = port or cfg.server.port

    app = create_app(mode, cfg)
    logger.info(f"Server running on {host}:{port} in {mode.label} mode")
    uvicorn.run(app, host=host, port=port)
