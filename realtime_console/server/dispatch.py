"""Per-request routing between the token proxy, assets and the render pipeline."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request
from fastapi.responses import HTMLResponse, Response

from realtime_console.render.assets import CompiledAssets
from realtime_console.render.mode import RenderMode
from realtime_console.render.pipeline import RenderPipeline
from realtime_console.server.metrics import REQUESTS
from realtime_console.server.token import TokenProxy

logger = logging.getLogger(__name__)


class RequestDispatcher:
    """Routes requests for a server whose render mode is fixed at construction."""

    def __init__(
        self,
        mode: RenderMode,
        pipeline: RenderPipeline,
        proxy: TokenProxy,
        assets: Optional[CompiledAssets] = None,
    ):
        if pipeline.mode is not mode:
            raise ValueError(f"{type(pipeline).__name__} cannot serve {mode.value} mode")
        self.mode = mode
        self.pipeline = pipeline
        self.proxy = proxy
        # Static passthrough only exists for the compiled bundle
        self.assets = assets if mode is RenderMode.COMPILED else None

    async def issue_token(self) -> Response:
        response = await self.proxy.issue_token()
        REQUESTS.labels("/token", "GET", str(response.status_code)).inc()
        return response

    async def handle_page(self, request: Request) -> Response:
        if self.assets is not None:
            asset = await self.assets.lookup(request.scope)
            if asset is not None:
                REQUESTS.labels("asset", request.method, str(asset.status_code)).inc()
                return asset

        url = request.url.path
        if request.url.query:
            url = f"{url}?{request.url.query}"

        # RenderError propagates to the application's error handler
        html = await self.pipeline.render(url)
        REQUESTS.labels("page", request.method, "200").inc()
        return HTMLResponse(content=html, status_code=200)
