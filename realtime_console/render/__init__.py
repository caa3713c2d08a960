"""Server-side rendering of the client application.

Pipelines:
- live - client/ sources, transformed and hot-reloaded per request
- compiled - dist/ bundle, loaded once
"""

from realtime_console.render.mode import RenderMode, select_render_mode
from realtime_console.render.pipeline import (
    SSR_OUTLET,
    CompiledPipeline,
    LivePipeline,
    RenderError,
    RenderedPage,
    build_pipeline,
)

__all__ = [
    "SSR_OUTLET",
    "CompiledPipeline",
    "LivePipeline",
    "RenderError",
    "RenderMode",
    "RenderedPage",
    "build_pipeline",
    "select_render_mode",
]
