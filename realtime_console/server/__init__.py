"""HTTP server for the realtime console.

Routes:
- /token - Realtime session token (proxied to the upstream API)
- /healthz - Health check
- /metrics - Prometheus metrics
- everything else - compiled assets or the server-rendered client
"""

# Lazy imports so the render package can use metrics without pulling in the app
def __getattr__(name):
    if name == "create_app":
        from .app import create_app
        return create_app
    elif name == "run_server":
        from .app import run_server
        return run_server
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = ["create_app", "run_server"]
