"""Static passthrough for the compiled client bundle."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from starlette.datastructures import Headers
from starlette.exceptions import HTTPException
from starlette.responses import FileResponse, Response
from starlette.staticfiles import NotModifiedResponse, StaticFiles
from starlette.types import Scope

# Extensions whose MIME type is pinned regardless of the platform's mimetypes table
CONTENT_TYPE_OVERRIDES = {
    ".css": "text/css",
    ".js": "application/javascript",
}

# The page template is only ever served rendered
TEMPLATE_NAME = "index.html"


class CompiledAssets(StaticFiles):
    """Serves files from the compiled client directory with long-lived caching.

    Directories are never served (no index files); misses return None so the
    caller can fall through to server rendering.
    """

    def __init__(self, directory: Path, max_age: int = 86400):
        super().__init__(directory=str(directory), html=False, check_dir=False)
        self.max_age = max_age

    async def lookup(self, scope: Scope) -> Optional[Response]:
        path = self.get_path(scope)
        if path in (".", TEMPLATE_NAME):
            return None
        try:
            return await self.get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code == 404:
                return None
            raise

    def file_response(
        self,
        full_path,
        stat_result: os.stat_result,
        scope: Scope,
        status_code: int = 200,
    ) -> Response:
        ext = os.path.splitext(str(full_path))[1].lower()
        response = FileResponse(
            full_path,
            status_code=status_code,
            stat_result=stat_result,
            media_type=CONTENT_TYPE_OVERRIDES.get(ext),
            headers={"Cache-Control": f"public, max-age={self.max_age}"},
        )
        if self.is_not_modified(response.headers, Headers(scope=scope)):
            return NotModifiedResponse(response.headers)
        return response
