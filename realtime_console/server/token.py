"""Realtime session token proxy.

Exchanges the server-held API key for a short-lived client secret. The
upstream JSON is relayed untouched; the key never reaches the caller.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Optional

import httpx
from fastapi.responses import JSONResponse, Response

from realtime_console.config import RealtimeConfig
from realtime_console.server.metrics import TOKEN_LATENCY

logger = logging.getLogger(__name__)

TOKEN_ERROR = {"error": "Failed to generate token"}


class TokenProxy:
    """Issues realtime session tokens on behalf of the browser client."""

    def __init__(
        self,
        realtime: RealtimeConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.realtime = realtime
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.realtime.api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self) -> dict[str, str]:
        return {"model": self.realtime.model, "voice": self.realtime.voice}

    async def _request_session(self) -> bytes:
        async with httpx.AsyncClient(
            timeout=self.realtime.timeout_s, transport=self._transport
        ) as client:
            response = await client.post(
                self.realtime.sessions_url,
                headers=self._headers(),
                json=self._payload(),
            )
            response.raise_for_status()
            body = response.content
        # Reject anything that is not JSON before relaying it
        json.loads(body)
        return body

    async def issue_token(self) -> Response:
        """Return the upstream session document, or a generic 500."""
        t0 = time.perf_counter()
        try:
            body = await self._request_session()
        except Exception as e:
            logger.error(f"Token generation error: {e!r}")
            return JSONResponse(status_code=500, content=TOKEN_ERROR)

        TOKEN_LATENCY.observe(time.perf_counter() - t0)
        return Response(content=body, media_type="application/json")
