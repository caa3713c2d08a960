"""Configuration management for the realtime console server."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_SESSIONS_URL = "https://api.openai.com/v1/realtime/sessions"
DEFAULT_REALTIME_MODEL = "gpt-4o-mini-realtime-preview-2024-12-17"
DEFAULT_REALTIME_VOICE = "verse"


def _parse_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_optional_float_env(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


@dataclass
class ServerConfig:
    """HTTP listener configuration."""

    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "3000")))


@dataclass
class RealtimeConfig:
    """Upstream realtime session (token) API."""

    api_key: str = field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))
    sessions_url: str = field(
        default_factory=lambda: os.getenv("REALTIME_SESSIONS_URL", DEFAULT_SESSIONS_URL)
    )
    model: str = field(
        default_factory=lambda: os.getenv("REALTIME_MODEL", DEFAULT_REALTIME_MODEL)
    )
    voice: str = field(
        default_factory=lambda: os.getenv("REALTIME_VOICE", DEFAULT_REALTIME_VOICE)
    )
    # None means the request may take as long as upstream needs
    timeout_s: Optional[float] = field(
        default_factory=lambda: _parse_optional_float_env("REALTIME_TIMEOUT_S")
    )


@dataclass
class RenderConfig:
    """Filesystem layout of the client sources and the compiled bundle."""

    client_root: Path = field(
        default_factory=lambda: Path(os.getenv("CLIENT_ROOT", "client"))
    )
    dist_root: Path = field(default_factory=lambda: Path(os.getenv("DIST_ROOT", "dist")))
    static_max_age: int = field(
        default_factory=lambda: int(os.getenv("STATIC_MAX_AGE", "86400"))
    )
    live_poll_interval: float = field(
        default_factory=lambda: _parse_float_env("LIVE_POLL_INTERVAL", 0.5)
    )

    @property
    def live_template(self) -> Path:
        return self.client_root / "index.html"

    @property
    def live_entry(self) -> Path:
        return self.client_root / "entry_server.py"

    @property
    def compiled_assets_dir(self) -> Path:
        return self.dist_root / "client"

    @property
    def compiled_template(self) -> Path:
        return self.compiled_assets_dir / "index.html"

    @property
    def compiled_entry(self) -> Path:
        return self.dist_root / "server" / "entry_server.py"


@dataclass
class ConsoleConfig:
    """Main configuration container."""

    server: ServerConfig = field(default_factory=ServerConfig)
    realtime: RealtimeConfig = field(default_factory=RealtimeConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    @classmethod
    def from_env(cls) -> "ConsoleConfig":
        """Create configuration from environment variables."""
        return cls()

    def validate(self) -> list[str]:
        """Validate configuration and return list of missing required values."""
        missing = []

        if not self.realtime.api_key:
            missing.append("OPENAI_API_KEY")

        return missing


# Global config instance
config = ConsoleConfig.from_env()
