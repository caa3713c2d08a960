"""Tests for configuration module."""

import os
from pathlib import Path
from unittest.mock import patch


def test_config_loads_defaults():
    """Test that config loads with default values."""
    from realtime_console.config import ConsoleConfig

    with patch.dict(os.environ, {}, clear=True):
        config = ConsoleConfig()

    assert config.server.port == 3000
    assert config.server.host == "0.0.0.0"
    assert config.realtime.model == "gpt-4o-mini-realtime-preview-2024-12-17"
    assert config.realtime.voice == "verse"
    assert config.realtime.sessions_url == "https://api.openai.com/v1/realtime/sessions"
    assert config.realtime.timeout_s is None
    assert config.render.static_max_age == 86400


def test_config_render_paths():
    """Test the fixed file layout for both render modes."""
    from realtime_console.config import RenderConfig

    render = RenderConfig(client_root=Path("client"), dist_root=Path("dist"))

    assert render.live_template == Path("client/index.html")
    assert render.live_entry == Path("client/entry_server.py")
    assert render.compiled_template == Path("dist/client/index.html")
    assert render.compiled_entry == Path("dist/server/entry_server.py")
    assert render.compiled_assets_dir == Path("dist/client")


def test_config_validate_missing_keys():
    """Test that validate returns missing keys."""
    from realtime_console.config import ConsoleConfig

    with patch.dict(os.environ, {}, clear=True):
        config = ConsoleConfig()
        missing = config.validate()

    assert missing == ["OPENAI_API_KEY"]


def test_config_from_env():
    """Test loading config from environment."""
    from realtime_console.config import ConsoleConfig

    test_env = {
        "OPENAI_API_KEY": "sk-env",
        "PORT": "8080",
        "REALTIME_VOICE": "alloy",
        "REALTIME_TIMEOUT_S": "12.5",
        "DIST_ROOT": "/srv/bundle",
        "LIVE_POLL_INTERVAL": "not-a-number",
    }

    with patch.dict(os.environ, test_env, clear=True):
        config = ConsoleConfig.from_env()

    assert config.realtime.api_key == "sk-env"
    assert config.server.port == 8080
    assert config.realtime.voice == "alloy"
    assert config.realtime.timeout_s == 12.5
    assert config.render.compiled_entry == Path("/srv/bundle/server/entry_server.py")
    assert config.render.live_poll_interval == 0.5
    assert config.validate() == []
