"""Realtime Console - Main Entry Point.

Run with: python -m realtime_console.main [--dev]
"""

from __future__ import annotations

import logging
import sys

from realtime_console.config import config
from realtime_console.render.mode import DEV_FLAG, select_render_mode

logger = logging.getLogger("realtime_console")


def validate_config() -> bool:
    """Validate required configuration."""
    missing = config.validate()
    if missing:
        logger.warning("Missing configuration:")
        for key in missing:
            logger.warning(f"  - {key}")
        logger.warning("/token will fail until these are set (see .env.example)")
        return False
    return True


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    import argparse

    argv = sys.argv[1:] if argv is None else argv

    parser = argparse.ArgumentParser(
        description="Realtime voice console server (token proxy + server rendering)"
    )
    parser.add_argument(
        DEV_FLAG,
        action="store_true",
        help="Render live from client/ with hot reload instead of the dist/ bundle",
    )
    parser.add_argument("--host", default=None, help="Host to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration and exit",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    valid = validate_config()
    if args.validate:
        if valid:
            logger.info("Configuration validated successfully!")
            logger.info(f"Realtime model: {config.realtime.model}")
            logger.info(f"Realtime voice: {config.realtime.voice}")
        sys.exit(0 if valid else 1)

    mode = select_render_mode(argv)

    from realtime_console.server.app import run_server

    run_server(mode, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
