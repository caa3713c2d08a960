"""Produce the compiled bundle used in production mode.

Copies the client template and static files to ``dist/client`` and the
render entry to ``dist/server``.

Run with: python -m realtime_console.build
"""

from __future__ import annotations

import logging
import shutil
import sys
from pathlib import Path

from realtime_console.config import RenderConfig

logger = logging.getLogger(__name__)

SERVER_SUFFIXES = {".py"}


def build(render: RenderConfig) -> list[Path]:
    """Rebuild ``render.dist_root`` from ``render.client_root``; return written files."""
    client_root = render.client_root
    if not render.live_template.is_file():
        raise FileNotFoundError(f"Template not found: {render.live_template}")
    if not render.live_entry.is_file():
        raise FileNotFoundError(f"Render entry not found: {render.live_entry}")

    if render.dist_root.exists():
        shutil.rmtree(render.dist_root)
    server_dir = render.compiled_entry.parent
    server_dir.mkdir(parents=True)
    render.compiled_assets_dir.mkdir(parents=True)

    written = []
    for source in sorted(client_root.rglob("*")):
        if not source.is_file() or "__pycache__" in source.parts:
            continue
        if source.suffix in SERVER_SUFFIXES:
            if source != render.live_entry:
                continue
            target = render.compiled_entry
        else:
            target = render.compiled_assets_dir / source.relative_to(client_root)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, target)
        written.append(target)
        logger.debug(f"{source} -> {target}")

    logger.info(f"Built {len(written)} files into {render.dist_root}")
    return written


def main() -> None:
    """Entry point for the realtime-console-build command."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        build(RenderConfig())
    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
