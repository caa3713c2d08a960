"""Render entry loading.

A module provider turns a path to a render entry module into its
``render(url)`` function. The compiled provider loads each entry once;
the hot-reload provider re-executes it whenever the client sources change.
"""

from __future__ import annotations

import hashlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)

RenderFunction = Callable[[str], Any]


class ModuleLoadError(Exception):
    """Raised when a render entry cannot be imported or has no render()."""


class ModuleProvider(Protocol):
    def load_render_entry(self, path: Path) -> RenderFunction: ...


def _module_name(prefix: str, path: Path) -> str:
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    return f"_{prefix}_entry_{digest}"


def load_module_from_path(path: Path, name: str) -> ModuleType:
    """Execute the file at ``path`` as a fresh module registered as ``name``."""
    if not path.is_file():
        raise ModuleLoadError(f"Render entry not found: {path}")

    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ModuleLoadError(f"Cannot import render entry: {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    return module


def get_render_function(module: ModuleType) -> RenderFunction:
    render = getattr(module, "render", None)
    if not callable(render):
        raise ModuleLoadError(f"{module.__file__} does not define render(url)")
    return render


def source_stamp(root: Path) -> str:
    """Digest of every file under ``root`` by relative path, mtime and size.

    Any edit, addition or deletion changes the digest, whatever the
    relative order of modification times.
    """
    digest = hashlib.sha1()
    for path in sorted(root.rglob("*")):
        if "__pycache__" in path.parts or not path.is_file():
            continue
        st = path.stat()
        entry = f"{path.relative_to(root).as_posix()}\0{st.st_mtime_ns}\0{st.st_size}\n"
        digest.update(entry.encode("utf-8"))
    return digest.hexdigest()


class CompiledModuleProvider:
    """Loads each render entry once and reuses it until the process exits."""

    def __init__(self) -> None:
        self._cache: dict[Path, RenderFunction] = {}

    def load_render_entry(self, path: Path) -> RenderFunction:
        key = path.resolve()
        render = self._cache.get(key)
        if render is None:
            module = load_module_from_path(key, _module_name("compiled", key))
            render = get_render_function(module)
            self._cache[key] = render
            logger.info(f"Loaded compiled render entry {key}")
        return render


class HotReloadProvider:
    """Re-executes a render entry when anything under ``root`` changed.

    Edits to the client sources are picked up on the next request without
    restarting the process.
    """

    def __init__(self, root: Path):
        self.root = root
        self._loaded: dict[Path, tuple[str, RenderFunction]] = {}

    def load_render_entry(self, path: Path, stamp: Optional[str] = None) -> RenderFunction:
        """Return the entry's render function, re-executing it if ``stamp`` changed.

        ``stamp`` is a precomputed :func:`source_stamp`; it is computed here when omitted.
        """
        key = path.resolve()
        if stamp is None:
            stamp = source_stamp(self.root)

        cached = self._loaded.get(key)
        if cached is not None and cached[0] == stamp:
            return cached[1]

        module = load_module_from_path(key, _module_name("live", key))
        render = get_render_function(module)
        self._loaded[key] = (stamp, render)
        if cached is not None:
            logger.info(f"Reloaded render entry {key}")
        return render
