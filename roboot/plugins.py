"""
Run-time loading of user-supplied Python modules.

Custom assertion validators and suite pre/post scripts are referenced from
suite files by one of:
    - a ``file://`` URI or an absolute path to a ``.py`` file
    - a relative path, resolved against the suite directory, then the CWD
    - a dotted module name importable from ``sys.path``

Files are executed fresh on every load and are not registered in
``sys.modules``. Dotted modules already imported are reloaded, so edits
made between runs in the same process take effect.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
import os
import sys
import uuid
from pathlib import Path
from types import ModuleType
from urllib.parse import unquote, urlparse

logger = logging.getLogger(__name__)


def resolve_module(reference: str, base_dir: str | Path | None = None) -> ModuleType:
    """
    Load the module a suite file refers to.

    Args:
        reference: URI, path or dotted module name
        base_dir: Directory relative paths are resolved against first

    Returns:
        The loaded module

    Raises:
        ModuleNotFoundError: if nothing can be found for the reference
    """
    if reference.startswith("file:"):
        return _load_file(Path(unquote(urlparse(reference).path)))

    path = Path(reference).expanduser()
    if path.is_absolute():
        return _load_file(path)

    if _looks_like_path(reference):
        candidates = []
        if base_dir is not None:
            candidates.append(Path(base_dir) / path)
        candidates.append(Path.cwd() / path)
        for candidate in candidates:
            if candidate.is_file():
                return _load_file(candidate)
        searched = ", ".join(str(c) for c in candidates)
        raise ModuleNotFoundError(f"No module file found for {reference!r} (searched: {searched})")

    importlib.invalidate_caches()
    if reference in sys.modules:
        logger.debug("Reloading module %s", reference)
        return importlib.reload(sys.modules[reference])
    logger.debug("Importing module %s", reference)
    return importlib.import_module(reference)


def _looks_like_path(reference: str) -> bool:
    return (
        reference.endswith(".py")
        or "/" in reference
        or os.sep in reference
        or reference.startswith(".")
    )


def _load_file(path: Path) -> ModuleType:
    if not path.is_file():
        raise ModuleNotFoundError(f"No module file found at {str(path)!r}")

    module_name = f"roboot_plugin_{path.stem}_{uuid.uuid4().hex[:8]}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ModuleNotFoundError(f"Cannot load {str(path)!r} as a Python module")

    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    logger.debug("Loaded module file %s", path)
    return module
