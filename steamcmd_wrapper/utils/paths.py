"""Path resolution for bundled package resources."""

from __future__ import annotations

import sys
from pathlib import Path

__all__ = ["get_resources_dir"]

_resources_dir: Path | None = None


def get_resources_dir() -> Path:
    """Get the path to the resources directory.

    Checks the package directory first (source checkout and pip install),
    then ``sys.prefix`` for frozen or relocated installs.

    Returns:
        Path to the resources directory.

    Raises:
        FileNotFoundError: If resources directory cannot be found.
    """
    global _resources_dir
    if _resources_dir is not None:
        return _resources_dir

    # paths.py is at steamcmd_wrapper/utils/paths.py → parent.parent = steamcmd_wrapper/
    candidate = Path(__file__).resolve().parent.parent / "resources"
    if candidate.is_dir():
        _resources_dir = candidate
        return _resources_dir

    candidate = Path(sys.prefix) / "resources"
    if candidate.is_dir():
        _resources_dir = candidate
        return _resources_dir

    raise FileNotFoundError(
        "Could not locate resources directory. Searched: steamcmd_wrapper/resources/, sys.prefix/resources/"
    )
