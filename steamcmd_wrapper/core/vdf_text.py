# steamcmd_wrapper/core/vdf_text.py

"""
Reading and writing Valve's text KeyValues format (VDF).

Steam's config files (config.vdf, loginusers.vdf, libraryfolders.vdf) store
nested blocks of quoted keys and values:

    "InstallConfigStore"
    {
        "Software"
        {
            "Valve"  { ... }
        }
    }

Parsing and encoding are done by the ``vdf`` package; this module turns its
syntax errors into VdfParseError.
"""

from __future__ import annotations

from typing import IO, Any

import vdf

from steamcmd_wrapper.core.errors import VdfParseError

__all__ = ("load", "loads", "dumps")

VdfTree = dict[str, Any]


def loads(data: str) -> VdfTree:
    """
    Parses a VDF string into a dictionary.

    Args:
        data (str): The VDF-formatted text.

    Returns:
        dict: Nested dictionary; leaves are strings. Keys keep file order,
        and a repeated key keeps its last value.

    Raises:
        TypeError: If data is not a string.
        VdfParseError: If the text is not well-formed VDF.
    """
    try:
        return vdf.loads(data)
    except SyntaxError as e:
        raise VdfParseError(e.msg, e.lineno or 0, e.offset or 0) from e


def load(fp: IO[str]) -> VdfTree:
    """
    Parses a VDF file into a dictionary.

    Args:
        fp: A file-like object opened in text mode.

    Returns:
        dict: Nested dictionary representing the parsed VDF data.
    """
    return loads(fp.read())


def dumps(obj: VdfTree, pretty: bool = True) -> str:
    """Serialize a tree to VDF text."""
    return vdf.dumps(obj, pretty=pretty)
