"""
Message catalogue lookup.

Log, error and CLI strings live in JSON files under resources/i18n/: shared
files at the root (logs.json) and English messages in en/. Both are
deep-merged into one catalogue and looked up by dotted key with ``t()``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

__all__ = ["MessageCatalogue", "t"]

logger = logging.getLogger("steamcmdw.i18n")


def _deep_merge(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in update.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class MessageCatalogue:
    """Messages loaded from one i18n directory tree.

    Attributes:
        root: Directory holding the shared JSON files and the en/ directory.
        messages: Merged nested message dictionary.
    """

    def __init__(self, root: Path | None = None) -> None:
        if root is None:
            from steamcmd_wrapper.utils.paths import get_resources_dir

            root = get_resources_dir() / "i18n"
        self.root = root
        self.messages = _deep_merge(self._load_directory(root), self._load_directory(root / "en"))

    @staticmethod
    def _load_directory(directory: Path) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        if not directory.is_dir():
            return merged
        for file_path in sorted(directory.glob("*.json")):
            try:
                merged = _deep_merge(merged, json.loads(file_path.read_text(encoding="utf-8")))
            except (OSError, json.JSONDecodeError) as e:
                logger.error("Skipping message file %s: %s", file_path.name, e)
        return merged

    def t(self, key: str, **kwargs: Any) -> str:
        """Look up a message by dotted key and format it.

        Args:
            key: Dotted key path (e.g. 'errors.missing_username').
            **kwargs: Format arguments.

        Returns:
            The formatted message; the raw template if the arguments do not
            fit it, or '[key]' if the key is unknown.
        """
        value: Any = self.messages
        for part in key.split("."):
            value = value.get(part) if isinstance(value, dict) else None

        if not isinstance(value, str):
            return f"[{key}]"
        if not kwargs:
            return value
        try:
            return value.format(**kwargs)
        except (ValueError, KeyError, IndexError):
            return value


_catalogue: MessageCatalogue | None = None


def t(key: str, **kwargs: Any) -> str:
    """Look up a message in the bundled catalogue, loading it on first use."""
    global _catalogue
    if _catalogue is None:
        _catalogue = MessageCatalogue()
    return _catalogue.t(key, **kwargs)
