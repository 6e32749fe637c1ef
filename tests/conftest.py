# tests/conftest.py
from pathlib import Path

import pytest

from steamcmd_wrapper.config import ENV_VARS

STEAM_ID = "76561198000000000"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep real STEAMCMD_* / STEAM_API_KEY variables out of the tests."""
    for var in ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def config_vdf_content() -> str:
    """Minimal config.vdf as written by steamcmd after one login."""
    return f"""
"InstallConfigStore"
{{
\t"Software"
\t{{
\t\t"Valve"
\t\t{{
\t\t\t"Steam"
\t\t\t{{
\t\t\t\t"Accounts"
\t\t\t\t{{
\t\t\t\t\t"testuser"
\t\t\t\t\t{{
\t\t\t\t\t\t"SteamID"\t\t"{STEAM_ID}"
\t\t\t\t\t}}
\t\t\t\t}}
\t\t\t}}
\t\t}}
\t}}
}}
"""


@pytest.fixture
def steam_data_dir(tmp_path, config_vdf_content) -> Path:
    """steamcmd data directory with config/config.vdf and an empty logs/ folder."""
    data_dir = tmp_path / "steam"
    (data_dir / "config").mkdir(parents=True)
    (data_dir / "logs").mkdir()
    (data_dir / "config" / "config.vdf").write_text(config_vdf_content, encoding="utf-8")
    return data_dir


@pytest.fixture
def bundled_dir(tmp_path) -> Path:
    """Directory standing in for the package's bundled steamcmd location."""
    path = tmp_path / "bundled"
    path.mkdir()
    return path


@pytest.fixture
def steamcmd_sh(bundled_dir) -> Path:
    """Fake steamcmd.sh at the first Linux/macOS candidate location."""
    exe = bundled_dir / "steamcmd.sh"
    exe.write_text("#!/bin/sh\n", encoding="utf-8")
    return exe
