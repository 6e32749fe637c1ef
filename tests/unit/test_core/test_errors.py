"""Tests for the exception hierarchy and its catalogue messages."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from steamcmd_wrapper.core import errors
from steamcmd_wrapper.core.logging import logger, setup_logging


class TestHierarchy:
    """Every error is a SteamCmdError and sits under its family."""

    @pytest.mark.parametrize(
        ("error", "family"),
        [
            (errors.MissingUsername(), errors.MissingInput),
            (errors.MissingPassword(), errors.MissingInput),
            (errors.SteamCmdNotFound("linux"), errors.NotFound),
            (errors.SteamDirNotFound(), errors.NotFound),
            (errors.ConfigNotFound("/x/config.vdf"), errors.NotFound),
            (errors.MissingTwoFactor(), errors.LoginError),
            (errors.IncorrectPassword(), errors.LoginError),
            (errors.LoginFailed(1), errors.LoginError),
            (errors.VdfParseError("bad", 1, 2), ValueError),
            (errors.FeatureNotImplemented("download game"), NotImplementedError),
        ],
    )
    def test_family(self, error: Exception, family: type) -> None:
        assert isinstance(error, family)
        assert isinstance(error, errors.SteamCmdError)

    def test_messages_come_from_catalogue(self) -> None:
        assert str(errors.MissingUsername()) == "Missing username!"
        assert str(errors.IncorrectPassword()) == "Password was incorrect!"
        assert str(errors.FeatureNotImplemented("username id lookup")).endswith("username id lookup")
        assert "line 3, column 7" in str(errors.VdfParseError("unexpected '}'", 3, 7))

    def test_explicit_message(self) -> None:
        assert str(errors.NetworkError("timed out")).endswith("timed out")
        assert str(errors.SteamCmdError("custom")) == "custom"


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_file_handler(self, tmp_path: Path) -> None:
        saved = list(logger.handlers)
        logger.handlers.clear()
        log_file = tmp_path / "logs" / "wrapper.log"
        try:
            setup_logging(logging.DEBUG, log_file)
            logger.info("written to file")
            for handler in logger.handlers:
                handler.flush()

            assert log_file.exists()
            assert "written to file" in log_file.read_text(encoding="utf-8")
        finally:
            for handler in logger.handlers:
                handler.close()
            logger.handlers[:] = saved
            logger.setLevel(logging.NOTSET)
