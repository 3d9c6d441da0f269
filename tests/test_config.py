"""Tests for pi.textbuffer.config."""

from __future__ import annotations

import logging

import pytest

from pi.textbuffer.config import TextBufferConfig, load_config


class TestDefaults:
    def test_defaults(self) -> None:
        config = TextBufferConfig()
        assert config.history_limit == 100
        assert config.drag_drop_min_length == 3
        assert config.editor is None

    def test_empty_environment_gives_defaults(self) -> None:
        assert load_config({}) == TextBufferConfig()


class TestLoadConfig:
    def test_reads_environment(self) -> None:
        config = load_config(
            {
                "PI_TEXTBUFFER_HISTORY_LIMIT": "25",
                "PI_TEXTBUFFER_DRAG_DROP_MIN_LENGTH": "5",
                "PI_TEXTBUFFER_EDITOR": "nano",
            }
        )
        assert config.history_limit == 25
        assert config.drag_drop_min_length == 5
        assert config.editor == "nano"

    def test_blank_values_are_ignored(self) -> None:
        config = load_config({"PI_TEXTBUFFER_HISTORY_LIMIT": "", "PI_TEXTBUFFER_EDITOR": ""})
        assert config.history_limit == 100
        assert config.editor is None

    @pytest.mark.parametrize("value", ["lots", "0", "-4", "1.5"])
    def test_invalid_values_warn_and_fall_back(self, value: str, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="pi.textbuffer.config"):
            config = load_config({"PI_TEXTBUFFER_HISTORY_LIMIT": value})
        assert config.history_limit == 100
        assert "PI_TEXTBUFFER_HISTORY_LIMIT" in caplog.text

    def test_reads_process_environment_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PI_TEXTBUFFER_DRAG_DROP_MIN_LENGTH", "7")
        assert load_config().drag_drop_min_length == 7
