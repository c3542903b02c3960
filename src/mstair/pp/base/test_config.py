# File: src/mstair/pp/base/test_config.py
"""
Unit tests for mstair.pp.base.config.

Covers:
- analysis_mode_context() nesting and its effect on CoreLogger output
- in_desktop_mode() overrides and the NO_COLOR / FORCE_COLOR variables
- Color codes from the log formatter following desktop mode
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from mstair.pp.base import config as cfg
from mstair.pp.xlogging.logger_factory import create_logger
from mstair.pp.xlogging.logger_formatter import get_color_code


@pytest.fixture
def no_override(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    cfg.in_desktop_mode(unset_override=True)
    yield
    cfg.in_desktop_mode(unset_override=True)


@pytest.mark.unit
def test_analysis_mode_nesting() -> None:
    assert not cfg.in_analysis_mode()
    with cfg.analysis_mode_context():
        with cfg.analysis_mode_context():
            assert cfg.in_analysis_mode()
        assert cfg.in_analysis_mode()
    assert not cfg.in_analysis_mode()


@pytest.mark.unit
def test_analysis_mode_silences_logging(caplog: pytest.LogCaptureFixture) -> None:
    log = create_logger("mstair.pp.tests.analysis")
    with caplog.at_level(logging.WARNING):
        with cfg.analysis_mode_context():
            log.warning("hidden")
        log.warning("shown")
    assert [r.getMessage() for r in caplog.records if r.name == log.name] == ["shown"]


@pytest.mark.unit
def test_desktop_mode_override(no_override: None) -> None:
    assert cfg.in_desktop_mode(override=True) is True
    assert cfg.in_desktop_mode() is True
    assert cfg.in_desktop_mode(override=False) is False
    assert get_color_code("ERROR") == ""


@pytest.mark.unit
def test_color_variables(no_override: None, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FORCE_COLOR", "1")
    assert cfg.in_desktop_mode() is True
    assert get_color_code("#ff0000") == "\033[38;2;255;0;0m"
    monkeypatch.setenv("NO_COLOR", "1")
    assert cfg.in_desktop_mode() is False


# End of file: src/mstair/pp/base/test_config.py
