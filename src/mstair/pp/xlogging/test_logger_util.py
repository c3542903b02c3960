# File: src/mstair/pp/xlogging/test_logger_util.py
"""
Tests for LogLevelConfig: environment parsing, precedence and lifecycle.

Covers:
- LOG_LEVEL / LOG_LEVELS pattern strings with their separators and quoting
- LOG_LEVEL_<MODULE> overrides and the "__" escape
- Exact > ancestor > glob > default precedence
- Singleton reuse and explicit reload
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

import pytest

from mstair.pp.xlogging import logger_util as lu
from mstair.pp.xlogging.logger_util import LogEnvVar, LogLevelConfig


# ---------- Fixtures ----------


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear LOG_LEVEL* vars and the singleton; never read a .env file."""
    monkeypatch.setattr(lu, "fs_load_dotenv", lambda *a, **k: False)
    for name in [k for k in os.environ if k.startswith("LOG_LEVEL")]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(lu, "_log_level_config_instance", None)
    yield
    monkeypatch.setattr(lu, "_log_level_config_instance", None)


# ---------- Variable names ----------


class TestLogEnvVar:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("name", "module"),
        [
            ("LOG_LEVEL", ""),
            ("LOG_LEVELS", ""),
            ("LOG_LEVEL_ROOT", ""),
            ("LOG_LEVEL_MSTAIR_PP_XPRINT", "mstair.pp.xprint"),
            ("LOG_LEVEL_MY__APP", "my_app"),
        ],
    )
    def test_module_from_name(self, name: str, module: str) -> None:
        var = LogEnvVar.from_env_var(name, "DEBUG")
        assert var is not None
        assert var.module == module

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["LOGLEVEL", "LOG_LEVEL_lower", "PP_LOG_LEVEL"])
    def test_unrelated_names_ignored(self, name: str) -> None:
        assert LogEnvVar.from_env_var(name, "DEBUG") is None


# ---------- Pattern strings ----------


class TestPatternStrings:
    @pytest.mark.unit
    def test_bare_level_sets_default(self, monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
        monkeypatch.setenv("LOG_LEVELS", "DEBUG")
        assert LogLevelConfig().get_effective_level("any.module") == logging.DEBUG

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["mstair.pp.*:DEBUG", "mstair.pp.*=DEBUG", '"mstair.pp.*":"debug"'])
    def test_assignment_forms(self, monkeypatch: pytest.MonkeyPatch, clean_env: None, value: str) -> None:
        monkeypatch.setenv("LOG_LEVELS", value)
        config = LogLevelConfig()
        assert config.pattern_to_level == {"mstair.pp.*": logging.DEBUG}

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value",
        ["a:DEBUG;b:INFO", "a:DEBUG,b:INFO", "a:DEBUG b:INFO", ";; a:DEBUG ,, b:INFO ;"],
    )
    def test_fragment_separators(self, monkeypatch: pytest.MonkeyPatch, clean_env: None, value: str) -> None:
        monkeypatch.setenv("LOG_LEVELS", value)
        assert LogLevelConfig().pattern_to_level == {"a": logging.DEBUG, "b": logging.INFO}

    @pytest.mark.unit
    def test_root_alias(self, monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
        monkeypatch.setenv("LOG_LEVELS", "root=ERROR; mstair=INFO")
        config = LogLevelConfig()
        assert config.get_effective_level("mstair.pp.demo") == logging.INFO
        assert config.get_effective_level("urllib3") == logging.ERROR

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["10", "LOUD", "x:DEBUG:extra", ""])
    def test_unusable_entries_skipped(self, monkeypatch: pytest.MonkeyPatch, clean_env: None, value: str) -> None:
        monkeypatch.setenv("LOG_LEVELS", value)
        config = LogLevelConfig()
        assert config.pattern_to_level == {}
        assert config.get_effective_level("x") == logging.WARNING

    @pytest.mark.unit
    def test_trace_level_name(self, monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
        monkeypatch.setenv("LOG_LEVEL", "mstair.pp.xprint.layout:TRACE")
        assert LogLevelConfig.get_instance().get_effective_level("mstair.pp.xprint.layout") == logging.DEBUG - 1


# ---------- Per-module variables ----------


class TestModuleVariables:
    @pytest.mark.unit
    def test_module_override(self, monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
        monkeypatch.setenv("LOG_LEVELS", "mstair.pp.*:DEBUG")
        monkeypatch.setenv("LOG_LEVEL_MSTAIR_PP_XPRINT", "ERROR")
        config = LogLevelConfig()
        assert config.get_effective_level("mstair.pp.xprint.renderer") == logging.ERROR
        assert config.get_effective_level("mstair.pp.xlogging") == logging.DEBUG

    @pytest.mark.unit
    def test_module_pattern_is_scoped(self, monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
        monkeypatch.setenv("LOG_LEVEL_MSTAIR_PP", "xprint=INFO")
        assert LogLevelConfig().pattern_to_level == {"mstair.pp.xprint": logging.INFO}

    @pytest.mark.unit
    def test_double_underscore_escape(self, monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
        monkeypatch.setenv("LOG_LEVEL_MY__APP", "DEBUG")
        config = LogLevelConfig()
        assert config.get_effective_level("my_app") == logging.DEBUG
        assert config.get_effective_level("my.app") == logging.WARNING


# ---------- Precedence ----------


class TestPrecedence:
    @pytest.mark.unit
    def test_exact_beats_glob(self, monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
        monkeypatch.setenv("LOG_LEVELS", "mstair.*:DEBUG; mstair.pp:ERROR")
        assert LogLevelConfig().get_effective_level("mstair.pp") == logging.ERROR

    @pytest.mark.unit
    def test_ancestor_beats_glob(self, monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
        monkeypatch.setenv("LOG_LEVELS", "mstair.*:DEBUG; mstair.pp:ERROR")
        assert LogLevelConfig().get_effective_level("mstair.pp.xprint") == logging.ERROR

    @pytest.mark.unit
    def test_longest_fixed_prefix_glob_wins(self, monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
        monkeypatch.setenv("LOG_LEVELS", "m*:DEBUG; mstair.pp.*:INFO")
        assert LogLevelConfig().get_effective_level("mstair.pp.demo") == logging.INFO

    @pytest.mark.unit
    @pytest.mark.parametrize(("name", "level"), [("pkg1", logging.DEBUG), ("pkg12", logging.WARNING)])
    def test_question_glob(
        self, monkeypatch: pytest.MonkeyPatch, clean_env: None, name: str, level: int
    ) -> None:
        monkeypatch.setenv("LOG_LEVELS", "pkg?:DEBUG")
        assert LogLevelConfig().get_effective_level(name) == level

    @pytest.mark.unit
    def test_default_after_globs(self, monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
        monkeypatch.setenv("LOG_LEVELS", "INFO; m*:DEBUG")
        config = LogLevelConfig()
        assert config.get_effective_level("misc") == logging.DEBUG
        assert config.get_effective_level("zzz") == logging.INFO

    @pytest.mark.unit
    def test_case_insensitive(self, monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
        monkeypatch.setenv("LOG_LEVELS", "MSTAIR.PP.*:DEBUG")
        assert LogLevelConfig().get_effective_level("mstair.pp.Demo") == logging.DEBUG


# ---------- Lifecycle ----------


class TestLifecycle:
    @pytest.mark.unit
    def test_update_replaces_patterns(self, monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
        monkeypatch.setenv("LOG_LEVEL", "a.*:DEBUG")
        config = LogLevelConfig()
        monkeypatch.setenv("LOG_LEVEL", "b.*:INFO")
        config.update_from_environment()
        assert config.pattern_to_level == {"b.*": logging.INFO}

    @pytest.mark.unit
    def test_singleton_until_reload(self, monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        first = LogLevelConfig.get_instance()
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        second = LogLevelConfig.get_instance()
        assert first is second
        assert second.get_effective_level("x") == logging.INFO
        second.update_from_environment()
        assert second.get_effective_level("x") == logging.ERROR


# End of file: src/mstair/pp/xlogging/test_logger_util.py
