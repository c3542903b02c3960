# File: src/mstair/pp/base/test_types.py
"""
Unit tests for mstair.pp.base.types and mstair.pp.base.fs_helpers.

Covers:
- MISSING: singleton, falsy, stable through copy and pickle
- bool_from_string(): recognized flags and defaults
- fs_load_dotenv() reading from a stream
"""

from __future__ import annotations

import copy
import io
import os
import pickle

import pytest

from mstair.pp.base.fs_helpers import fs_load_dotenv
from mstair.pp.base.types import MISSING, Missing, bool_from_string


@pytest.mark.unit
def test_missing_is_singleton() -> None:
    assert Missing() is MISSING
    assert copy.copy(MISSING) is MISSING
    assert copy.deepcopy(MISSING) is MISSING
    assert pickle.loads(pickle.dumps(MISSING)) is MISSING


@pytest.mark.unit
def test_missing_is_falsy_and_distinct_from_none() -> None:
    assert not MISSING
    assert MISSING != None  # noqa: E711
    assert repr(MISSING) == "MISSING"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("text", "expected"),
    [("1", True), (" Yes ", True), ("on", True), ("TRUE", True), ("0", False), ("off", False), ("No", False)],
)
def test_bool_from_string(text: str, expected: bool) -> None:
    assert bool_from_string(text) is expected


@pytest.mark.unit
@pytest.mark.parametrize("text", [None, "", "  ", "maybe"])
def test_bool_from_string_default(text: str | None) -> None:
    assert bool_from_string(text) is False
    assert bool_from_string(text, default=None) is None


@pytest.mark.unit
def test_fs_load_dotenv_from_stream(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PP_TEST_DOTENV_VALUE", "")
    monkeypatch.delenv("PP_TEST_DOTENV_VALUE")
    assert fs_load_dotenv(stream=io.StringIO("PP_TEST_DOTENV_VALUE=42\n")) is True
    assert os.environ["PP_TEST_DOTENV_VALUE"] == "42"


# End of file: src/mstair/pp/base/test_types.py
