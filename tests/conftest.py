"""Shared fixtures: every test starts without a configured backend or session."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from flowgate._config import reset
from flowgate._context import _reset_context


@pytest.fixture(autouse=True)
def _clean_state() -> Iterator[None]:
    reset()
    _reset_context()
    yield
    reset()
    _reset_context()
