from __future__ import annotations

import pytest

from reviewbuddy.config import ReviewBuddyConfig


@pytest.fixture()
def default_config() -> ReviewBuddyConfig:
    return ReviewBuddyConfig()


@pytest.fixture()
def clean_python() -> str:
    return "def add(a, b):\n    return a + b\n"
