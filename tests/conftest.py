"""Root test configuration: isolate env-driven settings and logging state"""

import logging
import os

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drop MDTEACH_* variables so each test starts from Settings defaults."""
    for name in list(os.environ):
        if name.startswith("MDTEACH_"):
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
