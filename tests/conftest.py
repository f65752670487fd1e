"""Pytest bootstrap shared by every test module.

Puts the repository root on ``sys.path`` so ``import lazyjson`` resolves to
the working tree, and points the config file at a per-test temp directory so
no test reads or writes the real user config.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    from lazyjson.runtime import config

    monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "lazyjson-config" / "config.json")
    yield config.CONFIG_PATH


@pytest.fixture(autouse=True)
def fresh_raw_cache():
    from lazyjson.render.raw import clear_raw_cache

    clear_raw_cache()
    yield
    clear_raw_cache()
