# FILE: tests/conftest.py
"""
Pytest configuration for the SDLCraft test suite.

Provides:
- parser / engine fixtures on the default vocabulary
- strict_engine fixture (targets validated against the vocabulary)

Async tests run through pytest-asyncio (asyncio_mode = "auto" in pyproject.toml).
"""
import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest

from sdlcraft.grammar import GrammarConfig, GrammarParser, RepairEngine


@pytest.fixture
def parser():
    return GrammarParser()


@pytest.fixture
def engine(parser):
    return RepairEngine(parser)


@pytest.fixture
def strict_parser():
    return GrammarParser(GrammarConfig(strict_targets=True))


@pytest.fixture
def strict_engine(strict_parser):
    return RepairEngine(strict_parser)
