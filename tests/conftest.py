"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures required for testing multiple layers.
"""

import random
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator

import pytest

from src.core.config import DifficultyProfile
from tests.helpers import ManualExecutor


@pytest.fixture
def manual_executor() -> ManualExecutor:
    return ManualExecutor()


@pytest.fixture
def thread_pool() -> Iterator[ThreadPoolExecutor]:
    """A real worker thread for the engine search. Shut down at teardown."""
    executor = ThreadPoolExecutor(max_workers=1)
    try:
        yield executor
    finally:
        executor.shutdown(wait=True)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(20240601)


@pytest.fixture
def optimal_profile() -> DifficultyProfile:
    """Always search, but shallow (keeps the tests fast)"""
    return DifficultyProfile(skill=1.0, depth=1)
