import os

import pytest

from core.engine import ReaderEngine
from core.models import Chapter
from core.scheduler import ManualScheduler

from tests.fakes import FakeStore

# Run Qt headless when no display is available.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def engine(store, scheduler):
    store.settings["words_per_page"] = 10
    reader = ReaderEngine(store, scheduler)
    reader.load_settings()
    return reader


@pytest.fixture
def chapters():
    return [Chapter("c1", "Opening", 0), Chapter("c2", "Middle", 45), Chapter("c3", "End", 90)]
