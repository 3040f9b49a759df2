"""Pytest configuration and fixtures."""

import pytest

from mlframe.config.settings import reload_settings
from mlframe.data.dataframe import Dataframe
from mlframe.data.record import Record
from mlframe.storage.memory import InMemoryConfiguration
from mlframe.tests.helpers import FakeRedis, MajorityClassModel


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Rebuild settings from a clean environment for every test."""
    for name in (
        "MLFRAME_CV_FOLDS",
        "MLFRAME_CV_SHUFFLE",
        "MLFRAME_CV_RANDOM_SEED",
        "MLFRAME_STORAGE_BACKEND",
        "MLFRAME_CSV_DELIMITER",
    ):
        monkeypatch.delenv(name, raising=False)
    yield reload_settings()
    reload_settings()


@pytest.fixture
def configuration():
    """In-memory storage configuration"""
    return InMemoryConfiguration()


@pytest.fixture
def fake_redis():
    """Dict-backed Redis test double"""
    return FakeRedis()


@pytest.fixture
def sample_records():
    """Three labelled records with mixed column types"""
    return [
        Record({"a": 1, "b": "x"}, True),
        Record({"a": 2.5, "c": False}, False),
        Record({"a": 3, "b": "y", "c": True}, True),
    ]


@pytest.fixture
def dataframe(configuration, sample_records):
    """Dataframe holding the sample records"""
    df = Dataframe(configuration)
    df.extend(sample_records)
    yield df
    df.delete()


@pytest.fixture
def labelled_dataframe(configuration):
    """Twelve rows: labels 'spam' x8 then 'ham' x4"""
    df = Dataframe(configuration)
    for i in range(12):
        df.append(Record({"length": float(i), "caps": i % 3 == 0}, "spam" if i < 8 else "ham"))
    yield df
    df.delete()


@pytest.fixture
def model_class():
    """Concrete BaseMLModel used by lifecycle tests"""
    return MajorityClassModel
