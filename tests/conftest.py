"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from maxentkit.config import TrainingParameters
from maxentkit.events import Event


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def test_data_dir(project_root: Path) -> Path:
    """Return the test data directory."""
    return project_root / "tests" / "data"


@pytest.fixture
def toy_events() -> list[Event]:
    """Two-class corpus with disjoint vocabularies (three events per class)."""
    return [
        Event("1", ["a", "b", "c"]),
        Event("1", ["a", "b"]),
        Event("1", ["b", "c"]),
        Event("0", ["x", "y", "z"]),
        Event("0", ["x", "y"]),
        Event("0", ["y", "z"]),
    ]


@pytest.fixture
def weather_events() -> list[Event]:
    """Small overlapping corpus with repeated events."""
    return [
        Event("rain", ["cloudy", "humid", "cold"]),
        Event("rain", ["cloudy", "humid"]),
        Event("rain", ["cloudy", "humid"]),
        Event("sun", ["clear", "dry", "warm"]),
        Event("sun", ["clear", "warm"]),
        Event("sun", ["cloudy", "warm", "dry"]),
        Event("snow", ["cloudy", "cold", "dry"]),
        Event("snow", ["cold", "humid"]),
    ]


@pytest.fixture
def make_parameters():
    """Build a parameter bag from keyword arguments (cutoff defaults to 0)."""

    def _make(**values: object) -> TrainingParameters:
        values.setdefault("Cutoff", 0)
        return TrainingParameters(values)

    return _make
