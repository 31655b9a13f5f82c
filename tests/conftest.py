"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import engine...' works, and
provides the small fixtures shared across test modules.
"""
import sys
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from core.config import SimulationConfig  # noqa: E402
from data_prep.fx_dataset import FxDataset  # noqa: E402


@pytest.fixture
def closes():
    """Four monthly closes with returns ~[0.10, -0.10, 0.0606]."""
    return [1.00, 1.10, 0.99, 1.05]


@pytest.fixture
def returns(closes):
    from distributions.returns import closes_to_returns
    return closes_to_returns(closes)


@pytest.fixture(scope="session")
def sample_dataset():
    return FxDataset.sample()


@pytest.fixture
def small_config():
    return SimulationConfig(months=6, sims=500, seed=11)
