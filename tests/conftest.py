"""Pytest configuration and shared fixtures."""

import random

import numpy as np
import pytest

from voxbreed.genotype.innovation_tracker import InnovationTracker
from voxbreed.genotype.genome             import Genome
from voxbreed.run.config                  import Config


@pytest.fixture(autouse=True)
def set_random_seeds():
    """Set random seeds for reproducibility."""
    random.seed(42)
    np.random.seed(42)
    yield
    random.seed(None)
    np.random.seed(None)


@pytest.fixture
def tracker():
    """A fresh innovation tracker, as owned by one run."""
    return InnovationTracker()


@pytest.fixture
def config():
    """Default configuration."""
    return Config()


@pytest.fixture
def seed_genome(tracker):
    """The seed genome of a fresh run."""
    return Genome.seed(tracker)
