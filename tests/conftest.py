import numpy as np
import pytest

from compositions import reset_option


@pytest.fixture(autouse=True)
def default_options():
    reset_option()
    yield
    reset_option()


@pytest.fixture
def random_compositions():
    """Strictly positive compositions (rows) drawn from a flat Dirichlet."""
    rng = np.random.default_rng(42)
    return rng.dirichlet(np.ones(6), size=50) * rng.uniform(1, 1000, size=(50, 1))
