"""conftest module."""

import numpy as np
import pytest
import scipy.stats as st


def pytest_configure(config):
    # globally turn off scientific notation in every test session
    np.set_printoptions(suppress=True, precision=6)


@pytest.fixture
def random_data():
    """Fixture that returns a random numpy array in [0,1] of shape (100, 2)."""
    rng = np.random.default_rng(seed=42)
    return rng.random((100, 2))


@pytest.fixture
def marginals():
    """Independent draws from three different marginals, shape (500, 3)."""
    rng = np.random.default_rng(seed=0)
    return np.column_stack(
        [
            rng.standard_t(df=3, size=500),
            rng.lognormal(mean=0.0, sigma=0.5, size=500),
            rng.exponential(scale=2.0, size=500),
        ]
    )


@pytest.fixture
def copula_samples():
    """Gaussian copula samples with correlation 0.7, shape (500, 3)."""
    rng = np.random.default_rng(seed=1)
    corr = np.array([[1.0, 0.7, 0.7], [0.7, 1.0, 0.7], [0.7, 0.7, 1.0]])
    z = rng.multivariate_normal(np.zeros(3), corr, size=500)
    return st.norm.cdf(z)
