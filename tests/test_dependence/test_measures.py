import numpy as np
import pytest

from skreorder import InvalidInputError, reorder
from skreorder.dependence import (
    CorrelationMethod,
    compute_pseudo_observations,
    empirical_tail_concentration,
    rank_correlation,
)


def test_compute_pseudo_observations():
    X = np.array([[3, 1], [2, 4], [5, 3]])
    pseudo_obs = compute_pseudo_observations(X)
    assert pseudo_obs.shape == X.shape
    assert np.all((pseudo_obs > 0) & (pseudo_obs < 1))
    np.testing.assert_almost_equal(pseudo_obs[:, 0], [0.5, 0.25, 0.75])


def test_rank_correlation_kendall():
    X = np.array([[1.0, 1.0, 4.0], [2.0, 2.0, 3.0], [3.0, 3.0, 2.0], [4.0, 4.0, 1.0]])
    corr = rank_correlation(X)
    np.testing.assert_almost_equal(
        corr, [[1.0, 1.0, -1.0], [1.0, 1.0, -1.0], [-1.0, -1.0, 1.0]]
    )


def test_rank_correlation_spearman(random_data):
    corr = rank_correlation(random_data, method=CorrelationMethod.SPEARMAN)
    assert corr.shape == (2, 2)
    np.testing.assert_almost_equal(np.diag(corr), [1.0, 1.0])
    assert corr[0, 1] == corr[1, 0]
    assert -1.0 <= corr[0, 1] <= 1.0


def test_rank_correlation_invariant_to_monotone_transform(random_data):
    transformed = np.column_stack([np.exp(random_data[:, 0]), random_data[:, 1] ** 3])
    for method in ["kendall", "spearman"]:
        np.testing.assert_almost_equal(
            rank_correlation(transformed, method=method),
            rank_correlation(random_data, method=method),
        )


def test_rank_correlation_raise():
    with pytest.raises(ValueError, match="at least two observations"):
        rank_correlation(np.array([[0.1, 0.2]]))
    with pytest.raises(ValueError, match="is not a valid CorrelationMethod"):
        rank_correlation(np.random.rand(10, 2), method="pearson")



def _clayton_samples(theta, n_samples, seed):
    # Marshall-Olkin sampling of a bivariate Clayton copula
    rng = np.random.default_rng(seed)
    v = rng.gamma(1 / theta, size=(n_samples, 1))
    e = rng.exponential(size=(n_samples, 2))
    return (1 + e / v) ** (-1 / theta)


def test_empirical_tail_concentration_comonotonic(random_data):
    x = random_data[:, 0]
    X = np.column_stack([x, np.exp(x)])
    quantiles = np.array([0.05, 0.25, 0.75, 0.95])
    np.testing.assert_almost_equal(
        empirical_tail_concentration(X, quantiles), [1.0, 1.0, 1.0, 1.0]
    )


def test_empirical_tail_concentration_countermonotonic(random_data):
    x = random_data[:, 0]
    quantiles = np.array([0.1, 0.4, 0.6, 0.9])
    np.testing.assert_almost_equal(
        empirical_tail_concentration(np.column_stack([x, -x]), quantiles),
        [0.0, 0.0, 0.0, 0.0],
    )


def test_empirical_tail_concentration_empty_tail():
    X = np.array([[1.0, 2.0], [2.0, 1.0], [3.0, 3.0]])
    np.testing.assert_almost_equal(
        empirical_tail_concentration(X, [0.0, 1.0]), [0.0, 0.0]
    )


def test_empirical_tail_concentration_accepts_named_samples():
    X = {"a": [1.0, 2.0, 3.0, 4.0], "b": [10, 20, 30, 40]}
    np.testing.assert_almost_equal(
        empirical_tail_concentration(X, [0.4, 0.6]), [1.0, 1.0]
    )


def test_empirical_tail_concentration_invariant_under_reordering(marginals):
    copula_samples = _clayton_samples(theta=3.0, n_samples=500, seed=0)
    reordered = reorder(marginals[:, :2], copula_samples)
    quantiles = np.linspace(0.01, 0.99, 15)
    np.testing.assert_array_equal(
        empirical_tail_concentration(reordered, quantiles),
        empirical_tail_concentration(copula_samples, quantiles),
    )


def test_empirical_tail_concentration_clayton_vs_rotated():
    copula_samples = _clayton_samples(theta=3.0, n_samples=2000, seed=1)
    rng = np.random.default_rng(2)
    marginals = np.column_stack(
        [rng.standard_t(df=4, size=2000), rng.lognormal(size=2000)]
    )
    clayton = reorder(marginals, copula_samples)
    rotated = reorder(marginals, 1 - copula_samples)

    quantiles = np.array([0.05, 0.95])
    lower, upper = empirical_tail_concentration(clayton, quantiles)
    # Clayton copulas only have lower tail dependence
    assert lower > 0.6
    assert upper < 0.4
    # The rotated copula mirrors both tails
    np.testing.assert_almost_equal(
        empirical_tail_concentration(rotated, quantiles), [upper, lower]
    )


def test_empirical_tail_concentration_raise():
    with pytest.raises(ValueError, match="exactly 2 variables, got 3"):
        empirical_tail_concentration(np.random.rand(10, 3), [0.1, 0.9])
    with pytest.raises(ValueError, match="levels in \\[0, 1\\]"):
        empirical_tail_concentration(np.random.rand(10, 2), [0.1, 1.5])
    with pytest.raises(InvalidInputError, match="non-finite"):
        empirical_tail_concentration([[0.1, np.nan], [0.2, 0.3]], [0.5])
