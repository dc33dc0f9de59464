"""Rank Dependence Measures."""

# Copyright (c) 2025
# Authors: The skreorder developers
# SPDX-License-Identifier: BSD-3-Clause

from enum import auto

import numpy as np
import numpy.typing as npt
import scipy.stats as st

from skreorder.typing import SampleSet
from skreorder.utils.tools import AutoEnum
from skreorder.utils.validation import validate_sample_set

__all__ = [
    "CorrelationMethod",
    "compute_pseudo_observations",
    "empirical_tail_concentration",
    "rank_correlation",
]


class CorrelationMethod(AutoEnum):
    """Enum representing the rank correlation measures.

    Attributes
    ----------
    KENDALL : str
        Kendall's tau-b.

    SPEARMAN : str
        Spearman's rho.
    """

    KENDALL = auto()
    SPEARMAN = auto()


def compute_pseudo_observations(X: npt.ArrayLike) -> np.ndarray:
    """
    Compute pseudo-observations by ranking each column of the data and scaling the
    ranks.

    Pseudo-observations have uniform marginal distributions on the open interval
    (0, 1) and keep only the dependence structure of the data. For each column, the
    ranks (starting at 1) are divided by (n_samples + 1) to avoid 0 and 1 values,
    which are problematic for many copula methods.

    Parameters
    ----------
    X : array-like of shape (n_observations, n_variables)
        Input data.

    Returns
    -------
    pseudo_observations: ndarray of shape (n_observations, n_variables)
        An array of pseudo-observations corresponding to the ranks scaled to (0, 1).
    """
    X = np.asarray(X)
    # rankdata returns ranks starting at 1
    ranks = st.rankdata(X, axis=0)
    n_samples = X.shape[0]
    pseudo_observations = ranks / (n_samples + 1)
    return pseudo_observations


def rank_correlation(
    X: npt.ArrayLike, method: CorrelationMethod | str = CorrelationMethod.KENDALL
) -> np.ndarray:
    """Compute the pairwise rank correlation matrix of the variables in X.

    Rank correlations depend only on the ranks of the samples, so they are
    invariant under rank reordering: the reordered samples have the same rank
    correlation matrix as the copula samples that produced them.

    Parameters
    ----------
    X : array-like of shape (n_observations, n_variables)
        Input data with at least two observations.

    method : CorrelationMethod or str, default=CorrelationMethod.KENDALL
        Rank correlation measure.

    Returns
    -------
    correlation : ndarray of shape (n_variables, n_variables)
        Symmetric rank correlation matrix with ones on the diagonal.

    Raises
    ------
    ValueError
        If X is not a 2D array with at least two observations.
    """
    X = np.asarray(X, dtype=float)
    method = CorrelationMethod(method)
    if X.ndim != 2 or X.shape[0] < 2:
        raise ValueError("X must be a 2D array with at least two observations.")

    n_variables = X.shape[1]
    correlation = np.eye(n_variables)
    for i in range(n_variables):
        for j in range(i + 1, n_variables):
            match method:
                case CorrelationMethod.KENDALL:
                    res = st.kendalltau(X[:, i], X[:, j])
                case CorrelationMethod.SPEARMAN:
                    res = st.spearmanr(X[:, i], X[:, j])
                case _:
                    raise ValueError(f"Unsupported correlation method: {method}")
            correlation[i, j] = correlation[j, i] = res.statistic
    return correlation


def empirical_tail_concentration(X: SampleSet, quantiles: npt.ArrayLike) -> np.ndarray:
    r"""Compute the empirical tail concentration function of two variables.

    The samples are first converted to pseudo-observations :math:`(U_1, U_2)`, so
    the result only depends on their ranks: marginal samples reordered by
    :func:`~skreorder.reordering.reorder` have the tail concentration of the copula
    samples that produced them.

    For a quantile level :math:`q`, the concentration is:

    .. math::
        \begin{cases}
            P(U_2 \le q \mid U_1 \le q) & \text{if } q \le 0.5 \\
            P(U_2 \ge q \mid U_1 \ge q) & \text{otherwise}
        \end{cases}

    It tends to the lower (resp. upper) tail dependence coefficient when :math:`q`
    tends to 0 (resp. 1). Levels for which no sample of the first variable lies in
    the tail have a concentration of 0.

    Parameters
    ----------
    X : array-like of shape (n_samples, 2), DataFrame or dict
        Samples of the two variables, in any scale.

    quantiles : array-like of shape (n_quantiles,)
        Quantile levels in [0, 1].

    Returns
    -------
    concentration : ndarray of shape (n_quantiles,)
        Empirical tail concentration at each quantile level.

    Raises
    ------
    ValueError
        If X does not have exactly two variables or if a quantile level is outside
        [0, 1].

    References
    ----------
    .. [1] "Quantitative Risk Management: Concepts, Techniques, and Tools",
        McNeil, Frey, Embrechts (2005)
    """
    X, _ = validate_sample_set(X, name="X")
    if X.shape[1] != 2:
        raise ValueError(f"X must contain exactly 2 variables, got {X.shape[1]}")
    quantiles = np.asarray(quantiles, dtype=float)
    if quantiles.ndim != 1 or np.any((quantiles < 0) | (quantiles > 1)):
        raise ValueError("quantiles must be a 1D array of levels in [0, 1]")

    U = compute_pseudo_observations(X)[np.newaxis]
    q = quantiles[:, np.newaxis, np.newaxis]
    # shape (n_quantiles, n_samples, 2)
    in_tail = np.where(q <= 0.5, U <= q, U >= q)
    n_first = np.count_nonzero(in_tail[..., 0], axis=1)
    n_joint = np.count_nonzero(in_tail.all(axis=2), axis=1)
    return np.divide(n_joint, n_first, out=np.zeros(len(quantiles)), where=n_first > 0)
