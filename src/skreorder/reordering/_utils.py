"""Rank Reordering Utils."""

# Copyright (c) 2025
# Authors: The skreorder developers
# SPDX-License-Identifier: BSD-3-Clause

from enum import auto

import numpy as np
import numpy.typing as npt
import scipy.stats as st
import sklearn.utils as sku

from skreorder.typing import RandomState
from skreorder.utils.tools import AutoEnum

__all__ = [
    "TieBreak",
    "count_ties",
    "gather_by_rank",
    "rank_samples",
    "sort_marginals",
]


class TieBreak(AutoEnum):
    """Enum representing the policy used to rank tied copula samples.

    Attributes
    ----------
    STABLE : str
        Tied values are ranked by original position: the earlier position gets the
        lower rank. This is the `"ordinal"` method of `scipy.stats.rankdata`.

    RANDOM : str
        Tied values are ranked in a random order drawn from `random_state`.
    """

    STABLE = auto()
    RANDOM = auto()


def sort_marginals(X: npt.ArrayLike) -> np.ndarray:
    """Sort each column of the marginal samples in non-decreasing order.

    Only the sorted values are kept: the original order of the marginal samples
    carries no information once they are assumed independent.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_variables) or (n_samples,)
        Marginal samples.

    Returns
    -------
    sorted_marginals : ndarray of the same shape as `X`
        Column-wise sorted samples, with the dtype of `X`.
    """
    return np.sort(np.asarray(X), axis=0)


def rank_samples(
    X: npt.ArrayLike,
    tie_break: TieBreak | str = TieBreak.STABLE,
    random_state: RandomState = None,
) -> np.ndarray:
    """Compute the column-wise ranks of the copula samples.

    Ranks start at 1 for the smallest value of each column and form a permutation
    of `1..n_samples`, ties being resolved by `tie_break`.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_variables) or (n_samples,)
        Copula samples.

    tie_break : TieBreak or str, default=TieBreak.STABLE
        Policy used to rank tied values. Untied columns are ranked identically
        under every policy.

    random_state : int, RandomState instance or None, default=None
        Seed or random state used by `TieBreak.RANDOM`.

    Returns
    -------
    ranks : ndarray of int of the same shape as `X`
        Column-wise 1-based ranks.

    Examples
    --------
    >>> rank_samples([0.2, 0.9, 0.5])
    array([1, 3, 2])
    >>> rank_samples([0.5, 0.1, 0.5])
    array([2, 1, 3])
    """
    X = np.asarray(X)
    tie_break = TieBreak(tie_break)
    is_1d = X.ndim == 1
    if is_1d:
        X = X.reshape(-1, 1)

    match tie_break:
        case TieBreak.STABLE:
            ranks = st.rankdata(X, method="ordinal", axis=0).astype(int)
        case TieBreak.RANDOM:
            rng = sku.check_random_state(random_state)
            n_samples, n_variables = X.shape
            ranks = np.empty(X.shape, dtype=int)
            for i in range(n_variables):
                # Ordinal ranks of a random permutation break ties at random.
                perm = rng.permutation(n_samples)
                ranks[perm, i] = st.rankdata(X[perm, i], method="ordinal")
        case _:
            raise ValueError(f"Unsupported tie break: {tie_break}")

    if is_1d:
        ranks = ranks.ravel()
    return ranks


def gather_by_rank(sorted_marginals: npt.ArrayLike, ranks: npt.ArrayLike) -> np.ndarray:
    """Gather the sorted marginal samples according to the ranks.

    The output value at position `j` of variable `i` is the `ranks[j, i]`-th
    smallest marginal sample of variable `i`.

    Parameters
    ----------
    sorted_marginals : array-like of shape (n_samples, n_variables) or (n_samples,)
        Column-wise sorted marginal samples.

    ranks : array-like of int of the same shape as `sorted_marginals`
        Column-wise 1-based ranks.

    Returns
    -------
    reordered : ndarray of the same shape as `sorted_marginals`
        Reordered samples.

    Raises
    ------
    ValueError
        If the shapes differ or a rank is outside `[1, n_samples]`.
    """
    sorted_marginals = np.asarray(sorted_marginals)
    ranks = np.asarray(ranks)
    if sorted_marginals.shape != ranks.shape:
        raise ValueError(
            f"`sorted_marginals` and `ranks` must have the same shape, got "
            f"{sorted_marginals.shape} and {ranks.shape}"
        )
    n_samples = sorted_marginals.shape[0]
    if ranks.size and (ranks.min() < 1 or ranks.max() > n_samples):
        raise ValueError(f"`ranks` must be between 1 and {n_samples}")
    return np.take_along_axis(sorted_marginals, ranks.astype(int) - 1, axis=0)


def count_ties(X: np.ndarray) -> np.ndarray:
    """Number of samples sharing their value with an earlier sample, per column.

    Parameters
    ----------
    X : ndarray of shape (n_samples, n_variables)
        Samples.

    Returns
    -------
    n_ties : ndarray of int of shape (n_variables,)
        Tied sample count of each column.
    """
    X = np.sort(X, axis=0)
    return np.count_nonzero(X[1:] == X[:-1], axis=0)
