"""Rank Reorderer estimator."""

# Copyright (c) 2025
# Authors: The skreorder developers
# SPDX-License-Identifier: BSD-3-Clause

import warnings

import numpy as np
import pandas as pd
import sklearn.base as skb
import sklearn.utils.parallel as skp
import sklearn.utils.validation as skv

from skreorder.exceptions import ShapeMismatchError
from skreorder.reordering._utils import (
    TieBreak,
    count_ties,
    gather_by_rank,
    rank_samples,
    sort_marginals,
)
from skreorder.typing import RandomState, SampleSet
from skreorder.utils.tools import default_variable_names
from skreorder.utils.validation import (
    align_variables,
    check_sample_count,
    validate_sample_set,
    validate_sample_sets,
    wrap_sample_set,
)


class RankReorderer(skb.BaseEstimator):
    r"""Rank Reorderer estimator.

    Imposes the dependence structure of copula samples onto independently drawn
    marginal samples while keeping each variable's empirical marginal distribution
    unchanged.

    For each variable :math:`i`, the marginal samples are sorted in non-decreasing
    order and the copula samples are ranked from 1 (smallest) to :math:`S`. The
    reordered sample at position :math:`j` is the :math:`r_{j,i}`-th smallest
    marginal sample, where :math:`r_{j,i}` is the rank of the copula sample at
    position :math:`j`:

    .. math::
        \tilde{x}_{j,i} = x_{(r_{j,i}),i}

    Each reordered column is therefore a permutation of the marginal column and the
    reordered samples have exactly the rank pattern (empirical copula) of the copula
    samples. The copula family that produced the samples is irrelevant: only their
    ranks are used.

    `fit` learns the ranks from the copula samples and `transform` applies them to
    marginal samples. Use :meth:`fit_reorder` or :func:`reorder` to validate both
    sample sets before any computation.

    Parameters
    ----------
    tie_break : TieBreak or str, default=TieBreak.STABLE
        Policy used to rank tied copula samples:

        - `"stable"`: the earlier position gets the lower rank.
        - `"random"`: ties are ranked in a random order drawn from `random_state`.

    random_state : int, RandomState instance or None, default=None
        Seed or random state used by the `"random"` tie break.

    n_jobs : int, optional
        The number of jobs to run in parallel over the variables.
        `None` means 1 unless in a `joblib.parallel_backend` context.
        `-1` means using all processors.

    Attributes
    ----------
    ranks_ : ndarray of int of shape (n_samples, n_features_in_)
        Column-wise 1-based ranks of the copula samples.

    n_samples_ : int
        Number of samples per variable seen during `fit`.

    n_features_in_ : int
        Number of variables seen during `fit`.

    feature_names_in_ : ndarray of shape (`n_features_in_`,)
        Names of variables seen during `fit`. Defined only when `X` has variable
        names that are all strings.

    Examples
    --------
    >>> import numpy as np
    >>> from skreorder.reordering import RankReorderer
    >>>
    >>> marginals = np.array([[5.0], [1.0], [3.0]])
    >>> copula_samples = np.array([[0.2], [0.9], [0.5]])
    >>> model = RankReorderer()
    >>> model.fit(copula_samples)
    >>> print(model.ranks_.ravel())
    [1 3 2]
    >>> print(model.transform(marginals).ravel())
    [1. 5. 3.]
    """

    ranks_: np.ndarray
    n_samples_: int
    n_features_in_: int
    feature_names_in_: np.ndarray

    def __init__(
        self,
        tie_break: TieBreak | str = TieBreak.STABLE,
        random_state: RandomState = None,
        n_jobs: int | None = None,
    ):
        self.tie_break = tie_break
        self.random_state = random_state
        self.n_jobs = n_jobs

    def fit(self, X: SampleSet, y=None) -> "RankReorderer":
        """Fit the Rank Reorderer on copula samples.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_variables), DataFrame or dict
            Copula samples. Any totally ordered real values are accepted; only their
            ranks are used.

        y : None
            Ignored. Provided for compatibility with scikit-learn's API.

        Returns
        -------
        self : RankReorderer
            Fitted estimator.
        """
        tie_break = TieBreak(self.tie_break)
        X, variable_names = validate_sample_set(X, name="copula_samples")
        self._fit_ranks(
            X, variable_names=variable_names, tie_break=tie_break, stacklevel=3
        )
        return self

    def transform(self, X: SampleSet) -> np.ndarray | pd.DataFrame:
        """Reorder marginal samples according to the fitted ranks.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_variables), DataFrame or dict
            Independently drawn marginal samples. Must have the same number of
            samples and variables as the copula samples seen during `fit`.

        Returns
        -------
        reordered : ndarray or DataFrame of shape (n_samples, n_variables)
            Reordered samples. Each column is a permutation of the corresponding
            marginal column. A DataFrame is returned when `X` or the copula samples
            have variable names.
        """
        skv.check_is_fitted(self)
        X, variable_names = validate_sample_set(X, name="marginals")
        if X.shape[1] != self.n_features_in_:
            raise ShapeMismatchError(
                f"`marginals` has {X.shape[1]} variables but the copula samples seen "
                f"during `fit` have {self.n_features_in_}"
            )
        check_sample_count(
            X, n_samples=self.n_samples_, name="marginals", reference="copula_samples"
        )

        ranks = self.ranks_
        fitted_names = getattr(self, "feature_names_in_", None)
        if variable_names is None:
            variable_names = fitted_names
        elif fitted_names is not None:
            ranks = align_variables(
                ranks, names=fitted_names, target_names=variable_names
            )
        return wrap_sample_set(self._gather(X, ranks), variable_names=variable_names)

    def fit_reorder(
        self, marginals: SampleSet, copula_samples: SampleSet
    ) -> np.ndarray | pd.DataFrame:
        """Validate both sample sets, fit on the copula samples and reorder the
        marginals.

        Validation of both inputs happens before any computation, so that a failure
        never produces a partial result.

        Parameters
        ----------
        marginals : array-like of shape (n_samples, n_variables), DataFrame or dict
            Independently drawn marginal samples.

        copula_samples : array-like of shape (n_samples, n_variables), DataFrame or dict
            Copula samples carrying the target rank structure.

        Returns
        -------
        reordered : ndarray or DataFrame of shape (n_samples, n_variables)
            Reordered samples.
        """
        return self._fit_reorder(marginals, copula_samples, stacklevel=4)

    def _fit_reorder(
        self, marginals: SampleSet, copula_samples: SampleSet, stacklevel: int
    ) -> np.ndarray | pd.DataFrame:
        """Shared implementation of `fit_reorder`.

        `stacklevel` is the warning stack level of the public caller.
        """
        tie_break = TieBreak(self.tie_break)
        marginals, copula_samples, variable_names = validate_sample_sets(
            marginals, copula_samples
        )
        self._fit_ranks(
            copula_samples,
            variable_names=variable_names,
            tie_break=tie_break,
            stacklevel=stacklevel,
        )
        return wrap_sample_set(
            self._gather(marginals, self.ranks_), variable_names=variable_names
        )

    def _fit_ranks(
        self,
        X: np.ndarray,
        variable_names: np.ndarray | None,
        tie_break: TieBreak,
        stacklevel: int,
    ) -> None:
        """Compute and store the ranks of validated copula samples.

        `stacklevel` points the tie warning at the frame that called the public
        entry point.
        """
        self.n_samples_, self.n_features_in_ = X.shape
        if variable_names is not None:
            self.feature_names_in_ = variable_names
        elif hasattr(self, "feature_names_in_"):
            del self.feature_names_in_

        n_ties = count_ties(X)
        if np.any(n_ties):
            names = (
                variable_names
                if variable_names is not None
                else default_variable_names(self.n_features_in_)
            )
            tied = {str(names[i]): int(n_ties[i]) for i in np.flatnonzero(n_ties)}
            warnings.warn(
                f"Copula samples contain tied values {tied}; ties are broken with the "
                f"'{tie_break.value}' policy",
                UserWarning,
                stacklevel=stacklevel,
            )

        self.ranks_ = rank_samples(
            X, tie_break=tie_break, random_state=self.random_state
        )

    def _gather(self, X: np.ndarray, ranks: np.ndarray) -> np.ndarray:
        """Reorder each variable of validated marginal samples in parallel."""
        columns = skp.Parallel(n_jobs=self.n_jobs)(
            skp.delayed(_reorder_variable)(X[:, i], ranks[:, i])
            for i in range(X.shape[1])
        )
        return np.column_stack(columns)


def reorder(
    marginals: SampleSet,
    copula_samples: SampleSet,
    tie_break: TieBreak | str = TieBreak.STABLE,
    random_state: RandomState = None,
    n_jobs: int | None = None,
) -> np.ndarray | pd.DataFrame:
    """Impose the rank structure of copula samples onto marginal samples.

    This is the functional form of :class:`RankReorderer`. It has no side effects
    and, for the `"stable"` tie break, always returns the same output for the same
    inputs.

    Parameters
    ----------
    marginals : array-like of shape (n_samples, n_variables), DataFrame or dict
        Independently drawn marginal samples.

    copula_samples : array-like of shape (n_samples, n_variables), DataFrame or dict
        Copula samples carrying the target rank structure.

    tie_break : TieBreak or str, default=TieBreak.STABLE
        Policy used to rank tied copula samples.

    random_state : int, RandomState instance or None, default=None
        Seed or random state used by the `"random"` tie break.

    n_jobs : int, optional
        The number of jobs to run in parallel over the variables.

    Returns
    -------
    reordered : ndarray or DataFrame of shape (n_samples, n_variables)
        Reordered samples. Each column is a permutation of the corresponding
        marginal column, keeps its dtype and has the ranks of the corresponding
        copula column.

    Raises
    ------
    ShapeMismatchError
        If the number of samples differ between the sample sets or across variables,
        or if the number of variables differ.

    InvalidInputError
        If a sample set is empty, contains non-finite or non-numeric values (strings
        included) or mixes string and non-string variable names.

    Examples
    --------
    >>> from skreorder.reordering import reorder
    >>> reorder([5.0, 1.0, 3.0], [0.2, 0.9, 0.5]).ravel()
    array([1., 5., 3.])
    """
    model = RankReorderer(tie_break=tie_break, random_state=random_state, n_jobs=n_jobs)
    return model._fit_reorder(marginals, copula_samples, stacklevel=4)


def _reorder_variable(x: np.ndarray, ranks: np.ndarray) -> np.ndarray:
    """Return the sorted samples of one variable gathered by rank."""
    return gather_by_rank(sort_marginals(x), ranks)
