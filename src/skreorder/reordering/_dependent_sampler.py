"""Dependent Sampler estimator."""

# Copyright (c) 2025
# Authors: The skreorder developers
# SPDX-License-Identifier: BSD-3-Clause

import numpy as np
import pandas as pd
import sklearn.base as skb
import sklearn.utils.parallel as skp
import sklearn.utils.validation as skv

from skreorder.dependence import compute_pseudo_observations
from skreorder.exceptions import ShapeMismatchError
from skreorder.reordering._rank_reorderer import RankReorderer
from skreorder.reordering._utils import TieBreak
from skreorder.typing import RandomState, SampleSet
from skreorder.utils.tools import check_estimator, check_sample_method
from skreorder.utils.validation import validate_sample_set, wrap_sample_set


class DependentSampler(skb.BaseEstimator):
    """Dependent Sampler estimator.

    Generates dependent samples by drawing each variable independently from its
    marginal estimator, drawing copula samples from the copula estimator and
    imposing the copula ranks onto the marginal samples with a
    :class:`RankReorderer`.

    The marginal and copula estimators are external collaborators: any estimator
    inheriting from `BaseEstimator` and implementing a `sample` method with an
    `n_samples` parameter can be used, for example the univariate and bivariate
    copula estimators of `skfolio.distribution`.

    During `fit`, each marginal estimator is fitted on its own variable and the
    copula estimator is fitted on the pseudo-observations of `X` (the canonical
    maximum likelihood two-step). Fitting is delegated to the estimators.

    Parameters
    ----------
    marginal_estimators : BaseEstimator or list[BaseEstimator]
        Either a list of univariate estimators, one per variable, whose `sample`
        method returns an array of shape (n_samples,) or (n_samples, 1), or a single
        estimator whose `sample` method returns an array of shape
        (n_samples, n_variables) of independent variables.

    copula_estimator : BaseEstimator
        Estimator whose `sample` method returns copula samples of shape
        (n_samples, n_variables).

    fit_marginals : bool, default=True
        If True, clone and fit the marginal estimators during `fit`. If False, the
        marginal estimators must already be fitted and are used as is.

    fit_copula : bool, default=True
        If True, clone and fit the copula estimator on the pseudo-observations of `X`
        during `fit`. If False, the copula estimator must already be fitted and is
        used as is.

    tie_break : TieBreak or str, default=TieBreak.STABLE
        Policy used to rank tied copula samples.

    random_state : int, RandomState instance or None, default=None
        Seed or random state used by the `"random"` tie break.

    n_jobs : int, optional
        The number of jobs to run in parallel for fitting the marginal estimators
        and reordering the variables.
        `None` means 1 unless in a `joblib.parallel_backend` context.
        `-1` means using all processors.

    Attributes
    ----------
    marginal_estimators_ : BaseEstimator or list[BaseEstimator]
        The fitted marginal estimators.

    copula_estimator_ : BaseEstimator
        The fitted copula estimator.

    n_features_in_ : int
        Number of variables seen during `fit`.

    feature_names_in_ : ndarray of shape (`n_features_in_`,)
        Names of variables seen during `fit`. Defined only when `X` has variable
        names that are all strings.

    Examples
    --------
    >>> from skfolio.datasets import load_sp500_dataset
    >>> from skfolio.distribution import GumbelCopula, StudentT
    >>> from skfolio.preprocessing import prices_to_returns
    >>> from skreorder.reordering import DependentSampler
    >>>
    >>> prices = load_sp500_dataset()
    >>> X = prices_to_returns(prices[["BAC", "JPM"]])
    >>>
    >>> model = DependentSampler(
    ...     marginal_estimators=[StudentT(), StudentT()],
    ...     copula_estimator=GumbelCopula(),
    ... )
    >>> model.fit(X)
    >>> samples = model.sample(n_samples=1000)
    """

    marginal_estimators_: skb.BaseEstimator | list[skb.BaseEstimator]
    copula_estimator_: skb.BaseEstimator
    n_features_in_: int
    feature_names_in_: np.ndarray

    def __init__(
        self,
        marginal_estimators: skb.BaseEstimator | list[skb.BaseEstimator],
        copula_estimator: skb.BaseEstimator,
        fit_marginals: bool = True,
        fit_copula: bool = True,
        tie_break: TieBreak | str = TieBreak.STABLE,
        random_state: RandomState = None,
        n_jobs: int | None = None,
    ):
        self.marginal_estimators = marginal_estimators
        self.copula_estimator = copula_estimator
        self.fit_marginals = fit_marginals
        self.fit_copula = fit_copula
        self.tie_break = tie_break
        self.random_state = random_state
        self.n_jobs = n_jobs

    def fit(self, X: SampleSet, y=None) -> "DependentSampler":
        """Fit the marginal and copula estimators.

        Parameters
        ----------
        X : array-like of shape (n_observations, n_variables), DataFrame or dict
            Observations of the variables.

        y : None
            Ignored. Provided for compatibility with scikit-learn's API.

        Returns
        -------
        self : DependentSampler
            Fitted estimator.
        """
        TieBreak(self.tie_break)
        X, variable_names = validate_sample_set(X, name="X")
        n_variables = X.shape[1]

        if isinstance(self.marginal_estimators, list | tuple):
            if len(self.marginal_estimators) != n_variables:
                raise ShapeMismatchError(
                    f"`marginal_estimators` must contain one estimator per variable, "
                    f"got {len(self.marginal_estimators)} estimators for "
                    f"{n_variables} variables"
                )
            marginal_estimators = [
                _check_collaborator(
                    est, name="marginal_estimators", clone=self.fit_marginals
                )
                for est in self.marginal_estimators
            ]
            if self.fit_marginals:
                marginal_estimators = skp.Parallel(n_jobs=self.n_jobs)(
                    skp.delayed(_fit_estimator)(est, X[:, [i]])
                    for i, est in enumerate(marginal_estimators)
                )
        else:
            marginal_estimators = _check_collaborator(
                self.marginal_estimators,
                name="marginal_estimators",
                clone=self.fit_marginals,
            )
            if self.fit_marginals:
                marginal_estimators = _fit_estimator(marginal_estimators, X)

        copula_estimator = _check_collaborator(
            self.copula_estimator, name="copula_estimator", clone=self.fit_copula
        )
        if self.fit_copula:
            copula_estimator = _fit_estimator(
                copula_estimator, compute_pseudo_observations(X)
            )

        self.marginal_estimators_ = marginal_estimators
        self.copula_estimator_ = copula_estimator
        self.n_features_in_ = n_variables
        if variable_names is not None:
            self.feature_names_in_ = variable_names
        elif hasattr(self, "feature_names_in_"):
            del self.feature_names_in_
        return self

    def sample(self, n_samples: int = 1) -> np.ndarray | pd.DataFrame:
        """Generate dependent samples.

        Marginal samples and copula samples are drawn independently, then the
        marginal samples are reordered to follow the ranks of the copula samples.

        Parameters
        ----------
        n_samples : int, default=1
            Number of samples to generate.

        Returns
        -------
        X : ndarray or DataFrame of shape (n_samples, n_variables)
            Dependent samples. A DataFrame is returned when the sampler was fitted
            on data with variable names.
        """
        skv.check_is_fitted(self)
        if (
            isinstance(n_samples, bool)
            or not isinstance(n_samples, int | np.integer)
            or n_samples < 1
        ):
            raise ValueError(f"`n_samples` must be a positive integer, got {n_samples}")

        marginals = self._sample_marginals(n_samples)
        copula_samples = np.asarray(
            self.copula_estimator_.sample(n_samples=n_samples), dtype=float
        )
        if copula_samples.ndim == 2 and copula_samples.shape[1] != self.n_features_in_:
            raise ShapeMismatchError(
                f"`copula_estimator` returned {copula_samples.shape[1]} variables, "
                f"expected {self.n_features_in_}"
            )

        reorderer = RankReorderer(
            tie_break=self.tie_break,
            random_state=self.random_state,
            n_jobs=self.n_jobs,
        )
        reordered = reorderer._fit_reorder(marginals, copula_samples, stacklevel=4)
        return wrap_sample_set(
            reordered, variable_names=getattr(self, "feature_names_in_", None)
        )

    def _sample_marginals(self, n_samples: int) -> np.ndarray:
        """Draw independent marginal samples of shape (n_samples, n_variables)."""
        if isinstance(self.marginal_estimators_, list):
            columns = []
            for i, est in enumerate(self.marginal_estimators_):
                column = np.asarray(est.sample(n_samples=n_samples), dtype=float)
                if column.size != n_samples:
                    raise ShapeMismatchError(
                        f"The marginal estimator of variable {i} returned "
                        f"{column.shape} samples, expected ({n_samples}, 1)"
                    )
                columns.append(column.reshape(-1))
            return np.column_stack(columns)

        marginals = np.asarray(
            self.marginal_estimators_.sample(n_samples=n_samples), dtype=float
        )
        if marginals.ndim == 1:
            marginals = marginals.reshape(-1, 1)
        if marginals.shape[1] != self.n_features_in_:
            raise ShapeMismatchError(
                f"`marginal_estimators` returned {marginals.shape[1]} variables, "
                f"expected {self.n_features_in_}"
            )
        return marginals


def _check_collaborator(
    estimator: skb.BaseEstimator, name: str, clone: bool
) -> skb.BaseEstimator:
    """Check the type and the `sample` method of a collaborator estimator."""
    if clone:
        estimator = check_estimator(estimator, check_type=skb.BaseEstimator, name=name)
    elif not isinstance(estimator, skb.BaseEstimator):
        raise TypeError(
            f"Expected `{name}` of type {skb.BaseEstimator}, got {type(estimator)}"
        )
    check_sample_method(estimator)
    return estimator


def _fit_estimator(estimator: skb.BaseEstimator, X: np.ndarray) -> skb.BaseEstimator:
    """Fit an estimator and return it."""
    estimator.fit(X)
    return estimator
