"""Tools module."""

# Copyright (c) 2025
# Authors: The skreorder developers
# SPDX-License-Identifier: BSD-3-Clause
# Implementation derived from:
# scikit-learn, Copyright (c) 2007-2010 David Cournapeau, Fabian Pedregosa, Olivier
# Grisel Licensed under BSD 3 clause.

import inspect
from enum import Enum
from typing import Any

import numpy as np
import pandas as pd
import sklearn as sk
import sklearn.base as skb

__all__ = [
    "AutoEnum",
    "check_estimator",
    "check_sample_method",
    "default_variable_names",
    "get_feature_names",
]


class AutoEnum(str, Enum):
    """Base Enum class used in `skreorder`."""

    @staticmethod
    def _generate_next_value_(
        name: str, start: int, count: int, last_values: Any
    ) -> str:
        """Overriding `auto()`."""
        return name.lower()

    @classmethod
    def has(cls, value: str) -> bool:
        """Check if a value is in the Enum.

        Parameters
        ----------
        value : str
            Input value.

        Returns
        -------
        x : bool
            True if the value is in the Enum, False otherwise.
        """
        return value in cls._value2member_map_

    def __repr__(self) -> str:
        """Representation of the Enum."""
        return self.name


def check_estimator(
    estimator: skb.BaseEstimator | None,
    check_type: Any,
    name: str,
) -> skb.BaseEstimator:
    """Check the estimator type and return a cloned version of it.

    Parameters
    ----------
    estimator : BaseEstimator
        Estimator.

    check_type : Any
        Expected type of the estimator to check against.

    name : str
        Name of the estimator parameter, used for error messages.

    Returns
    -------
    estimator : BaseEstimator
        The cloned estimator.
    """
    if estimator is None:
        raise ValueError(f"`{name}` must be provided, got None")
    if not isinstance(estimator, check_type):
        raise TypeError(
            f"Expected `{name}` of type {check_type}, got {type(estimator)}"
        )
    return sk.clone(estimator)


def check_sample_method(estimator: skb.BaseEstimator) -> None:
    """Check that the estimator implements a valid `sample` method.

    The method must be callable and accept an `n_samples` parameter.

    Parameters
    ----------
    estimator : BaseEstimator
        The estimator whose `sample` method is to be validated.

    Raises
    ------
    ValueError
        If the `sample` method is missing or does not have an `n_samples` parameter.
    """
    sample_method = getattr(estimator, "sample", None)
    if sample_method is None or not callable(sample_method):
        raise ValueError(f"The estimator {estimator} must implement a `sample` method")

    sig = inspect.signature(sample_method)
    if "n_samples" not in sig.parameters:
        raise ValueError(
            f"The `sample` method of the estimator {estimator} must have `n_samples` "
            "as parameter"
        )


def default_variable_names(n_variables: int) -> np.ndarray:
    """Default variable names are `["x0", "x1", ..., "x(n_variables - 1)"]`.

    Parameters
    ----------
    n_variables : int
        Number of variables.

    Returns
    -------
    variable_names : ndarray of str
        Default variable names.
    """
    return np.asarray([f"x{i}" for i in range(n_variables)], dtype=object)


def get_feature_names(X) -> np.ndarray | None:
    """Get feature names from X.

    Parameters
    ----------
    X : {ndarray, DataFrame, dict}
        Sample set container to extract variable names from.

        - pandas DataFrame : the columns are the variable names.
        - dict : the keys are the variable names.
        - All other containers return `None`.

    Returns
    -------
    names: ndarray or None
        Variable names of `X`. Only names that are all strings are returned.
    """
    feature_names = None
    if isinstance(X, pd.DataFrame):
        feature_names = np.asarray(X.columns, dtype=object)
    elif isinstance(X, dict):
        feature_names = np.asarray(list(X.keys()), dtype=object)

    if feature_names is None or len(feature_names) == 0:
        return None

    types = sorted(t.__qualname__ for t in set(type(v) for v in feature_names))

    # mixed type of string and non-string is not supported
    if len(types) > 1 and "str" in types:
        raise TypeError(
            "Variable names are only supported if all variables have string names, "
            f"but your input has {types} as variable name types. You must convert "
            "them all to strings, by using X.columns = X.columns.astype(str) for "
            "example."
        )

    if len(types) == 1 and types[0] == "str":
        return feature_names
    return None
