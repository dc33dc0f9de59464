"""Validation utilities for sample sets."""

# Copyright (c) 2025
# Authors: The skreorder developers
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import numpy as np
import pandas as pd

from skreorder.exceptions import InvalidInputError, ShapeMismatchError
from skreorder.typing import SampleSet
from skreorder.utils.tools import get_feature_names

__all__ = [
    "align_variables",
    "check_sample_count",
    "validate_sample_set",
    "validate_sample_sets",
    "wrap_sample_set",
]

# Largest magnitude below which every integer is exactly representable in float64.
_MAX_EXACT_FLOAT_INT = 2**53


def validate_sample_set(
    X: SampleSet, name: str = "X"
) -> tuple[np.ndarray, np.ndarray | None]:
    """Validate and convert a sample set into a 2D numeric array.

    Integer, boolean and floating samples keep their dtype, so that a reordering
    returns exactly the input values. Columns of different dtypes are promoted to
    a common dtype, which must represent every sample exactly.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_variables) or (n_samples,), DataFrame or dict
        The sample set.

        - If array-like: each column holds the samples of one variable. A 1D input
          is a single variable.
        - If DataFrame: the columns are the variables and their names are kept.
        - If dict: maps each variable name to its 1D sequence of samples.

    name : str, default="X"
        Name of the sample set used in error messages.

    Returns
    -------
    values : ndarray of shape (n_samples, n_variables)
        C-contiguous array of samples.

    variable_names : ndarray of shape (n_variables,) or None
        Variable names when `X` is a DataFrame or a dict with string keys.

    Raises
    ------
    ShapeMismatchError
        If the variables do not all have the same number of samples.

    InvalidInputError
        If `X` has no variable, no sample, more than two dimensions, mixed string
        and non-string variable names, non-numeric values (strings included) or
        non-finite values. Also raised when integer samples are mixed with floating
        samples and cannot be represented exactly as float64.
    """
    try:
        variable_names = get_feature_names(X)
    except TypeError as e:
        raise InvalidInputError(f"`{name}` has invalid variable names: {e}") from e

    if isinstance(X, dict):
        values = _dict_to_array(X, name=name)
    elif isinstance(X, pd.DataFrame):
        if X.shape[1] == 0:
            values = np.empty(X.shape)
        else:
            values = _stack_columns(
                [
                    _to_numeric(X.iloc[:, i].to_numpy(), name=f"{name}[{col!r}]")
                    for i, col in enumerate(X.columns)
                ],
                keys=list(X.columns),
                name=name,
            )
    else:
        try:
            X = np.asarray(X)
        except ValueError as e:
            raise ShapeMismatchError(
                f"`{name}` has an inhomogeneous shape: all variables must have "
                "the same number of samples"
            ) from e
        values = _to_numeric(X, name=name)

    if values.ndim == 1:
        values = values.reshape(-1, 1)
    if values.ndim != 2:
        raise InvalidInputError(
            f"`{name}` must be a 1D or 2D array, got a {values.ndim}D array"
        )

    n_samples, n_variables = values.shape
    if n_variables < 1:
        raise InvalidInputError(f"`{name}` must contain at least one variable")
    if n_samples < 1:
        raise InvalidInputError(f"`{name}` must contain at least one sample")

    if values.dtype.kind == "f":
        finite = np.isfinite(values)
        if not np.all(finite):
            bad = np.flatnonzero(~np.all(finite, axis=0))
            raise InvalidInputError(
                f"`{name}` contains {np.count_nonzero(~finite)} non-finite values "
                f"(NaN or inf) in variables {bad.tolist()}"
            )

    return np.ascontiguousarray(values), variable_names


def validate_sample_sets(
    marginals: SampleSet, copula_samples: SampleSet
) -> tuple[np.ndarray, np.ndarray, np.ndarray | None]:
    """Validate a pair of marginal and copula sample sets.

    Both sample sets are fully validated before returning so that a failure never
    leaves a partial result. When both inputs carry variable names, the copula
    columns are re-ordered to match the marginal columns.

    Parameters
    ----------
    marginals : array-like of shape (n_samples, n_variables), DataFrame or dict
        Independently drawn marginal samples.

    copula_samples : array-like of shape (n_samples, n_variables), DataFrame or dict
        Copula samples carrying the target rank structure.

    Returns
    -------
    marginals : ndarray of shape (n_samples, n_variables)
        Validated marginal samples.

    copula_samples : ndarray of shape (n_samples, n_variables)
        Validated copula samples, aligned on the marginal variables.

    variable_names : ndarray of shape (n_variables,) or None
        Variable names of the marginals, or of the copula samples when the
        marginals have none.

    Raises
    ------
    ShapeMismatchError
        If the number of samples or variables differ.

    InvalidInputError
        If either sample set is invalid or their variable names differ.
    """
    marginals, marginal_names = validate_sample_set(marginals, name="marginals")
    copula_samples, copula_names = validate_sample_set(
        copula_samples, name="copula_samples"
    )

    if marginals.shape[1] != copula_samples.shape[1]:
        raise ShapeMismatchError(
            f"`marginals` has {marginals.shape[1]} variables but `copula_samples` "
            f"has {copula_samples.shape[1]}"
        )
    check_sample_count(
        marginals,
        n_samples=copula_samples.shape[0],
        name="marginals",
        reference="copula_samples",
    )

    if marginal_names is not None and copula_names is not None:
        copula_samples = align_variables(
            copula_samples, names=copula_names, target_names=marginal_names
        )
    variable_names = marginal_names if marginal_names is not None else copula_names
    return marginals, copula_samples, variable_names


def check_sample_count(
    X: np.ndarray, n_samples: int, name: str, reference: str
) -> None:
    """Raise a `ShapeMismatchError` if `X` does not contain `n_samples` samples."""
    if X.shape[0] != n_samples:
        raise ShapeMismatchError(
            f"`{name}` has {X.shape[0]} samples per variable but `{reference}` has "
            f"{n_samples}"
        )


def wrap_sample_set(
    X: np.ndarray, variable_names: np.ndarray | None
) -> np.ndarray | pd.DataFrame:
    """Return `X` as a DataFrame when variable names are known, otherwise as is."""
    if variable_names is None:
        return X
    return pd.DataFrame(X, columns=list(variable_names))



def _dict_to_array(X: dict, name: str) -> np.ndarray:
    """Stack a dict of 1D sample sequences into a 2D array."""
    if len(X) == 0:
        raise InvalidInputError(f"`{name}` must contain at least one variable")
    columns = []
    for key, samples in X.items():
        samples = _to_numeric(np.asarray(samples), name=f"{name}[{key!r}]")
        if samples.ndim != 1:
            raise InvalidInputError(
                f"`{name}[{key!r}]` must be a 1D sequence of samples, got a "
                f"{samples.ndim}D array"
            )
        columns.append(samples)

    lengths = {key: len(samples) for key, samples in zip(X, columns, strict=True)}
    if len(set(lengths.values())) > 1:
        raise ShapeMismatchError(
            f"All variables of `{name}` must have the same number of samples, got "
            f"{lengths}"
        )
    return _stack_columns(columns, keys=list(X), name=name)


def _stack_columns(columns: list[np.ndarray], keys: list, name: str) -> np.ndarray:
    """Stack numeric columns, refusing a promotion to float that loses integers."""
    if np.result_type(*columns).kind == "f":
        for key, column in zip(keys, columns, strict=True):
            if column.dtype.kind in "iu" and np.any(
                (column > _MAX_EXACT_FLOAT_INT) | (column < -_MAX_EXACT_FLOAT_INT)
            ):
                raise InvalidInputError(
                    f"`{name}[{key!r}]` contains integers larger than 2**53 in "
                    "magnitude that cannot be stacked exactly with floating "
                    "variables"
                )
    return np.column_stack(columns)


def _to_numeric(X: np.ndarray, name: str) -> np.ndarray:
    """Return `X` as a real numeric array, rejecting strings and other values."""
    match X.dtype.kind:
        case "b" | "i" | "u" | "f":
            return X
        case "c":
            raise InvalidInputError(f"`{name}` must contain real values, got complex")
        case "O" if not any(isinstance(v, str | bytes) for v in X.flat):
            try:
                return X.astype(np.float64)
            except (ValueError, TypeError) as e:
                raise InvalidInputError(f"`{name}` must contain numeric values") from e
        case _:
            raise InvalidInputError(
                f"`{name}` must contain numeric values, got dtype {X.dtype}"
            )


def align_variables(
    X: np.ndarray, names: np.ndarray, target_names: np.ndarray
) -> np.ndarray:
    """Re-order the columns of `X` from `names` to `target_names`."""
    names = list(names)
    target_names = list(target_names)
    if len(set(names)) != len(names) or len(set(target_names)) != len(target_names):
        raise InvalidInputError("Variable names must be unique")
    if set(names) != set(target_names):
        raise InvalidInputError(
            "`marginals` and `copula_samples` must have the same variable names, got "
            f"{target_names} and {names}"
        )
    if names == target_names:
        return X
    return X[:, [names.index(n) for n in target_names]]
