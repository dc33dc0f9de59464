"""
The :mod:`skreorder.exceptions` module includes all custom warnings and error
classes used across skreorder.
"""

# Copyright (c) 2025
# Authors: The skreorder developers
# SPDX-License-Identifier: BSD-3-Clause

__all__ = [
    "InvalidInputError",
    "ShapeMismatchError",
]


class ShapeMismatchError(ValueError):
    """Sample sets do not have the same number of samples or variables."""


class InvalidInputError(ValueError):
    """Sample set is empty, non-numeric or contains non-finite values."""
