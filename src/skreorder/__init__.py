"""skreorder package."""

# Authors: The skreorder developers
# SPDX-License-Identifier: BSD-3-Clause
import importlib.metadata

from skreorder.exceptions import InvalidInputError, ShapeMismatchError
from skreorder.reordering import DependentSampler, RankReorderer, TieBreak, reorder

__version__ = importlib.metadata.version("skreorder")

__all__ = [
    "DependentSampler",
    "InvalidInputError",
    "RankReorderer",
    "ShapeMismatchError",
    "TieBreak",
    "reorder",
]
