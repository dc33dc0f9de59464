"""Custom typing module."""

# Copyright (c) 2025
# Authors: The skreorder developers
# SPDX-License-Identifier: BSD-3-Clause

import numpy as np
import numpy.typing as npt
import pandas as pd

__all__ = [
    "RandomState",
    "SampleSet",
]

SampleSet = npt.ArrayLike | pd.DataFrame | dict[str, npt.ArrayLike]
RandomState = int | np.random.RandomState | None
