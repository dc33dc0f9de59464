"""Dependence module."""

from skreorder.dependence._measures import (
    CorrelationMethod,
    compute_pseudo_observations,
    empirical_tail_concentration,
    rank_correlation,
)

__all__ = [
    "CorrelationMethod",
    "compute_pseudo_observations",
    "empirical_tail_concentration",
    "rank_correlation",
]
