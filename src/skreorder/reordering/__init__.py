"""Reordering module."""

from skreorder.reordering._dependent_sampler import DependentSampler
from skreorder.reordering._rank_reorderer import RankReorderer, reorder
from skreorder.reordering._utils import (
    TieBreak,
    gather_by_rank,
    rank_samples,
    sort_marginals,
)

__all__ = [
    "DependentSampler",
    "RankReorderer",
    "TieBreak",
    "gather_by_rank",
    "rank_samples",
    "reorder",
    "sort_marginals",
]
