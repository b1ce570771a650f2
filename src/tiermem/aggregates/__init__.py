"""Aggregates enforcing the invariants of episodes and company profiles."""

from tiermem.aggregates.base import AggregateRoot
from tiermem.aggregates.company_profile import CompanyProfileAggregate
from tiermem.aggregates.episode import EpisodeAggregate

__all__ = [
    "AggregateRoot",
    "CompanyProfileAggregate",
    "EpisodeAggregate",
]
