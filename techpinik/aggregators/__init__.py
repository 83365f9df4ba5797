"""Statistics aggregation."""

from techpinik.aggregators.stats_aggregator import (
    StatsAggregator,
    StatsAggregatorDep,
    get_stats_aggregator,
)
from techpinik.aggregators.stats_repository import SqlStatsRepository, StatsRepository

__all__ = [
    "SqlStatsRepository",
    "StatsAggregator",
    "StatsAggregatorDep",
    "StatsRepository",
    "get_stats_aggregator",
]
