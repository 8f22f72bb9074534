"""Runner: aggregation of sources, output routing, and the CLI."""

from secrets_bootstrap.runner.aggregator import SecretAggregator, merge_secret_sets
from secrets_bootstrap.runner.result import AggregationResult, RunStatus

__all__ = [
    "AggregationResult",
    "RunStatus",
    "SecretAggregator",
    "merge_secret_sets",
]
