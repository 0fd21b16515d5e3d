"""Sleeper Analyzer: typed access to Sleeper fantasy league data."""

from sleeper_analyzer.errors import (
    AnalyzerError,
    InvalidArgumentError,
    NotFoundError,
    ProviderUnavailableError,
)
from sleeper_analyzer.services.aggregator import SleeperAggregator
from sleeper_analyzer.services.api import SleeperAPIClient, TrendingType

__version__ = "0.1.0"

__all__ = [
    "AnalyzerError",
    "InvalidArgumentError",
    "NotFoundError",
    "ProviderUnavailableError",
    "SleeperAggregator",
    "SleeperAPIClient",
    "TrendingType",
]
