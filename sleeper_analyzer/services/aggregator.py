"""Public entry point for Sleeper league, roster, matchup and player data."""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from sleeper_analyzer.errors import ProviderUnavailableError
from sleeper_analyzer.models.league import League
from sleeper_analyzer.models.matchup import Matchup
from sleeper_analyzer.models.player import Player
from sleeper_analyzer.models.roster import Roster
from sleeper_analyzer.models.user import User
from sleeper_analyzer.services.api import (
    DEFAULT_LOOKBACK_HOURS,
    DEFAULT_TRENDING_LIMIT,
    SleeperAPIClient,
    TrendingType,
)

logger = logging.getLogger(__name__)


class SleeperAggregator:
    """Pass-through over SleeperAPIClient that logs provider failures.

    Every ProviderUnavailableError is logged with the operation and its
    identifying parameters, then re-raised unchanged. Nothing is retried,
    cached or replaced with a fallback value.
    """

    def __init__(self, client: Optional[SleeperAPIClient] = None):
        self.client = client or SleeperAPIClient()

    def __enter__(self) -> "SleeperAggregator":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying client."""
        self.client.close()

    @contextmanager
    def _reporting(self, operation: str, **params: Any) -> Iterator[None]:
        try:
            yield
        except ProviderUnavailableError as e:
            described = ", ".join(f"{key}={value!r}" for key, value in params.items())
            logger.error("Sleeper %s(%s) failed: %s", operation, described, e.reason)
            raise

    def get_user(self, username_or_id: str) -> User:
        with self._reporting("get_user", username_or_id=username_or_id):
            return self.client.get_user(username_or_id)

    def get_user_leagues(self, user_id: str, sport: str, season: str) -> List[League]:
        with self._reporting("get_user_leagues", user_id=user_id, sport=sport, season=season):
            return self.client.get_user_leagues(user_id, sport, season)

    def get_league(self, league_id: str) -> League:
        with self._reporting("get_league", league_id=league_id):
            return self.client.get_league(league_id)

    def get_league_rosters(self, league_id: str) -> List[Roster]:
        with self._reporting("get_league_rosters", league_id=league_id):
            return self.client.get_league_rosters(league_id)

    def get_league_users(self, league_id: str) -> List[User]:
        with self._reporting("get_league_users", league_id=league_id):
            return self.client.get_league_users(league_id)

    def get_league_matchups(self, league_id: str, week: int) -> List[Matchup]:
        with self._reporting("get_league_matchups", league_id=league_id, week=week):
            return self.client.get_league_matchups(league_id, week)

    def get_all_players(self, sport: str) -> Dict[str, Player]:
        with self._reporting("get_all_players", sport=sport):
            return self.client.get_all_players(sport)

    def iter_all_players(self, sport: str) -> Iterator[Tuple[str, Player]]:
        """Stream the player directory; failures are reported while iterating."""
        players = self.client.iter_all_players(sport)
        return self._report_stream(players, sport)

    def _report_stream(self, players: Iterator[Tuple[str, Player]], sport: str) -> Iterator[Tuple[str, Player]]:
        with self._reporting("iter_all_players", sport=sport):
            yield from players

    def get_trending_players(
        self,
        sport: str,
        trending_type: Union[str, TrendingType],
        lookback_hours: int = DEFAULT_LOOKBACK_HOURS,
        limit: int = DEFAULT_TRENDING_LIMIT,
    ) -> List[Dict[str, Any]]:
        with self._reporting(
            "get_trending_players",
            sport=sport,
            trending_type=str(getattr(trending_type, "value", trending_type)),
            lookback_hours=lookback_hours,
            limit=limit,
        ):
            return self.client.get_trending_players(sport, trending_type, lookback_hours, limit)
