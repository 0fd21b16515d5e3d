"""HTTP API client for Sleeper API."""

import logging
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, TypeVar, Union
from urllib.parse import quote

import httpx
import ijson

from sleeper_analyzer.config import Settings
from sleeper_analyzer.errors import InvalidArgumentError, NotFoundError, ProviderUnavailableError
from sleeper_analyzer.models.league import League
from sleeper_analyzer.models.matchup import Matchup
from sleeper_analyzer.models.player import Player
from sleeper_analyzer.models.roster import Roster
from sleeper_analyzer.models.user import User

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_LOOKBACK_HOURS = 24
DEFAULT_TRENDING_LIMIT = 25

# Record construction failures: missing keys, wrong types, pydantic ValidationError
DECODE_ERRORS = (KeyError, TypeError, ValueError)


class TrendingType(str, Enum):
    """Kind of trending activity."""

    ADD = "add"
    DROP = "drop"


def _require_identifier(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(name, "must be a non-empty string")
    return value


def _require_int(name: str, value: Any, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(name, f"must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidArgumentError(name, f"must be >= {minimum}, got {value}")
    return value


def _require_trending_type(value: Union[str, TrendingType]) -> TrendingType:
    try:
        return TrendingType(value)
    except ValueError:
        raise InvalidArgumentError("type", f"must be 'add' or 'drop', got {value!r}") from None


def _path(*segments: Any) -> str:
    """Join URL-escaped path segments."""
    return "/" + "/".join(quote(str(segment), safe="") for segment in segments)


_JSON_KINDS = {b"[": "array", b'"': "string", b"t": "boolean", b"f": "boolean"}
_JSON_KINDS.update((bytes([c]), "number") for c in b"-0123456789")


def _first_token(chunk: bytes) -> Optional[bytes]:
    """First non-whitespace byte of a JSON chunk, or None if it is all whitespace."""
    stripped = chunk.lstrip(b" \t\r\n")
    return stripped[:1] or None


class SleeperAPIClient:
    """HTTP client for the read-only Sleeper API.

    Holds no state besides its settings and connection pool, so a single
    instance can be shared between threads. Requests are never retried.
    """

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.BaseTransport] = None):
        self.settings = settings or Settings()
        self.client = httpx.Client(
            base_url=self.settings.base_url.rstrip("/"),
            timeout=httpx.Timeout(self.settings.timeout),
            limits=httpx.Limits(
                max_connections=self.settings.max_connections,
                max_keepalive_connections=self.settings.max_keepalive_connections,
            ),
            transport=transport,
        )

    def __enter__(self) -> "SleeperAPIClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying connection pool."""
        self.client.close()

    def _get_json(self, operation: str, path: str, params: Optional[dict] = None) -> Any:
        """GET ``path`` and decode the JSON body.

        Returns None for an empty or ``null`` body.
        """
        logger.debug("GET %s params=%s", path, params)
        try:
            response = self.client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("Sleeper %s returned HTTP %s", path, e.response.status_code)
            raise ProviderUnavailableError(operation, f"HTTP {e.response.status_code}", cause=e) from e
        except (httpx.HTTPError, httpx.StreamError) as e:
            logger.warning("Request to %s failed: %s", path, e)
            raise ProviderUnavailableError(operation, f"{type(e).__name__}: {e}", cause=e) from e

        if not response.content.strip():
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ProviderUnavailableError(operation, f"Invalid JSON response: {e}", cause=e) from e

    def _decode_one(
        self,
        operation: str,
        data: Any,
        build: Callable[[dict], T],
        not_found: Tuple[str, str, Any],
    ) -> T:
        if data is None:
            raise NotFoundError(*not_found)
        if not isinstance(data, dict):
            raise ProviderUnavailableError(operation, f"Expected an object, got {type(data).__name__}")
        try:
            return build(data)
        except DECODE_ERRORS as e:
            raise ProviderUnavailableError(operation, f"Invalid record: {e}", cause=e) from e

    def _decode_many(
        self,
        operation: str,
        data: Any,
        build: Callable[[dict], T],
        not_found: Tuple[str, str, Any],
    ) -> List[T]:
        if data is None:
            raise NotFoundError(*not_found)
        if not isinstance(data, list):
            raise ProviderUnavailableError(operation, f"Expected an array, got {type(data).__name__}")

        items = []
        for index, item in enumerate(data):
            if not isinstance(item, dict):
                raise ProviderUnavailableError(
                    operation, f"Expected an object at index {index}, got {type(item).__name__}"
                )
            try:
                items.append(build(item))
            except DECODE_ERRORS as e:
                raise ProviderUnavailableError(operation, f"Invalid record at index {index}: {e}", cause=e) from e
        return items

    def get_user(self, username_or_id: str) -> User:
        """Get a user by username or user_id."""
        _require_identifier("username_or_id", username_or_id)
        data = self._get_json("get_user", _path("user", username_or_id))
        return self._decode_one("get_user", data, User.from_api_response, ("User", "username_or_id", username_or_id))

    def get_user_leagues(self, user_id: str, sport: str, season: str) -> List[League]:
        """Get all leagues a user belongs to for a sport and season."""
        _require_identifier("user_id", user_id)
        _require_identifier("sport", sport)
        _require_identifier("season", season)
        data = self._get_json("get_user_leagues", _path("user", user_id, "leagues", sport, season))
        return self._decode_many(
            "get_user_leagues", data, League.from_api_response, ("Leagues", "user_id", user_id)
        )

    def get_league(self, league_id: str) -> League:
        """Get a single league."""
        _require_identifier("league_id", league_id)
        data = self._get_json("get_league", _path("league", league_id))
        return self._decode_one("get_league", data, League.from_api_response, ("League", "league_id", league_id))

    def get_league_rosters(self, league_id: str) -> List[Roster]:
        """Get all rosters in a league."""
        _require_identifier("league_id", league_id)
        data = self._get_json("get_league_rosters", _path("league", league_id, "rosters"))
        return self._decode_many(
            "get_league_rosters",
            data,
            lambda item: Roster.from_api_response(item, league_id=league_id),
            ("Rosters", "league_id", league_id),
        )

    def get_league_users(self, league_id: str) -> List[User]:
        """Get all users in a league."""
        _require_identifier("league_id", league_id)
        data = self._get_json("get_league_users", _path("league", league_id, "users"))
        return self._decode_many(
            "get_league_users", data, User.from_api_response, ("Users", "league_id", league_id)
        )

    def get_league_matchups(self, league_id: str, week: int) -> List[Matchup]:
        """Get every roster's matchup entry for a week."""
        _require_identifier("league_id", league_id)
        _require_int("week", week, 0)
        data = self._get_json("get_league_matchups", _path("league", league_id, "matchups", week))
        return self._decode_many(
            "get_league_matchups", data, Matchup.from_api_response, ("Matchups", "league_id", league_id)
        )

    def iter_all_players(self, sport: str) -> Iterator[Tuple[str, Player]]:
        """Stream the player directory for a sport.

        The body is parsed incrementally, so the full payload (tens of
        thousands of entries) is never held in memory. Arguments are
        validated when the iterator is created; network errors surface
        while iterating.
        """
        _require_identifier("sport", sport)
        return self._stream_players(sport)

    def _stream_players(self, sport: str) -> Iterator[Tuple[str, Player]]:
        operation = "get_all_players"
        path = _path("players", sport)
        logger.debug("GET %s (streaming)", path)

        events = ijson.sendable_list()
        parser = ijson.kvitems_coro(events, "", use_float=True)
        # First non-whitespace byte of the body; kvitems only reports a top-level object
        first = None
        try:
            with self.client.stream("GET", path) as response:
                response.raise_for_status()
                for chunk in response.iter_bytes():
                    if first is None:
                        first = _first_token(chunk)
                        if first is not None and first not in (b"{", b"n"):
                            raise ProviderUnavailableError(
                                operation, f"Expected an object, got {_JSON_KINDS.get(first, 'invalid JSON')}"
                            )
                    parser.send(chunk)
                    yield from self._players_from_events(operation, events)
                    del events[:]
            if first is None:
                raise NotFoundError("Players", "sport", sport)
            parser.close()
            if first == b"n":
                raise NotFoundError("Players", "sport", sport)
            yield from self._players_from_events(operation, events)
        except httpx.HTTPStatusError as e:
            logger.warning("Sleeper %s returned HTTP %s", path, e.response.status_code)
            raise ProviderUnavailableError(operation, f"HTTP {e.response.status_code}", cause=e) from e
        except (httpx.HTTPError, httpx.StreamError) as e:
            logger.warning("Request to %s failed: %s", path, e)
            raise ProviderUnavailableError(operation, f"{type(e).__name__}: {e}", cause=e) from e
        except ijson.JSONError as e:
            raise ProviderUnavailableError(operation, f"Invalid JSON response: {e}", cause=e) from e

    def _players_from_events(self, operation: str, events: list) -> Iterator[Tuple[str, Player]]:
        for player_id, player_data in events:
            if not isinstance(player_data, dict):
                raise ProviderUnavailableError(
                    operation, f"Expected an object for player '{player_id}', got {type(player_data).__name__}"
                )
            try:
                yield player_id, Player.from_api_response(player_id, player_data)
            except DECODE_ERRORS as e:
                raise ProviderUnavailableError(operation, f"Invalid player '{player_id}': {e}", cause=e) from e

    def get_all_players(self, sport: str) -> Dict[str, Player]:
        """Get the full player directory for a sport, keyed by player_id."""
        return dict(self.iter_all_players(sport))

    def get_trending_players(
        self,
        sport: str,
        trending_type: Union[str, TrendingType],
        lookback_hours: int = DEFAULT_LOOKBACK_HOURS,
        limit: int = DEFAULT_TRENDING_LIMIT,
    ) -> List[Dict[str, Any]]:
        """Get players trending on waivers.

        Entries are returned as plain dicts (typically ``player_id`` and
        ``count``); Sleeper does not fix their schema.
        """
        _require_identifier("sport", sport)
        kind = _require_trending_type(trending_type)
        _require_int("lookback_hours", lookback_hours, 0)
        _require_int("limit", limit, 1)

        data = self._get_json(
            "get_trending_players",
            _path("players", sport, "trending", kind.value),
            params={"lookback_hours": lookback_hours, "limit": limit},
        )
        return self._decode_many(
            "get_trending_players", data, dict, ("Trending players", "sport", sport)
        )
