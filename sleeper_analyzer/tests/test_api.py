"""Tests for the Sleeper API client."""

import json
import tracemalloc

import httpx
import pytest

from sleeper_analyzer.config import Settings
from sleeper_analyzer.errors import InvalidArgumentError, NotFoundError, ProviderUnavailableError
from sleeper_analyzer.models.user import User
from sleeper_analyzer.services.api import SleeperAPIClient, TrendingType


def make_client(handler) -> SleeperAPIClient:
    """Build a client whose requests are answered by ``handler``."""
    return SleeperAPIClient(Settings(timeout=5.0), transport=httpx.MockTransport(handler))


def json_responder(payload, requests=None):
    """Handler returning ``payload`` and recording each request."""
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return httpx.Response(200, json=payload)
    return handler


@pytest.fixture
def sample_league():
    """Sample league API response."""
    return {
        "league_id": "999",
        "name": "Test League",
        "avatar": "abc",
        "season": "2024",
        "season_type": "regular",
        "sport": "nfl",
        "status": "in_season",
        "total_rosters": 2,
        "settings": {"playoff_teams": 6},
        "scoring_settings": {"rec": 0.5},
        "roster_positions": ["QB", "RB", "BN"],
    }


@pytest.fixture
def sample_matchups():
    """Sample matchups API response."""
    return [
        {
            "roster_id": 1,
            "matchup_id": 1,
            "points": 125.6,
            "custom_points": None,
            "starters": ["4034", "421"],
            "starters_points": [24.5, 18.2],
            "players": ["4034", "421", "5849"],
            "players_points": {"4034": 24.5, "421": 18.2, "5849": 4.0},
        },
        {
            "roster_id": 2,
            "matchup_id": 1,
            "points": 118.4,
            "custom_points": 120.0,
            "starters": ["6794", "0"],
            "starters_points": [16.8, 0.0],
            "players": ["6794"],
            "players_points": {"6794": 16.8},
        },
    ]


class TestRequests:
    """Test request URLs built by each operation."""

    def test_get_user_scenario(self):
        """Test fetching a user decodes every field."""
        requests = []
        payload = {"user_id": "12345678", "username": "alice", "display_name": "Alice", "avatar": None, "is_bot": False}

        with make_client(json_responder(payload, requests)) as client:
            user = client.get_user("12345678")

        assert user == User(user_id="12345678", username="alice", display_name="Alice", avatar=None, is_bot=False)
        assert requests[0].method == "GET"
        assert requests[0].url == "https://api.sleeper.app/v1/user/12345678"

    def test_path_segments_are_escaped(self):
        """Test identifiers cannot inject extra path segments."""
        requests = []
        payload = {"user_id": "1", "username": "a/b c"}

        with make_client(json_responder(payload, requests)) as client:
            client.get_user("a/b c")

        assert requests[0].url.raw_path == b"/v1/user/a%2Fb%20c"

    def test_get_user_leagues(self, sample_league):
        """Test fetching a user's leagues."""
        requests = []

        with make_client(json_responder([sample_league], requests)) as client:
            leagues = client.get_user_leagues("12345678", "nfl", "2024")

        assert [league.league_id for league in leagues] == ["999"]
        assert requests[0].url.path == "/v1/user/12345678/leagues/nfl/2024"

    def test_get_league(self, sample_league):
        """Test fetching one league."""
        requests = []

        with make_client(json_responder(sample_league, requests)) as client:
            league = client.get_league("999")

        assert league.name == "Test League"
        assert league.scoring_settings == {"rec": 0.5}
        assert requests[0].url.path == "/v1/league/999"

    def test_get_league_rosters(self):
        """Test rosters keep provider order and fall back to the requested league."""
        requests = []
        payload = [
            {"roster_id": 2, "owner_id": "u2", "players": ["1", "2"], "starters": ["1"], "reserve": None},
            {"roster_id": 1, "owner_id": None, "players": None, "starters": None},
        ]

        with make_client(json_responder(payload, requests)) as client:
            rosters = client.get_league_rosters("999")

        assert [roster.roster_id for roster in rosters] == [2, 1]
        assert rosters[0].players == ["1", "2"]
        assert rosters[1].owner_id is None
        assert all(roster.league_id == "999" for roster in rosters)
        assert requests[0].url.path == "/v1/league/999/rosters"

    def test_get_league_users(self):
        """Test fetching league users."""
        requests = []
        payload = [
            {"user_id": "u1", "display_name": "One", "is_bot": False, "metadata": {"team_name": "Team One"}},
            {"user_id": "u2", "display_name": "Two"},
        ]

        with make_client(json_responder(payload, requests)) as client:
            users = client.get_league_users("999")

        assert [user.user_id for user in users] == ["u1", "u2"]
        assert users[0].team_name == "Team One"
        assert requests[0].url.path == "/v1/league/999/users"

    def test_get_league_matchups(self, sample_matchups):
        """Test fetching matchups for a week."""
        requests = []

        with make_client(json_responder(sample_matchups, requests)) as client:
            matchups = client.get_league_matchups("999", 1)

        assert [matchup.roster_id for matchup in matchups] == [1, 2]
        assert matchups[1].custom_points == 120.0
        assert requests[0].url.path == "/v1/league/999/matchups/1"
        for matchup in matchups:
            assert len(matchup.starters) == len(matchup.starters_points)

    def test_get_league_matchups_empty(self):
        """Test an empty week is an empty list, not an error."""
        with make_client(json_responder([])) as client:
            assert client.get_league_matchups("999", 1) == []

    def test_get_trending_players(self):
        """Test trending entries stay plain dicts."""
        requests = []
        payload = [{"player_id": "4034", "count": 512}, {"player_id": "421", "count": 300, "extra": None}]

        with make_client(json_responder(payload, requests)) as client:
            trending = client.get_trending_players("nfl", "add", lookback_hours=48, limit=10)

        assert trending == payload
        assert isinstance(trending[0], dict)
        assert requests[0].url.path == "/v1/players/nfl/trending/add"
        assert requests[0].url.params["lookback_hours"] == "48"
        assert requests[0].url.params["limit"] == "10"

    @pytest.mark.parametrize("sport", ["nfl", "nba", "lcs"])
    @pytest.mark.parametrize("trending_type", ["add", "drop", TrendingType.DROP])
    def test_trending_defaults(self, sport, trending_type):
        """Test omitted lookback/limit behave like 24/25."""
        default_requests, explicit_requests = [], []
        payload = [{"player_id": "1", "count": 2}]

        with make_client(json_responder(payload, default_requests)) as client:
            default_result = client.get_trending_players(sport, trending_type)
        with make_client(json_responder(payload, explicit_requests)) as client:
            explicit_result = client.get_trending_players(sport, trending_type, lookback_hours=24, limit=25)

        assert default_result == explicit_result
        assert default_requests[0].url == explicit_requests[0].url
        assert default_requests[0].url.params["lookback_hours"] == "24"
        assert default_requests[0].url.params["limit"] == "25"

    def test_repeated_calls_are_equal(self, sample_league):
        """Test identical calls against unchanged data give equal results."""
        with make_client(json_responder(sample_league)) as client:
            first = client.get_league("999")
            second = client.get_league("999")

        assert first == second
        assert first is not second


class TestArgumentValidation:
    """Test malformed arguments are rejected before any request."""

    def setup_method(self):
        """Set up a client that fails the test if it is ever called."""
        def handler(request):
            raise AssertionError(f"unexpected request to {request.url}")
        self.client = make_client(handler)

    def teardown_method(self):
        self.client.close()

    def test_negative_week(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            self.client.get_league_matchups("999", -1)
        assert exc_info.value.field == "week"
        assert exc_info.value.error_code == "VALIDATION_ERROR"

    def test_week_must_be_int(self):
        with pytest.raises(InvalidArgumentError):
            self.client.get_league_matchups("999", "1")
        with pytest.raises(InvalidArgumentError):
            self.client.get_league_matchups("999", True)

    @pytest.mark.parametrize("limit", [0, -5, 2.5])
    def test_non_positive_limit(self, limit):
        with pytest.raises(InvalidArgumentError, match="limit"):
            self.client.get_trending_players("nfl", "add", limit=limit)

    def test_negative_lookback(self):
        with pytest.raises(InvalidArgumentError, match="lookback_hours"):
            self.client.get_trending_players("nfl", "add", lookback_hours=-1)

    def test_unknown_trending_type(self):
        with pytest.raises(InvalidArgumentError, match="type"):
            self.client.get_trending_players("nfl", "hot")

    @pytest.mark.parametrize("league_id", ["", "   ", None])
    def test_blank_identifier(self, league_id):
        with pytest.raises(InvalidArgumentError, match="league_id"):
            self.client.get_league(league_id)

    def test_streaming_validates_eagerly(self):
        with pytest.raises(InvalidArgumentError, match="sport"):
            self.client.iter_all_players("")


class TestErrorBoundary:
    """Test every failure becomes ProviderUnavailableError or NotFoundError."""

    OPERATIONS = [
        ("get_user", ("alice",)),
        ("get_user_leagues", ("1", "nfl", "2024")),
        ("get_league", ("999",)),
        ("get_league_rosters", ("999",)),
        ("get_league_users", ("999",)),
        ("get_league_matchups", ("999", 1)),
        ("get_all_players", ("nfl",)),
        ("get_trending_players", ("nfl", "add")),
    ]

    @staticmethod
    def _timeout(request):
        raise httpx.ReadTimeout("timed out", request=request)

    @staticmethod
    def _refused(request):
        raise httpx.ConnectError("connection refused", request=request)

    @staticmethod
    def _server_error(request):
        return httpx.Response(500, text="oops")

    @staticmethod
    def _malformed(request):
        return httpx.Response(200, content=b'{"user_id": ')

    @pytest.mark.parametrize("operation,args", OPERATIONS)
    @pytest.mark.parametrize("failure", ["_timeout", "_refused", "_server_error", "_malformed"])
    def test_failures_are_translated(self, operation, args, failure):
        """Test transport and decoding failures never leak httpx errors."""
        with make_client(getattr(self, failure)) as client:
            with pytest.raises(ProviderUnavailableError) as exc_info:
                getattr(client, operation)(*args)

        error = exc_info.value
        assert error.error_code == "PROVIDER_UNAVAILABLE"
        assert error.operation == operation
        if failure != "_malformed":
            assert isinstance(error.cause, httpx.HTTPError)
            assert error.__cause__ is error.cause
        assert "oops" not in error.message

    def test_not_found_status_is_unavailable(self):
        """Test a 404 status is a transport failure."""
        with make_client(lambda request: httpx.Response(404)) as client:
            with pytest.raises(ProviderUnavailableError, match="get_league"):
                client.get_league("999")

    def test_null_body_is_not_found(self):
        """Test Sleeper's null body for an unknown user."""
        with make_client(lambda request: httpx.Response(200, content=b"null")) as client:
            with pytest.raises(NotFoundError) as exc_info:
                client.get_user("nobody")

        assert exc_info.value.error_code == "RESOURCE_NOT_FOUND"
        assert exc_info.value.message == "User not found with username_or_id: 'nobody'"

    def test_empty_body_is_not_found(self):
        """Test an empty body where a league was expected."""
        with make_client(lambda request: httpx.Response(200, content=b"")) as client:
            with pytest.raises(NotFoundError):
                client.get_league("999")

    def test_wrong_shape(self, sample_league):
        """Test an object where an array was expected."""
        with make_client(json_responder(sample_league)) as client:
            with pytest.raises(ProviderUnavailableError) as exc_info:
                client.get_league_rosters("999")

        assert "Expected an array" in exc_info.value.reason

    def test_invalid_record(self):
        """Test a record missing required fields."""
        with make_client(json_responder([{"matchup_id": 1}])) as client:
            with pytest.raises(ProviderUnavailableError) as exc_info:
                client.get_league_matchups("999", 1)

        assert isinstance(exc_info.value.cause, KeyError)

    def test_mismatched_starter_points(self, sample_matchups):
        """Test parallel lists of different lengths fail decoding."""
        sample_matchups[1]["starters_points"] = [16.8]

        with make_client(json_responder(sample_matchups)) as client:
            with pytest.raises(ProviderUnavailableError, match="get_league_matchups") as exc_info:
                client.get_league_matchups("999", 3)

        assert "index 1" in exc_info.value.reason


class TestPlayers:
    """Test the player directory."""

    def test_get_all_players(self):
        """Test keys and player IDs agree."""
        payload = {
            "4034": {"player_id": "4034", "first_name": "Christian", "last_name": "McCaffrey", "team": "SF"},
            "SF": {"player_id": "SF", "position": "DEF", "team": "SF"},
            "1234": {"first_name": "Keyed", "last_name": "Only", "team": None},
        }

        with make_client(json_responder(payload)) as client:
            players = client.get_all_players("nfl")

        assert list(players) == ["4034", "SF", "1234"]
        for player_id, player in players.items():
            assert player.player_id == player_id
        assert players["1234"].team is None

    def test_key_mismatch_is_decoding_error(self):
        """Test an entry under the wrong key fails the whole call."""
        payload = {"4034": {"player_id": "5000"}}

        with make_client(json_responder(payload)) as client:
            with pytest.raises(ProviderUnavailableError, match="get_all_players"):
                client.get_all_players("nfl")

    def test_non_object_entry(self):
        with make_client(json_responder({"4034": ["not", "an", "object"]})) as client:
            with pytest.raises(ProviderUnavailableError):
                client.get_all_players("nfl")

    @pytest.mark.parametrize("body", [b"null", b"", b"  \n null"])
    @pytest.mark.parametrize("collect", [
        lambda client: client.get_all_players("nfl"),
        lambda client: list(client.iter_all_players("nfl")),
    ], ids=["get_all_players", "iter_all_players"])
    def test_missing_directory_is_not_found(self, body, collect):
        """Test a null or empty directory body is reported as missing."""
        with make_client(lambda request: httpx.Response(200, content=body)) as client:
            with pytest.raises(NotFoundError) as exc_info:
                collect(client)

        assert exc_info.value.message == "Players not found with sport: 'nfl'"

    @pytest.mark.parametrize("body,kind", [
        (b"[]", "array"),
        (b'[{"player_id": "1"}]', "array"),
        (b'"oops"', "string"),
        (b"42", "number"),
        (b" -1.5", "number"),
        (b"true", "boolean"),
    ])
    @pytest.mark.parametrize("collect", [
        lambda client: client.get_all_players("nfl"),
        lambda client: list(client.iter_all_players("nfl")),
    ], ids=["get_all_players", "iter_all_players"])
    def test_non_object_directory(self, body, kind, collect):
        """Test a directory body that is not an object fails instead of decoding to nothing."""
        with make_client(lambda request: httpx.Response(200, content=body)) as client:
            with pytest.raises(ProviderUnavailableError) as exc_info:
                collect(client)

        assert exc_info.value.operation == "get_all_players"
        assert exc_info.value.reason == f"Expected an object, got {kind}"

    def test_empty_directory_object(self):
        with make_client(json_responder({})) as client:
            assert client.get_all_players("nfl") == {}

    def test_iter_all_players_request(self):
        """Test streaming hits the directory endpoint."""
        requests = []

        with make_client(json_responder({"1": {"player_id": "1"}}, requests)) as client:
            pairs = list(client.iter_all_players("nba"))

        assert [player_id for player_id, _ in pairs] == ["1"]
        assert requests[0].url.path == "/v1/players/nba"

    def test_streaming_memory_is_bounded(self):
        """Test a large directory is decoded without buffering the body."""
        count = 10_000
        filler = "x" * 1500

        def chunks():
            yield b"{"
            for index in range(count):
                entry = {
                    "player_id": str(index),
                    "first_name": "First",
                    "last_name": f"Last{index}",
                    "position": "WR",
                    "fantasy_positions": ["WR"],
                    "metadata": {"note": filler},
                }
                separator = b"," if index else b""
                yield separator + json.dumps(str(index)).encode() + b":" + json.dumps(entry).encode()
            yield b"}"

        payload_size = count * (len(filler) + 150)

        def handler(request):
            return httpx.Response(200, content=chunks())

        seen = 0
        tracemalloc.start()
        try:
            with make_client(handler) as client:
                for player_id, player in client.iter_all_players("nfl"):
                    assert player.player_id == player_id
                    seen += 1
            _, peak = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()

        assert seen == count
        assert peak < payload_size / 3
