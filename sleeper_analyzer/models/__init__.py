"""Typed records decoded from Sleeper API responses."""

from sleeper_analyzer.models.league import League
from sleeper_analyzer.models.matchup import Matchup
from sleeper_analyzer.models.player import Player
from sleeper_analyzer.models.roster import Roster
from sleeper_analyzer.models.user import User

__all__ = ["League", "Matchup", "Player", "Roster", "User"]
