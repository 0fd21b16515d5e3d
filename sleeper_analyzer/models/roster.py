"""Roster data models."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sleeper_analyzer.models.common import JsonMap


class Roster(BaseModel):
    """Sleeper roster model."""

    model_config = ConfigDict(frozen=True)

    roster_id: int
    owner_id: Optional[str] = None  # None for an unclaimed roster
    league_id: str
    players: List[str] = Field(default_factory=list)
    starters: List[str] = Field(default_factory=list)
    reserve: List[str] = Field(default_factory=list)
    taxi: List[str] = Field(default_factory=list)
    settings: JsonMap = Field(default_factory=dict)
    player_map: Optional[JsonMap] = None

    @field_validator("players", "starters", "reserve", "taxi", mode="before")
    @classmethod
    def _list_or_empty(cls, value):
        return [] if value is None else value

    @field_validator("settings", mode="before")
    @classmethod
    def _map_or_empty(cls, value):
        return {} if value is None else value

    @classmethod
    def from_api_response(cls, data: dict, league_id: Optional[str] = None) -> "Roster":
        """Create Roster from API response.

        ``league_id`` is used when the payload does not carry its own.
        """
        return cls(
            roster_id=data["roster_id"],
            owner_id=data.get("owner_id"),
            league_id=data.get("league_id") or league_id,
            players=data.get("players"),
            starters=data.get("starters"),
            reserve=data.get("reserve"),
            taxi=data.get("taxi"),
            settings=data.get("settings"),
            player_map=data.get("player_map"),
        )

    @property
    def is_claimed(self) -> bool:
        """Check if a user owns this roster."""
        return self.owner_id is not None

    def get_player_status(self, player_id: str) -> Optional[str]:
        """Get status of a player on this roster, or None if not rostered."""
        if player_id in self.starters:
            return "starter"
        elif player_id in self.reserve:
            return "reserve"
        elif player_id in self.taxi:
            return "taxi"
        elif player_id in self.players:
            return "bench"
        return None
