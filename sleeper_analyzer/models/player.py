"""Player data models."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sleeper_analyzer.models.common import JsonMap


class Player(BaseModel):
    """Player directory entry."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    position: Optional[str] = None
    team: Optional[str] = None  # None for free agents
    number: Optional[int] = None
    age: Optional[int] = None
    status: Optional[str] = None
    fantasy_positions: List[str] = Field(default_factory=list)
    years_exp: Optional[int] = None
    metadata: JsonMap = Field(default_factory=dict)

    @field_validator("fantasy_positions", mode="before")
    @classmethod
    def _list_or_empty(cls, value):
        return [] if value is None else value

    @field_validator("metadata", mode="before")
    @classmethod
    def _map_or_empty(cls, value):
        return {} if value is None else value

    @classmethod
    def from_api_response(cls, player_id: str, data: dict) -> "Player":
        """Create Player from a directory entry keyed by ``player_id``.

        Raises:
            ValueError: if the entry names a different player_id than its key
        """
        entry_id = data.get("player_id")
        if entry_id is not None and str(entry_id) != player_id:
            raise ValueError(f"Player entry keyed '{player_id}' has player_id '{entry_id}'")

        return cls(
            player_id=player_id,
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            full_name=data.get("full_name"),
            position=data.get("position"),
            team=data.get("team"),
            number=data.get("number"),
            age=data.get("age"),
            status=data.get("status"),
            fantasy_positions=data.get("fantasy_positions"),
            years_exp=data.get("years_exp"),
            metadata=data.get("metadata"),
        )

    @property
    def display_name(self) -> str:
        """Get player's name for display."""
        if self.full_name:
            return self.full_name
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        elif self.last_name:
            return self.last_name
        elif self.first_name:
            return self.first_name
        else:
            return "Unknown Player"

    @property
    def display_position(self) -> str:
        """Get display-friendly position."""
        return self.position or "N/A"

    @property
    def display_team(self) -> str:
        """Get display-friendly team."""
        return self.team or "FA"
