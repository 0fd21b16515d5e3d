"""League data models."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sleeper_analyzer.models.common import JsonMap


class League(BaseModel):
    """Sleeper league model."""

    model_config = ConfigDict(frozen=True)

    league_id: str
    name: str
    avatar: Optional[str] = None
    season: str
    season_type: Optional[str] = None
    sport: str
    status: str
    total_rosters: int
    settings: JsonMap = Field(default_factory=dict)
    scoring_settings: JsonMap = Field(default_factory=dict)
    roster_positions: List[str] = Field(default_factory=list)

    @field_validator("settings", "scoring_settings", mode="before")
    @classmethod
    def _map_or_empty(cls, value):
        return {} if value is None else value

    @field_validator("roster_positions", mode="before")
    @classmethod
    def _list_or_empty(cls, value):
        return [] if value is None else value

    @classmethod
    def from_api_response(cls, data: dict) -> "League":
        """Create League from API response."""
        return cls(
            league_id=data["league_id"],
            name=data["name"],
            avatar=data.get("avatar"),
            season=data["season"],
            season_type=data.get("season_type"),
            sport=data["sport"],
            status=data["status"],
            total_rosters=data["total_rosters"],
            settings=data.get("settings"),
            scoring_settings=data.get("scoring_settings"),
            roster_positions=data.get("roster_positions"),
        )

    @property
    def starter_slots(self) -> List[str]:
        """Get roster positions that count as starting slots."""
        return [position for position in self.roster_positions if position not in ("BN", "IR", "TAXI")]
