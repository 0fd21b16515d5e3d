"""Matchup data models."""

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Matchup(BaseModel):
    """Sleeper matchup model.

    ``starters`` and ``starters_points`` are parallel lists: index ``i`` of
    one describes the same lineup slot as index ``i`` of the other.
    """

    model_config = ConfigDict(frozen=True)

    roster_id: int
    matchup_id: Optional[int] = None
    points: float
    custom_points: Optional[float] = None
    starters: List[Optional[str]] = Field(default_factory=list)
    starters_points: List[Optional[float]] = Field(default_factory=list)
    players: List[str] = Field(default_factory=list)
    players_points: Dict[str, float] = Field(default_factory=dict)

    @field_validator("starters", "starters_points", "players", mode="before")
    @classmethod
    def _list_or_empty(cls, value):
        return [] if value is None else value

    @field_validator("players_points", mode="before")
    @classmethod
    def _map_or_empty(cls, value):
        return {} if value is None else value

    @model_validator(mode="after")
    def _check_parallel_starters(self) -> "Matchup":
        if len(self.starters) != len(self.starters_points):
            raise ValueError(
                f"starters has {len(self.starters)} entries but starters_points has "
                f"{len(self.starters_points)} (roster {self.roster_id})"
            )
        return self

    @classmethod
    def from_api_response(cls, data: dict) -> "Matchup":
        """Create Matchup from API response."""
        return cls(
            roster_id=data["roster_id"],
            matchup_id=data.get("matchup_id"),
            points=data["points"],
            custom_points=data.get("custom_points"),
            starters=data.get("starters"),
            starters_points=data.get("starters_points"),
            players=data.get("players"),
            players_points=data.get("players_points"),
        )

    @property
    def has_bye(self) -> bool:
        """Check if this is a bye week (no matchup_id)."""
        return self.matchup_id is None

    @property
    def effective_points(self) -> float:
        """Get points counted for the week (commissioner override wins)."""
        return self.custom_points if self.custom_points is not None else self.points

    def get_starters_list(self) -> List[str]:
        """Get list of starter player IDs, filtering out empty slots."""
        return [player_id for player_id in self.starters if player_id and player_id != "0"]

    def starter_points(self) -> List[Tuple[Optional[str], Optional[float]]]:
        """Pair each starter slot with its points, in lineup order."""
        return list(zip(self.starters, self.starters_points))

    def bench(self) -> List[str]:
        """Get rostered players that did not start, in roster order."""
        starters = set(self.starters)
        return [player_id for player_id in self.players if player_id not in starters]
