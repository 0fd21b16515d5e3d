"""User data models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sleeper_analyzer.models.common import JsonMap


class User(BaseModel):
    """Sleeper user model."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    # League member listings omit the username
    username: Optional[str] = None
    display_name: Optional[str] = None
    avatar: Optional[str] = None
    is_bot: Optional[bool] = None
    metadata: JsonMap = Field(default_factory=dict)

    @field_validator("metadata", mode="before")
    @classmethod
    def _metadata_or_empty(cls, value):
        return {} if value is None else value

    @classmethod
    def from_api_response(cls, data: dict) -> "User":
        """Create User from API response."""
        return cls(
            user_id=data["user_id"],
            username=data.get("username"),
            display_name=data.get("display_name"),
            avatar=data.get("avatar"),
            is_bot=data.get("is_bot"),
            metadata=data.get("metadata"),
        )

    @property
    def team_name(self) -> Optional[str]:
        """Get the fantasy team name set in league metadata."""
        team_name = self.metadata.get("team_name")
        return team_name if isinstance(team_name, str) and team_name else None

    @property
    def effective_name(self) -> str:
        """Get the most appropriate display name."""
        return self.display_name or self.team_name or self.username or self.user_id
