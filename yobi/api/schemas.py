from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from yobi.domain.entities.game import Game, GameDetails, KeyboardControl, parse_tags

# Request field name -> entity attribute, for partial updates.
_PATCH_FIELDS = {
    "title": "title",
    "description": "description",
    "url": "url",
    "thumbnail": "thumbnail",
    "category": "category",
    "tags": "tags",
    "featured": "featured",
    "keyboardControls": "keyboard_controls",
}


def _split_tag_string(value: Any) -> Any:
    # Admin forms post tags as one comma-separated string.
    if isinstance(value, str):
        return parse_tags(value)
    return value


class KeyboardControlSchema(BaseModel):
    key: str = Field(..., min_length=1)
    action: str = ""


class CreateGameRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    url: str = ""
    thumbnail: str = ""
    category: str = ""
    tags: Optional[List[str]] = None
    featured: bool = False
    keyboardControls: Optional[List[KeyboardControlSchema]] = None

    @field_validator("tags", mode="before")
    @classmethod
    def split_tag_string(cls, value: Any) -> Any:
        return _split_tag_string(value)

    def to_details(self) -> GameDetails:
        return GameDetails(
            title=self.title,
            description=self.description,
            url=self.url,
            thumbnail=self.thumbnail,
            category=self.category,
            tags=list(self.tags or []),
            featured=self.featured,
            keyboard_controls=_to_controls(self.keyboardControls or []),
        )


class CreateGameResponse(BaseModel):
    gameId: str


class UpdateGameRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    url: Optional[str] = None
    thumbnail: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    featured: Optional[bool] = None
    keyboardControls: Optional[List[KeyboardControlSchema]] = None

    @field_validator("tags", mode="before")
    @classmethod
    def split_tag_string(cls, value: Any) -> Any:
        return _split_tag_string(value)

    def to_patch(self) -> Dict[str, Any]:
        """Only the fields the client actually sent; nulls are treated as absent."""
        patch: Dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None:
                continue
            if name == "keyboardControls":
                value = _to_controls(value)
            patch[_PATCH_FIELDS[name]] = value
        return patch


class RateGameRequest(BaseModel):
    rating: float = Field(..., ge=0, le=5)


class GameResponse(BaseModel):
    id: str
    title: str
    description: str
    url: str
    thumbnail: str
    category: str
    tags: List[str]
    featured: bool
    createdAt: datetime
    updatedAt: datetime
    playCount: int
    rating: float
    ratingCount: int
    keyboardControls: List[KeyboardControlSchema]

    @classmethod
    def from_game(cls, game: Game) -> "GameResponse":
        return cls(
            id=game.id or "",
            title=game.title,
            description=game.description,
            url=game.url,
            thumbnail=game.thumbnail,
            category=game.category,
            tags=list(game.tags),
            featured=game.featured,
            createdAt=game.created_at,
            updatedAt=game.updated_at,
            playCount=game.play_count,
            rating=game.rating,
            ratingCount=game.rating_count,
            keyboardControls=[
                KeyboardControlSchema(key=control.key, action=control.action)
                for control in game.keyboard_controls
            ],
        )


def _to_controls(controls: List[KeyboardControlSchema]) -> List[KeyboardControl]:
    return [KeyboardControl(key=control.key, action=control.action) for control in controls]
