from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, List, Mapping, Optional

from yobi.domain.errors import InvalidGameError


class GameCategory(str, Enum):
    ACTION = "Action"
    ADVENTURE = "Adventure"
    PUZZLE = "Puzzle"
    RACING = "Racing"
    SPORTS = "Sports"
    STRATEGY = "Strategy"
    ARCADE = "Arcade"
    SHOOTING = "Shooting"


@dataclass(frozen=True)
class KeyboardControl:
    key: str
    action: str


@dataclass
class GameDetails:
    """Fields an editor supplies; everything else is owned by the catalog."""

    title: str
    description: str = ""
    url: str = ""
    thumbnail: str = ""
    category: str = ""
    tags: List[str] = field(default_factory=list)
    featured: bool = False
    keyboard_controls: List[KeyboardControl] = field(default_factory=list)


EDITABLE_FIELDS = frozenset(f.name for f in fields(GameDetails))


@dataclass
class Game:
    title: str
    created_at: datetime
    updated_at: datetime
    id: Optional[str] = None
    description: str = ""
    url: str = ""
    thumbnail: str = ""
    category: str = ""
    tags: List[str] = field(default_factory=list)
    featured: bool = False
    play_count: int = 0
    rating: float = 0.0
    rating_count: int = 0
    keyboard_controls: List[KeyboardControl] = field(default_factory=list)

    @classmethod
    def create(cls, details: GameDetails, now: datetime) -> "Game":
        return cls(
            title=details.title,
            description=details.description,
            url=details.url,
            thumbnail=details.thumbnail,
            category=details.category,
            tags=list(details.tags or []),
            featured=details.featured,
            keyboard_controls=list(details.keyboard_controls or []),
            created_at=now,
            updated_at=now,
        )

    def with_id(self, game_id: str) -> "Game":
        return replace(self, id=game_id)

    def apply_patch(self, patch: Mapping[str, Any], now: datetime) -> None:
        """Overwrite only the fields present in ``patch``."""
        unknown = set(patch) - EDITABLE_FIELDS
        if unknown:
            raise InvalidGameError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
        for name, value in patch.items():
            if name in ("tags", "keyboard_controls"):
                value = list(value)
            setattr(self, name, value)
        self.updated_at = now

    def record_play(self, now: datetime) -> None:
        self.play_count += 1
        self.updated_at = now

    def record_rating(self, value: float, now: datetime) -> None:
        if not math.isfinite(value) or value < 0:
            raise InvalidGameError(f"Invalid rating: {value}")
        count = self.rating_count + 1
        self.rating = (self.rating * self.rating_count + value) / count
        self.rating_count = count
        self.updated_at = now


def parse_tags(raw: str) -> List[str]:
    """Split a comma-separated tag string, dropping blank entries."""
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def find_duplicate_keys(controls: List[KeyboardControl]) -> List[str]:
    seen = set()
    duplicates: List[str] = []
    for control in controls:
        folded = control.key.casefold()
        if folded in seen and control.key not in duplicates:
            duplicates.append(control.key)
        seen.add(folded)
    return duplicates
