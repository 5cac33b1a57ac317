"""Translation between Game entities and Realtime Database documents.

Documents live under ``games/{id}`` with camelCase keys. Timestamps are
written as milliseconds since the epoch. Older documents may carry ISO-8601
strings, and arrays with holes come back from the database as index-keyed
mappings, so decoding is lenient and always yields a complete entity.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping

from yobi.domain.entities.game import Game, KeyboardControl

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def game_to_record(game: Game) -> Dict[str, Any]:
    return {
        "title": game.title,
        "description": game.description,
        "url": game.url,
        "thumbnail": game.thumbnail,
        "category": game.category,
        "tags": list(game.tags),
        "featured": game.featured,
        "createdAt": to_millis(game.created_at),
        "updatedAt": to_millis(game.updated_at),
        "playCount": game.play_count,
        "rating": game.rating,
        "ratingCount": game.rating_count,
        "keyboardControls": [
            {"key": control.key, "action": control.action}
            for control in game.keyboard_controls
        ],
    }


def record_to_game(game_id: str, record: Mapping[str, Any]) -> Game:
    return Game(
        id=game_id,
        title=str(record.get("title") or ""),
        description=str(record.get("description") or ""),
        url=str(record.get("url") or ""),
        thumbnail=str(record.get("thumbnail") or ""),
        category=str(record.get("category") or ""),
        tags=[str(tag) for tag in _sequence(record.get("tags"))],
        featured=bool(record.get("featured", False)),
        created_at=from_stored_timestamp(record.get("createdAt")),
        updated_at=from_stored_timestamp(record.get("updatedAt")),
        play_count=int(_number(record.get("playCount"), "playCount")),
        rating=_number(record.get("rating"), "rating"),
        rating_count=int(_number(record.get("ratingCount"), "ratingCount")),
        keyboard_controls=_controls(record.get("keyboardControls")),
    )


_ONE_MS = timedelta(milliseconds=1)


def to_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - EPOCH) // _ONE_MS


def from_stored_timestamp(value: Any) -> datetime:
    """Decode a stored timestamp; anything unreadable reads as the epoch."""
    if value is None or value == "":
        return EPOCH
    try:
        if isinstance(value, bool):
            raise TypeError("booleans are not timestamps")
        if isinstance(value, (int, float)):
            return EPOCH + timedelta(milliseconds=value)
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    except (TypeError, ValueError, OverflowError) as exc:
        logger.warning(f"Unreadable timestamp {value!r}, using epoch: {exc}")
        return EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _number(value: Any, name: str) -> float:
    if value is None or value == "":
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = math.nan
    if isinstance(value, bool) or not math.isfinite(number):
        logger.warning(f"Unreadable {name} {value!r}, using 0")
        return 0.0
    return number


def _sequence(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, Mapping):
        # Sparse arrays arrive keyed by index.
        indexed = []
        for key, item in value.items():
            try:
                indexed.append((int(key), item))
            except (TypeError, ValueError):
                logger.warning(f"Skipping non-index key {key!r} in stored array")
        indexed.sort(key=lambda pair: pair[0])
        return [item for _, item in indexed if item is not None]
    if isinstance(value, (list, tuple)):
        return [item for item in value if item is not None]
    return [value]



def _controls(value: Any) -> List[KeyboardControl]:
    controls = []
    for entry in _sequence(value):
        if not isinstance(entry, Mapping) or not entry.get("key"):
            logger.warning(f"Skipping malformed keyboard control: {entry!r}")
            continue
        controls.append(KeyboardControl(key=str(entry["key"]), action=str(entry.get("action") or "")))
    return controls
