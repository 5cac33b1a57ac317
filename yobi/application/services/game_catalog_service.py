from __future__ import annotations

import asyncio
import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional

from yobi.application.ports.game_repository import GameRepository
from yobi.domain.entities.game import (
    EDITABLE_FIELDS,
    Game,
    GameDetails,
    KeyboardControl,
    find_duplicate_keys,
)
from yobi.domain.errors import InvalidGameError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GameCatalogService:
    """Create, read, update and delete catalog games, and track plays and ratings.

    Repository calls block on network I/O, so each one runs in a worker
    thread. Failures of the store are raised to the caller unchanged.
    """

    def __init__(
        self,
        repository: GameRepository,
        clock: Clock = utcnow,
        unique_control_keys: bool = False,
    ) -> None:
        self._repository = repository
        self._clock = clock
        self._unique_control_keys = unique_control_keys

    async def add_game(self, details: GameDetails) -> str:
        self._check_title(details.title)
        self._check_controls(details.keyboard_controls)
        game = Game.create(details, self._clock())
        game_id = await asyncio.to_thread(self._repository.add, game)
        logger.info(f"Added game {game_id} ({details.title!r})")
        return game_id

    async def get_all_games(self) -> List[Game]:
        return await asyncio.to_thread(self._repository.list_all)

    async def get_featured_games(self) -> List[Game]:
        games = await self.get_all_games()
        return [game for game in games if game.featured]

    async def get_game_by_id(self, game_id: str) -> Optional[Game]:
        return await asyncio.to_thread(self._repository.get, game_id)

    async def update_game(self, game_id: str, patch: Mapping[str, Any]) -> Game:
        changes = dict(patch)
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise InvalidGameError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
        if "title" in changes:
            self._check_title(changes["title"])
        if "keyboard_controls" in changes:
            self._check_controls(changes["keyboard_controls"])

        now = self._clock()
        game = await asyncio.to_thread(
            self._repository.mutate, game_id, lambda current: current.apply_patch(changes, now)
        )
        logger.info(f"Updated game {game_id}: {', '.join(sorted(changes)) or 'no fields'}")
        return game

    async def delete_game(self, game_id: str) -> None:
        await asyncio.to_thread(self._repository.delete, game_id)
        logger.info(f"Deleted game {game_id}")

    async def increment_play_count(self, game_id: str) -> Game:
        now = self._clock()
        game = await asyncio.to_thread(
            self._repository.mutate, game_id, lambda current: current.record_play(now)
        )
        logger.debug(f"Counted play of game {game_id} (now {game.play_count})")
        return game

    async def rate_game(self, game_id: str, rating: float) -> Game:
        if not math.isfinite(rating) or rating < 0:
            raise InvalidGameError(f"Invalid rating: {rating}")
        now = self._clock()
        game = await asyncio.to_thread(
            self._repository.mutate, game_id, lambda current: current.record_rating(rating, now)
        )
        logger.info(f"Rated game {game_id} {rating} (now {game.rating:.2f} over {game.rating_count})")
        return game

    def _check_title(self, title: Any) -> None:
        if not isinstance(title, str) or not title.strip():
            raise InvalidGameError("Game title must not be blank.")

    def _check_controls(self, controls: List[KeyboardControl]) -> None:
        if not self._unique_control_keys:
            return
        duplicates = find_duplicate_keys(list(controls))
        if duplicates:
            raise InvalidGameError(f"Duplicate keyboard control keys: {', '.join(duplicates)}")
