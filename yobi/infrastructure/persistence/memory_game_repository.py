from __future__ import annotations

import copy
from threading import Lock
from typing import Callable, Dict, List, Optional

from yobi.application.ports.game_repository import GameRepository
from yobi.domain.entities.game import Game
from yobi.domain.errors import GameNotFoundError
from yobi.domain.id_generator import generate_game_id


class InMemoryGameRepository(GameRepository):
    """Thread-safe in-memory storage for games.

    Games are copied on the way in and out, so mutating a returned entity
    never changes what is stored.
    """

    def __init__(self) -> None:
        self._games: Dict[str, Game] = {}
        self._lock = Lock()

    def add(self, game: Game) -> str:
        with self._lock:
            game_id = generate_game_id()
            while game_id in self._games:
                game_id = generate_game_id()
            self._games[game_id] = copy.deepcopy(game.with_id(game_id))
            return game_id

    def get(self, game_id: str) -> Optional[Game]:
        with self._lock:
            game = self._games.get(game_id)
            return copy.deepcopy(game) if game is not None else None

    def list_all(self) -> List[Game]:
        with self._lock:
            return [copy.deepcopy(game) for game in self._games.values()]

    def mutate(self, game_id: str, change: Callable[[Game], None]) -> Game:
        with self._lock:
            try:
                game = copy.deepcopy(self._games[game_id])
            except KeyError as exc:
                raise GameNotFoundError(f"Game {game_id} not found.") from exc
            change(game)
            self._games[game_id] = game
            return copy.deepcopy(game)

    def delete(self, game_id: str) -> None:
        with self._lock:
            if self._games.pop(game_id, None) is None:
                raise GameNotFoundError(f"Game {game_id} not found.")
