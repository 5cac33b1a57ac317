from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from yobi.domain.entities.game import Game


class GameRepository(ABC):
    """Storage boundary for catalog games."""

    @abstractmethod
    def add(self, game: Game) -> str:
        """Persist a new game under a store-assigned key and return the key."""

    @abstractmethod
    def get(self, game_id: str) -> Optional[Game]:
        ...

    @abstractmethod
    def list_all(self) -> List[Game]:
        ...

    @abstractmethod
    def mutate(self, game_id: str, change: Callable[[Game], None]) -> Game:
        """Apply ``change`` to the stored game atomically and return the result.

        Raises GameNotFoundError when no game is stored under ``game_id``.
        """

    @abstractmethod
    def delete(self, game_id: str) -> None:
        ...
