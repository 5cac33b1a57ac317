"""
Pytest fixtures for Yobi tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from yobi.application.services.game_catalog_service import GameCatalogService
from yobi.domain.entities.game import GameDetails, KeyboardControl
from yobi.infrastructure.persistence.memory_game_repository import InMemoryGameRepository


class FakeClock:
    """Returns a new instant one second later on every call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)) -> None:
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repository() -> InMemoryGameRepository:
    return InMemoryGameRepository()


@pytest.fixture
def catalog(repository: InMemoryGameRepository, clock: FakeClock) -> GameCatalogService:
    return GameCatalogService(repository, clock=clock)


@pytest.fixture
def puzzle_details() -> GameDetails:
    return GameDetails(
        title="Block Drop",
        description="Stack falling blocks",
        url="https://games.example.com/block-drop",
        thumbnail="https://games.example.com/block-drop.png",
        category="Puzzle",
        tags=["blocks", "classic"],
        featured=True,
        keyboard_controls=[
            KeyboardControl(key="ArrowLeft", action="Move left"),
            KeyboardControl(key="ArrowRight", action="Move right"),
            KeyboardControl(key="Space", action="Drop"),
        ],
    )
