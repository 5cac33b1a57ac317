"""Tests for the in-memory repository."""

from datetime import datetime, timezone

import pytest

from yobi.domain.entities.game import Game
from yobi.domain.errors import GameNotFoundError
from yobi.infrastructure.persistence.memory_game_repository import InMemoryGameRepository

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def stored(repository: InMemoryGameRepository) -> str:
    return repository.add(Game(title="Copy Check", created_at=NOW, updated_at=NOW, tags=["one"]))


def test_add_assigns_id(repository, stored):
    assert repository.get(stored).id == stored


def test_returned_games_are_copies(repository, stored):
    game = repository.get(stored)
    game.tags.append("leak")
    game.play_count = 99

    fresh = repository.get(stored)
    assert fresh.tags == ["one"]
    assert fresh.play_count == 0


def test_list_all(repository, stored):
    other = repository.add(Game(title="Second", created_at=NOW, updated_at=NOW))
    assert {game.id for game in repository.list_all()} == {stored, other}


def test_mutate_persists_change(repository, stored):
    result = repository.mutate(stored, lambda game: setattr(game, "featured", True))

    assert result.featured is True
    assert repository.get(stored).featured is True


def test_failed_mutation_leaves_game_untouched(repository, stored):
    def explode(game):
        game.title = "half written"
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        repository.mutate(stored, explode)

    assert repository.get(stored).title == "Copy Check"


def test_missing_ids(repository):
    assert repository.get("missing") is None
    with pytest.raises(GameNotFoundError):
        repository.mutate("missing", lambda game: None)
    with pytest.raises(GameNotFoundError):
        repository.delete("missing")
