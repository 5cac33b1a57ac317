"""Tests for the Game entity and its helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from yobi.domain.entities.game import (
    EDITABLE_FIELDS,
    Game,
    GameDetails,
    KeyboardControl,
    find_duplicate_keys,
    parse_tags,
)
from yobi.domain.errors import InvalidGameError
from yobi.domain.id_generator import generate_game_id

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_create_zeroes_counters_and_shares_timestamp():
    game = Game.create(GameDetails(title="Racer", category="Racing"), NOW)

    assert game.id is None
    assert game.created_at == game.updated_at == NOW
    assert (game.play_count, game.rating, game.rating_count) == (0, 0.0, 0)


def test_create_copies_sequences():
    tags = ["fast"]
    game = Game.create(GameDetails(title="Racer", tags=tags), NOW)
    tags.append("mutated")

    assert game.tags == ["fast"]


def test_apply_patch_touches_only_given_fields():
    game = Game.create(GameDetails(title="Racer", tags=["fast"], featured=True), NOW)
    later = NOW + timedelta(minutes=5)

    game.apply_patch({"description": "Vroom"}, later)

    assert game.description == "Vroom"
    assert game.tags == ["fast"]
    assert game.featured is True
    assert game.created_at == NOW
    assert game.updated_at == later


def test_apply_patch_rejects_unknown_fields():
    game = Game.create(GameDetails(title="Racer"), NOW)
    with pytest.raises(InvalidGameError, match="rating"):
        game.apply_patch({"rating": 5}, NOW)


def test_editable_fields():
    assert EDITABLE_FIELDS == {
        "title",
        "description",
        "url",
        "thumbnail",
        "category",
        "tags",
        "featured",
        "keyboard_controls",
    }


def test_record_rating_running_mean():
    game = Game.create(GameDetails(title="Racer"), NOW)
    game.record_rating(5, NOW)
    game.record_rating(3, NOW)

    assert game.rating == 4.0
    assert game.rating_count == 2


def test_record_play():
    game = Game.create(GameDetails(title="Racer"), NOW)
    later = NOW + timedelta(seconds=1)
    game.record_play(later)

    assert game.play_count == 1
    assert game.updated_at == later


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("fun, puzzle ,  ,casual", ["fun", "puzzle", "casual"]),
        ("", []),
        (" , ,", []),
        ("single", ["single"]),
    ],
)
def test_parse_tags(raw, expected):
    assert parse_tags(raw) == expected


def test_find_duplicate_keys_is_case_insensitive():
    controls = [
        KeyboardControl("a", "Left"),
        KeyboardControl("d", "Right"),
        KeyboardControl("A", "Strafe"),
        KeyboardControl("a", "Again"),
    ]
    assert find_duplicate_keys(controls) == ["A", "a"]


def test_generated_ids_sort_by_time():
    earlier = generate_game_id(now_ms=1_700_000_000_000)
    later = generate_game_id(now_ms=1_700_000_000_001)

    assert len(earlier) == 20
    assert earlier[:8] < later[:8]
