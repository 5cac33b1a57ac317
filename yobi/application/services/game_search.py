from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional

from yobi.domain.entities.game import Game


class SortOrder(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    POPULAR = "popular"
    RATING = "rating"
    TITLE = "title"


def matches_query(game: Game, query: str) -> bool:
    needle = query.lower()
    return (
        needle in game.title.lower()
        or needle in game.description.lower()
        or any(needle in tag.lower() for tag in game.tags)
    )


def sort_games(games: Iterable[Game], order: SortOrder) -> List[Game]:
    if order is SortOrder.NEWEST:
        return sorted(games, key=lambda game: game.created_at, reverse=True)
    if order is SortOrder.OLDEST:
        return sorted(games, key=lambda game: game.created_at)
    if order is SortOrder.POPULAR:
        return sorted(games, key=lambda game: game.play_count, reverse=True)
    if order is SortOrder.RATING:
        return sorted(games, key=lambda game: game.rating, reverse=True)
    return sorted(games, key=lambda game: game.title.casefold())


def search_games(
    games: Iterable[Game],
    query: Optional[str] = None,
    category: Optional[str] = None,
    sort: SortOrder = SortOrder.NEWEST,
    featured: Optional[bool] = None,
    limit: Optional[int] = None,
) -> List[Game]:
    """Filter and order an already fetched list of games."""
    selected = list(games)
    if query and query.strip():
        selected = [game for game in selected if matches_query(game, query.strip())]
    if category:
        selected = [game for game in selected if game.category == category]
    if featured is not None:
        selected = [game for game in selected if game.featured == featured]
    ordered = sort_games(selected, sort)
    return ordered[:limit] if limit is not None else ordered
