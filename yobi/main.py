"""Yobi game catalog - FastAPI application."""
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.responses import JSONResponse

from yobi.api.auth import verify_admin_key
from yobi.api.schemas import (
    CreateGameRequest,
    CreateGameResponse,
    GameResponse,
    RateGameRequest,
    UpdateGameRequest,
)
from yobi.application.ports.game_repository import GameRepository
from yobi.application.services.game_catalog_service import GameCatalogService
from yobi.application.services.game_search import SortOrder, search_games
from yobi.config import Settings, get_settings
from yobi.domain.entities.game import GameCategory
from yobi.domain.errors import (
    GameNotFoundError,
    InvalidGameError,
    StoreTransportError,
    StoreUnavailableError,
)
from yobi.infrastructure.persistence.firebase_game_repository import (
    FirebaseGameRepository,
    FirebaseStore,
)
from yobi.infrastructure.persistence.memory_game_repository import (
    InMemoryGameRepository,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")


def build_repository(settings: Settings) -> GameRepository:
    if settings.store_backend == "memory":
        logger.info("Using in-memory game store")
        return InMemoryGameRepository()
    return FirebaseGameRepository(FirebaseStore(settings))


def get_catalog(request: Request) -> GameCatalogService:
    return request.app.state.catalog


@router.get("/games", response_model=List[GameResponse])
async def list_games(
    search: Optional[str] = None,
    category: Optional[str] = None,
    sort: SortOrder = SortOrder.NEWEST,
    featured: Optional[bool] = None,
    limit: Optional[int] = Query(None, ge=1),
    catalog: GameCatalogService = Depends(get_catalog),
) -> List[GameResponse]:
    games = await catalog.get_all_games()
    selected = search_games(
        games, query=search, category=category, sort=sort, featured=featured, limit=limit
    )
    return [GameResponse.from_game(game) for game in selected]


@router.get("/games/featured", response_model=List[GameResponse])
async def list_featured_games(
    catalog: GameCatalogService = Depends(get_catalog),
) -> List[GameResponse]:
    games = await catalog.get_featured_games()
    return [GameResponse.from_game(game) for game in games]


@router.get("/games/{game_id}", response_model=GameResponse)
async def get_game(game_id: str, catalog: GameCatalogService = Depends(get_catalog)) -> GameResponse:
    game = await catalog.get_game_by_id(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found.")
    return GameResponse.from_game(game)


@router.post(
    "/games",
    response_model=CreateGameResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(verify_admin_key)],
)
async def create_game(
    request: CreateGameRequest, catalog: GameCatalogService = Depends(get_catalog)
) -> CreateGameResponse:
    game_id = await catalog.add_game(request.to_details())
    return CreateGameResponse(gameId=game_id)


@router.patch(
    "/games/{game_id}",
    response_model=GameResponse,
    dependencies=[Depends(verify_admin_key)],
)
async def update_game(
    game_id: str, request: UpdateGameRequest, catalog: GameCatalogService = Depends(get_catalog)
) -> GameResponse:
    game = await catalog.update_game(game_id, request.to_patch())
    return GameResponse.from_game(game)


@router.delete(
    "/games/{game_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(verify_admin_key)],
)
async def delete_game(game_id: str, catalog: GameCatalogService = Depends(get_catalog)) -> Response:
    await catalog.delete_game(game_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/games/{game_id}/play", response_model=GameResponse)
async def play_game(game_id: str, catalog: GameCatalogService = Depends(get_catalog)) -> GameResponse:
    game = await catalog.increment_play_count(game_id)
    return GameResponse.from_game(game)


@router.post("/games/{game_id}/rating", response_model=GameResponse)
async def rate_game(
    game_id: str, request: RateGameRequest, catalog: GameCatalogService = Depends(get_catalog)
) -> GameResponse:
    game = await catalog.rate_game(game_id, request.rating)
    return GameResponse.from_game(game)


@router.get("/categories", response_model=List[str])
async def list_categories() -> List[str]:
    return [category.value for category in GameCategory]


async def _not_found(request: Request, exc: GameNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def _invalid_game(request: Request, exc: InvalidGameError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def _store_unavailable(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    return JSONResponse(status_code=503, content={"detail": "Game store is unavailable"})


async def _store_transport(request: Request, exc: StoreTransportError) -> JSONResponse:
    return JSONResponse(status_code=502, content={"detail": "Game store request failed"})


async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(
    catalog: Optional[GameCatalogService] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if catalog is None:
        catalog = GameCatalogService(
            build_repository(settings),
            unique_control_keys=settings.unique_control_keys,
        )

    app = FastAPI(title="Yobi Game Catalog API", version="0.1.0", debug=settings.debug)
    app.state.catalog = catalog

    @app.get("/health")
    async def health_check() -> dict:
        return {"status": "healthy", "service": "yobi"}

    app.include_router(router)
    app.add_exception_handler(GameNotFoundError, _not_found)
    app.add_exception_handler(InvalidGameError, _invalid_game)
    app.add_exception_handler(StoreUnavailableError, _store_unavailable)
    app.add_exception_handler(StoreTransportError, _store_transport)
    app.add_exception_handler(Exception, _unhandled)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run("yobi.main:app", host=_settings.host, port=_settings.port, reload=_settings.debug)
