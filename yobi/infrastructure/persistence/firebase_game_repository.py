from __future__ import annotations

import logging
from contextlib import contextmanager
from threading import Lock
from typing import Any, Callable, Iterator, List, Mapping, Optional

import firebase_admin
from firebase_admin import credentials, db, exceptions
from google.auth import exceptions as auth_exceptions

from yobi.application.ports.game_repository import GameRepository
from yobi.config import Settings
from yobi.domain.entities.game import Game
from yobi.domain.errors import GameNotFoundError, StoreTransportError, StoreUnavailableError
from yobi.infrastructure.persistence.records import game_to_record, record_to_game

logger = logging.getLogger(__name__)

_FORBIDDEN_KEY_CHARS = frozenset(".#$[]/")


class FirebaseStore:
    """Lazily initialized handle on a Firebase Realtime Database.

    Nothing touches the network or the credentials until the first
    reference is requested.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._app: Optional[firebase_admin.App] = None
        self._lock = Lock()

    def reference(self, path: str) -> db.Reference:
        app = self._get_app()
        try:
            return db.reference(path, app=app)
        except (auth_exceptions.GoogleAuthError, ValueError) as exc:
            logger.error(f"Could not open Firebase database: {exc}")
            raise StoreUnavailableError("Firebase database could not be opened.") from exc

    def _get_app(self) -> firebase_admin.App:
        with self._lock:
            if self._app is None:
                self._app = self._initialize()
            return self._app

    def _initialize(self) -> firebase_admin.App:
        missing = self._settings.missing_firebase_keys()
        if missing:
            logger.warning(f"Missing Firebase config keys: {', '.join(missing)}")
            raise StoreUnavailableError("Firebase database is not configured.")

        name = self._settings.firebase_app_name
        try:
            return firebase_admin.get_app(name)
        except ValueError:
            pass

        try:
            if self._settings.firebase_credentials_path:
                credential = credentials.Certificate(self._settings.firebase_credentials_path)
            else:
                credential = credentials.ApplicationDefault()
            app = firebase_admin.initialize_app(
                credential,
                {
                    "databaseURL": self._settings.firebase_database_url,
                    "projectId": self._settings.firebase_project_id,
                },
                name=name,
            )
        except (ValueError, OSError) as exc:
            logger.error(f"Could not initialize Firebase app: {exc}")
            raise StoreUnavailableError("Firebase database could not be initialized.") from exc

        logger.info(f"Initialized Firebase app '{name}' for {self._settings.firebase_database_url}")
        return app


@contextmanager
def _store_call(action: str) -> Iterator[None]:
    try:
        yield
    except exceptions.FirebaseError as exc:
        logger.error(f"Firebase error while trying to {action}: {exc}")
        raise StoreTransportError(f"Failed to {action}.") from exc
    except auth_exceptions.GoogleAuthError as exc:
        logger.error(f"Firebase credentials rejected while trying to {action}: {exc}")
        raise StoreUnavailableError(f"Failed to {action}: credentials unavailable.") from exc


def _is_valid_key(game_id: str) -> bool:
    return bool(game_id) and not (_FORBIDDEN_KEY_CHARS & set(game_id))


class FirebaseGameRepository(GameRepository):
    """Games stored as documents under ``/{root}/{id}``."""

    def __init__(self, store: FirebaseStore, root: str = "games") -> None:
        self._store = store
        self._root = root

    def _games(self) -> db.Reference:
        return self._store.reference(self._root)

    def add(self, game: Game) -> str:
        with _store_call("add game"):
            new_ref = self._games().push(game_to_record(game))
        return new_ref.key

    def get(self, game_id: str) -> Optional[Game]:
        if not _is_valid_key(game_id):
            return None
        with _store_call(f"fetch game {game_id}"):
            record = self._games().child(game_id).get()
        if not isinstance(record, Mapping):
            return None
        return record_to_game(game_id, record)

    def list_all(self) -> List[Game]:
        with _store_call("fetch games"):
            records = self._games().get()
        if not records:
            return []
        if not isinstance(records, Mapping):
            logger.warning(f"Unexpected shape under /{self._root}: {type(records).__name__}")
            return []
        return [
            record_to_game(game_id, record)
            for game_id, record in records.items()
            if isinstance(record, Mapping)
        ]

    def mutate(self, game_id: str, change: Callable[[Game], None]) -> Game:
        if not _is_valid_key(game_id):
            raise GameNotFoundError(f"Game {game_id} not found.")

        def _update(current: Any) -> Any:
            if not isinstance(current, Mapping):
                raise GameNotFoundError(f"Game {game_id} not found.")
            game = record_to_game(game_id, current)
            change(game)
            return game_to_record(game)

        with _store_call(f"update game {game_id}"):
            stored = self._games().child(game_id).transaction(_update)
        return record_to_game(game_id, stored)

    def delete(self, game_id: str) -> None:
        if not _is_valid_key(game_id):
            raise GameNotFoundError(f"Game {game_id} not found.")
        with _store_call(f"delete game {game_id}"):
            game_ref = self._games().child(game_id)
            if game_ref.get(shallow=True) is None:
                raise GameNotFoundError(f"Game {game_id} not found.")
            game_ref.delete()
