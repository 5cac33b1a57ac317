"""Tests for settings loading and repository selection."""

from yobi.config import Settings
from yobi.infrastructure.persistence.firebase_game_repository import FirebaseGameRepository
from yobi.infrastructure.persistence.memory_game_repository import InMemoryGameRepository
from yobi.main import build_repository


def test_defaults(monkeypatch):
    for name in ("YOBI_STORE_BACKEND", "YOBI_ADMIN_API_KEY", "YOBI_UNIQUE_CONTROL_KEYS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.store_backend == "firebase"
    assert settings.admin_api_key is None
    assert settings.unique_control_keys is False
    assert settings.firebase_app_name == "yobi"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("YOBI_STORE_BACKEND", "memory")
    monkeypatch.setenv("YOBI_FIREBASE_DATABASE_URL", "https://yobi.firebaseio.com")
    monkeypatch.setenv("YOBI_UNIQUE_CONTROL_KEYS", "true")
    monkeypatch.setenv("YOBI_PORT", "9000")

    settings = Settings(_env_file=None)

    assert settings.store_backend == "memory"
    assert settings.firebase_database_url == "https://yobi.firebaseio.com"
    assert settings.unique_control_keys is True
    assert settings.port == 9000


def test_missing_firebase_keys():
    settings = Settings(_env_file=None, firebase_database_url="https://yobi.firebaseio.com", firebase_project_id="")
    assert settings.missing_firebase_keys() == ["firebase_project_id"]

    complete = Settings(_env_file=None, firebase_database_url="https://yobi.firebaseio.com", firebase_project_id="yobi")
    assert complete.missing_firebase_keys() == []


def test_build_repository_selects_backend():
    assert isinstance(build_repository(Settings(_env_file=None, store_backend="memory")), InMemoryGameRepository)
    assert isinstance(build_repository(Settings(_env_file=None, store_backend="firebase")), FirebaseGameRepository)
