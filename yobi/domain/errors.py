from __future__ import annotations


class CatalogError(Exception):
    """Base class for catalog-related errors."""


class GameNotFoundError(CatalogError):
    """Raised when a write targets a game that does not exist."""


class InvalidGameError(CatalogError):
    """Raised when submitted game data cannot be accepted."""


class StoreError(CatalogError):
    """Base class for failures of the backing store."""


class StoreUnavailableError(StoreError):
    """Raised when the store is not configured or cannot be initialized."""


class StoreTransportError(StoreError):
    """Raised when a call to the store fails."""
