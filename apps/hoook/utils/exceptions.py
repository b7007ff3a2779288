"""
Exception types shared by the services and the API layer.
"""


class GameNotFoundError(ValueError):
    """Raised by strict lookups when a game id is not in the collection."""


class GameValidationError(ValueError):
    """Raised when a game creation request breaks a hosting constraint."""


class MapFetchError(Exception):
    """The map data source failed for a venues/games request."""


class MapFetchTimeoutError(MapFetchError):
    """The map data source did not answer within the configured timeout."""


class AuthError(Exception):
    """Identity provider failure with a message fit to show the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
