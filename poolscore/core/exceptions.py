"""Custom exceptions shared by all layers.

The API layer maps each of these onto an HTTP status (see poolscore/main.py).
"""


class ScoreKeeperError(Exception):
    """Base class for every error raised on purpose by poolscore."""


class InvalidRequestError(ScoreKeeperError):
    """Malformed or out-of-range input. Nothing has been written."""


class NoUpdatesError(InvalidRequestError):
    """Undo requested for a game without any recorded score update."""

    def __init__(self, message: str = "no updates") -> None:
        super().__init__(message)


class NotFoundError(ScoreKeeperError):
    """Referenced game, player or score update does not exist."""


class StoreError(ScoreKeeperError):
    """A call to the underlying data store failed."""


class StoreNotConfiguredError(StoreError):
    """The data store credentials are missing from the environment."""

    def __init__(self, message: str = "store is not configured") -> None:
        super().__init__(message)
