"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and db layer (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass
class GameModel:
    """One scored play session."""

    id: UUID
    created_at: datetime
    status: str
    title: Optional[str] = None
    max_players: Optional[int] = None


@dataclass
class PlayerModel:
    """Roster entry, reusable across games."""

    id: UUID
    name: str
    created_at: datetime


@dataclass
class GamePlayerModel:
    """A player's seat and running score within one game.

    `name` is not stored on the membership row, it is joined from the roster when read.
    """

    id: UUID
    game_id: UUID
    player_id: UUID
    name: str
    seat: int
    score: int
    created_at: datetime


@dataclass
class ScoreUpdateModel:
    """Ledger row: one signed delta applied to one member of a game."""

    id: UUID
    game_id: UUID
    player_id: UUID
    delta: int
    created_at: datetime
    note: Optional[str] = None
