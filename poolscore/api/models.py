"""Requests and Response models"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

from poolscore.core.exceptions import InvalidRequestError
from poolscore.core.shared_types import MAX_PLAYERS, MAX_SCORE, MIN_PLAYERS, MIN_SCORE


class CamelModel(BaseModel):
    """Serialised with camelCase keys (playerId, newScore), accepts both spellings as input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _require_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise InvalidRequestError("name required")
    return value


def _require_delta_in_range(value: int) -> int:
    if not MIN_SCORE <= value <= MAX_SCORE:
        raise InvalidRequestError(f"delta must be between {MIN_SCORE} and {MAX_SCORE}")
    return value


# --- REQUEST MODELS ---
class CreatePlayerRequest(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _require_name(value)


class CreateGameRequest(BaseModel):
    """Either an initial roster of 2..5 existing players, or the legacy `{max_players, title}` shape."""

    title: Optional[str] = None
    max_players: Optional[int] = None
    players: Optional[list[UUID]] = None

    @field_validator("max_players")
    @classmethod
    def validate_max_players(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and not MIN_PLAYERS <= value <= MAX_PLAYERS:
            raise InvalidRequestError(f"max_players must be {MIN_PLAYERS}..{MAX_PLAYERS}")
        return value

    @field_validator("players")
    @classmethod
    def validate_players(cls, value: Optional[list[UUID]]) -> Optional[list[UUID]]:
        if value is None:
            return value
        if not MIN_PLAYERS <= len(value) <= MAX_PLAYERS:
            raise InvalidRequestError(f"players must list {MIN_PLAYERS} to {MAX_PLAYERS} player ids")
        if len(set(value)) != len(value):
            raise InvalidRequestError("players must not contain duplicates")
        return value

    @model_validator(mode="after")
    def validate_roster_fits(self) -> "CreateGameRequest":
        if self.players is not None and self.max_players is not None and len(self.players) > self.max_players:
            raise InvalidRequestError("more players than max_players")
        return self


class JoinGameRequest(CamelModel):
    """Seat a new player by name, or an existing roster player by id."""

    name: Optional[str] = None
    player_id: Optional[UUID] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _require_name(value)

    @model_validator(mode="after")
    def validate_one_of(self) -> "JoinGameRequest":
        if (self.name is None) == (self.player_id is None):
            raise InvalidRequestError("either name or player_id required")
        return self


class ScoreRequest(BaseModel):
    delta: int
    note: Optional[str] = None

    @field_validator("delta")
    @classmethod
    def validate_delta(cls, value: int) -> int:
        return _require_delta_in_range(value)


class ScoreEntry(CamelModel):
    player_id: UUID
    delta: int

    @field_validator("delta")
    @classmethod
    def validate_delta(cls, value: int) -> int:
        return _require_delta_in_range(value)


class RoundRequest(BaseModel):
    scores: list[ScoreEntry]
    note: Optional[str] = None

    @field_validator("scores")
    @classmethod
    def validate_scores(cls, value: list[ScoreEntry]) -> list[ScoreEntry]:
        if not value:
            raise InvalidRequestError("scores must not be empty")
        return value


# --- RESPONSE MODELS ---
class PlayerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    created_at: datetime


class GamePlayerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    game_id: UUID
    player_id: UUID
    name: str
    seat: int
    score: int
    created_at: datetime


class ScoreUpdateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    game_id: UUID
    player_id: UUID
    delta: int
    created_at: datetime
    note: Optional[str]


class GameResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime
    status: str
    title: Optional[str]
    max_players: Optional[int]


class GameWithPlayersResponse(GameResponse):
    players: list[GamePlayerResponse]


class GameDetailResponse(BaseModel):
    game: GameResponse
    players: list[GamePlayerResponse]
    updates: list[ScoreUpdateResponse]


class ScoreResponse(CamelModel):
    player_id: UUID
    new_score: int


class RoundResult(CamelModel):
    player_id: UUID
    delta: int
    new_score: int


class RoundResponse(CamelModel):
    success: bool = True
    results: list[RoundResult]


class UndoResponse(CamelModel):
    reverted: UUID
    player_id: UUID
    new_score: int
