"""HTTP routes. Handlers only map requests onto ScoreService calls; errors are translated in poolscore/main.py."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from poolscore.api.deps import get_service
from poolscore.api.models import (
    CreateGameRequest,
    CreatePlayerRequest,
    GameDetailResponse,
    GamePlayerResponse,
    GameResponse,
    GameWithPlayersResponse,
    JoinGameRequest,
    PlayerResponse,
    RoundRequest,
    RoundResponse,
    ScoreRequest,
    ScoreResponse,
    UndoResponse,
)
from poolscore.services.score_service import ScoreService

router = APIRouter()


@router.get("/health", tags=["system"])
def health() -> dict[str, str]:
    return {"status": "ok"}


# --- roster ---
@router.get("/players", response_model=list[PlayerResponse], tags=["players"])
def list_players(service: ScoreService = Depends(get_service)):
    return service.list_players()


@router.post("/players", response_model=PlayerResponse, status_code=status.HTTP_201_CREATED, tags=["players"])
def create_player(payload: CreatePlayerRequest, service: ScoreService = Depends(get_service)):
    return service.create_player(payload)


# --- games ---
@router.get("/games", response_model=list[GameWithPlayersResponse], tags=["games"])
def list_games(service: ScoreService = Depends(get_service)):
    return service.list_games()


@router.post("/games", response_model=GameWithPlayersResponse, status_code=status.HTTP_201_CREATED, tags=["games"])
def create_game(payload: CreateGameRequest, service: ScoreService = Depends(get_service)):
    return service.create_game(payload)


@router.get("/games/{game_id}", response_model=GameDetailResponse, tags=["games"])
def get_game(game_id: UUID, service: ScoreService = Depends(get_service)):
    return service.get_game(game_id)


@router.post("/games/{game_id}/start", response_model=GameResponse, tags=["games"])
def start_game(game_id: UUID, service: ScoreService = Depends(get_service)):
    return service.start_game(game_id)


@router.post(
    "/games/{game_id}/players",
    response_model=GamePlayerResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["games"],
)
def join_game(game_id: UUID, payload: JoinGameRequest, service: ScoreService = Depends(get_service)):
    return service.join_game(game_id, payload)


# --- scores ---
@router.post("/games/{game_id}/players/{player_id}/score", response_model=ScoreResponse, tags=["scores"])
def apply_score(
    game_id: UUID, player_id: UUID, payload: ScoreRequest, service: ScoreService = Depends(get_service)
):
    return service.apply_score(game_id, player_id, payload)


@router.post("/games/{game_id}/round", response_model=RoundResponse, tags=["scores"])
def apply_round(game_id: UUID, payload: RoundRequest, service: ScoreService = Depends(get_service)):
    return service.apply_round(game_id, payload)


@router.post("/games/{game_id}/undo", response_model=UndoResponse, tags=["scores"])
def undo_last_update(game_id: UUID, service: ScoreService = Depends(get_service)):
    return service.undo_last_update(game_id)
