from uuid import UUID, uuid4

import pytest

from poolscore.api.models import (
    CreateGameRequest,
    CreatePlayerRequest,
    JoinGameRequest,
    RoundRequest,
    RoundResult,
    ScoreRequest,
    ScoreEntry,
    UndoResponse,
)
from poolscore.core.exceptions import InvalidRequestError


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


# -- Validation - CreatePlayerRequest --
def test_player_name_is_stripped() -> None:
    assert CreatePlayerRequest(name="  Efren  ").name == "Efren"


def test_blank_player_name() -> None:
    with pytest.raises(InvalidRequestError):
        _ = CreatePlayerRequest(name="   ")


# -- Validation - CreateGameRequest --
def test_players_are_optional() -> None:
    """The legacy shape carries no players at all."""
    request = CreateGameRequest(max_players=3, title="legacy")
    assert request.players is None
    assert request.max_players == 3


@pytest.mark.parametrize("count", [2, 5])
def test_valid_player_count(count: int) -> None:
    ids = [uuid4() for _ in range(count)]
    assert CreateGameRequest(players=ids).players == ids


@pytest.mark.parametrize("count", [0, 1, 6])
def test_invalid_player_count(count: int) -> None:
    with pytest.raises(InvalidRequestError):
        _ = CreateGameRequest(players=[uuid4() for _ in range(count)])


def test_duplicate_players(mock_id: UUID) -> None:
    with pytest.raises(InvalidRequestError):
        _ = CreateGameRequest(players=[mock_id, mock_id])


@pytest.mark.parametrize("max_players", [1, 6])
def test_max_players_out_of_range(max_players: int) -> None:
    with pytest.raises(InvalidRequestError):
        _ = CreateGameRequest(max_players=max_players)


def test_more_players_than_max_players() -> None:
    with pytest.raises(InvalidRequestError):
        _ = CreateGameRequest(max_players=2, players=[uuid4() for _ in range(3)])


# -- Validation - JoinGameRequest --
def test_join_by_name_or_id(mock_id: UUID) -> None:
    assert JoinGameRequest(name="Ann").name == "Ann"
    assert JoinGameRequest.model_validate({"playerId": str(mock_id)}).player_id == mock_id
    assert JoinGameRequest.model_validate({"player_id": str(mock_id)}).player_id == mock_id


@pytest.mark.parametrize("body", [{}, {"name": "Ann", "player_id": "0f8fad5b-d9cb-469f-a165-70867728950e"}])
def test_join_needs_exactly_one(body: dict) -> None:
    with pytest.raises(InvalidRequestError):
        _ = JoinGameRequest.model_validate(body)


# -- Validation - RoundRequest --
def test_round_accepts_camel_case(mock_id: UUID) -> None:
    request = RoundRequest.model_validate({"scores": [{"playerId": str(mock_id), "delta": -2}], "note": "foul"})
    assert request.scores == [ScoreEntry(player_id=mock_id, delta=-2)]
    assert request.note == "foul"


def test_empty_round() -> None:
    with pytest.raises(InvalidRequestError):
        _ = RoundRequest(scores=[])


@pytest.mark.parametrize("delta", [2**31, -(2**31) - 1, 10**20])
def test_delta_outside_column_range(mock_id: UUID, delta: int) -> None:
    with pytest.raises(InvalidRequestError, match="delta must be between"):
        _ = ScoreRequest(delta=delta)
    with pytest.raises(InvalidRequestError, match="delta must be between"):
        _ = ScoreEntry(player_id=mock_id, delta=delta)


def test_delta_at_column_bounds(mock_id: UUID) -> None:
    assert ScoreRequest(delta=2**31 - 1).delta == 2**31 - 1
    assert ScoreEntry(player_id=mock_id, delta=-(2**31)).delta == -(2**31)


# -- Serialisation --
def test_results_dump_camel_case(mock_id: UUID) -> None:
    assert RoundResult(player_id=mock_id, delta=3, new_score=9).model_dump(by_alias=True) == {
        "playerId": mock_id,
        "delta": 3,
        "newScore": 9,
    }
    assert UndoResponse(reverted=mock_id, player_id=mock_id, new_score=0).model_dump(by_alias=True) == {
        "reverted": mock_id,
        "playerId": mock_id,
        "newScore": 0,
    }
