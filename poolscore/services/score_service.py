"""Orchestration of communication from API router to the data store (and the reverse direction)."""

import logging
from dataclasses import asdict
from functools import partial
from uuid import UUID

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
    RoundResult,
    ScoreEntry,
    ScoreRequest,
    ScoreResponse,
    ScoreUpdateResponse,
    UndoResponse,
)
from poolscore.core.exceptions import InvalidRequestError, NotFoundError, NoUpdatesError
from poolscore.core.models import GameModel, GamePlayerModel
from poolscore.core.shared_types import MAX_PLAYERS, MIN_PLAYERS, Status
from poolscore.db.repository import ScoreStore
from poolscore.services.compensation import CompensationLog

logger = logging.getLogger(__name__)


class ScoreService:
    """Orchestration of layers for score keeping.

    Multi-step writes go through a CompensationLog: the store commits every call on its own, so a failure halfway
    is undone step by step instead of by a transaction.

    NOTE reads and writes of a member's score are not guarded against concurrent requests. Two rounds (or two undos)
    on the same game at the same time can lose an update.
    """

    def __init__(self, store: ScoreStore) -> None:
        self.store = store

    # -- Roster --
    def list_players(self) -> list[PlayerResponse]:
        return [PlayerResponse.model_validate(player) for player in self.store.list_players()]

    def create_player(self, request: CreatePlayerRequest) -> PlayerResponse:
        player = self.store.insert_player(request.name)
        logger.info("Created player %s (%s)", player.id, player.name)
        return PlayerResponse.model_validate(player)

    # -- Games --
    def list_games(self) -> list[GameWithPlayersResponse]:
        """Newest game first, each with its members in seat order."""
        return [
            self._game_with_players(game, self.store.list_game_players(game.id))
            for game in self.store.list_games()
        ]

    def create_game(self, request: CreateGameRequest) -> GameWithPlayersResponse:
        """Create a game, seating the listed roster players in order.

        Without a player list this is the legacy flow: an empty pending game that players join one by one.
        """
        if request.players is None:
            game = self.store.insert_game(request.title, request.max_players)
            logger.info("Created game %s without players", game.id)
            return self._game_with_players(game, [])

        # All players must exist before anything is written
        found = self.store.get_players(request.players)
        if len(found) != len(request.players):
            known = {player.id for player in found}
            missing = ", ".join(str(pid) for pid in request.players if pid not in known)
            raise InvalidRequestError(f"Unknown player id(s): {missing}")

        with CompensationLog("create game") as undo:
            game = self.store.insert_game(request.title, request.max_players)
            # runs in reverse: memberships first, then the game itself
            undo.record(f"delete game {game.id}", partial(self.store.delete_game, game.id))
            undo.record(f"delete members of game {game.id}", partial(self.store.delete_game_players, game.id))

            members = [
                self.store.insert_game_player(game.id, player_id, seat)
                for seat, player_id in enumerate(request.players, start=1)
            ]

        logger.info("Created game %s with %d players", game.id, len(members))
        return self._game_with_players(game, members)

    def get_game(self, game_id: UUID) -> GameDetailResponse:
        """Game with its members (by seat) and full score history (oldest first)."""
        game = self._fetch_game(game_id)
        return GameDetailResponse(
            game=GameResponse.model_validate(game),
            players=[GamePlayerResponse.model_validate(m) for m in self.store.list_game_players(game_id)],
            updates=[ScoreUpdateResponse.model_validate(u) for u in self.store.list_score_updates(game_id)],
        )

    def start_game(self, game_id: UUID) -> GameResponse:
        self._fetch_game(game_id)
        if len(self.store.list_game_players(game_id)) < MIN_PLAYERS:
            raise InvalidRequestError(f"A game needs at least {MIN_PLAYERS} players to start")

        game = self.store.update_game_status(game_id, Status.STARTED)
        if game is None:
            raise NotFoundError(f"Game with {game_id=} not found.")
        logger.info("Started game %s", game_id)
        return GameResponse.model_validate(game)

    def join_game(self, game_id: UUID, request: JoinGameRequest) -> GamePlayerResponse:
        """Seat a player at the next free seat. A name creates a new roster player first."""
        game = self._fetch_game(game_id)
        members = self.store.list_game_players(game_id)
        seat = len(members) + 1
        if seat > (game.max_players or MAX_PLAYERS):
            raise InvalidRequestError("Max players exceeded")

        if request.player_id is not None:
            if not self.store.get_players([request.player_id]):
                raise NotFoundError(f"Player with player_id={request.player_id} not found.")
            if any(member.player_id == request.player_id for member in members):
                raise InvalidRequestError("Player already seated in this game")

        with CompensationLog(f"join game {game_id}") as undo:
            player_id = request.player_id
            if player_id is None:
                player = self.store.insert_player(request.name)
                undo.record(f"delete player {player.id}", partial(self.store.delete_player, player.id))
                player_id = player.id
            member = self.store.insert_game_player(game_id, player_id, seat)

        logger.info("Player %s joined game %s at seat %d", player_id, game_id, seat)
        return GamePlayerResponse.model_validate(member)

    # -- Scores --
    def apply_score(self, game_id: UUID, player_id: UUID, request: ScoreRequest) -> ScoreResponse:
        """Single delta for one member: a round of one."""
        round_request = RoundRequest(
            scores=[ScoreEntry(player_id=player_id, delta=request.delta)], note=request.note
        )
        result = self.apply_round(game_id, round_request).results[0]
        return ScoreResponse(player_id=result.player_id, new_score=result.new_score)

    def apply_round(self, game_id: UUID, request: RoundRequest) -> RoundResponse:
        """Record one ledger row and apply one delta per entry, in order.

        If any step fails, the ledger rows written so far are deleted and the applied deltas reverted.
        """
        self._fetch_game(game_id)
        member_ids = {member.player_id for member in self.store.list_game_players(game_id)}
        strangers = [str(entry.player_id) for entry in request.scores if entry.player_id not in member_ids]
        if strangers:
            raise InvalidRequestError(f"Not a player of this game: {', '.join(strangers)}")

        results: list[RoundResult] = []
        with CompensationLog(f"round for game {game_id}") as undo:
            for entry in request.scores:
                update = self.store.insert_score_update(game_id, entry.player_id, entry.delta, request.note)
                undo.record(f"delete score update {update.id}", partial(self.store.delete_score_update, update.id))

                new_score = self._shift_score(game_id, entry.player_id, entry.delta)
                undo.record(
                    f"revert {entry.delta:+d} for player {entry.player_id}",
                    partial(self._shift_score, game_id, entry.player_id, -entry.delta),
                )
                results.append(RoundResult(player_id=entry.player_id, delta=entry.delta, new_score=new_score))

        logger.info("Applied round of %d score update(s) to game %s", len(results), game_id)
        return RoundResponse(results=results)

    def undo_last_update(self, game_id: UUID) -> UndoResponse:
        """Revert the most recent score update of a game and drop it from the ledger.

        NOTE if deleting the ledger row fails after the score was reverted, the row stays behind.
        """
        self._fetch_game(game_id)
        last = self.store.latest_score_update(game_id)
        if last is None:
            raise NoUpdatesError()

        new_score = self._shift_score(game_id, last.player_id, -last.delta)
        self.store.delete_score_update(last.id)
        logger.info("Reverted score update %s (%+d for player %s)", last.id, last.delta, last.player_id)
        return UndoResponse(reverted=last.id, player_id=last.player_id, new_score=new_score)

    # -- Internal helpers --
    def _shift_score(self, game_id: UUID, player_id: UUID, delta: int) -> int:
        """Re-read a member's score, add delta, write it back. Returns the new score."""
        member = self.store.get_game_player(game_id, player_id)
        if member is None:
            raise NotFoundError(f"Player with {player_id=} is not part of game {game_id}.")
        updated = self.store.update_game_player_score(game_id, player_id, member.score + delta)
        if updated is None:
            raise NotFoundError(f"Player with {player_id=} is not part of game {game_id}.")
        return updated.score

    def _game_with_players(self, game: GameModel, members: list[GamePlayerModel]) -> GameWithPlayersResponse:
        return GameWithPlayersResponse(
            **asdict(game), players=[GamePlayerResponse.model_validate(m) for m in members]
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the store and raise error if it fails."""
        game = self.store.get_game(game_id)
        if game is None:
            raise NotFoundError(f"Game with {game_id=} not found.")
        return game
