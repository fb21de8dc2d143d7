"""Protocol for the data store client.

Every method is a single read or a single write that either succeeds on its own or raises StoreError.
Calls cannot be grouped into one transaction; callers that need more than one write coordinate them with
poolscore.services.compensation.CompensationLog.
"""

from typing import Optional, Protocol, Sequence
from uuid import UUID

from poolscore.core.models import GameModel, GamePlayerModel, PlayerModel, ScoreUpdateModel


class ScoreStore(Protocol):
    """Query / mutation client over games, players, game_players and score_updates."""

    # --- games ---
    def list_games(self) -> list[GameModel]:
        """All games, newest first."""
        ...

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def insert_game(self, title: Optional[str], max_players: Optional[int]) -> GameModel:
        """Store a new pending game and return it."""
        ...

    def update_game_status(self, game_id: UUID, status: str) -> GameModel | None:
        """Change the status of an existing game."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record (memberships and ledger rows cascade)."""
        ...

    # --- roster ---
    def list_players(self) -> list[PlayerModel]:
        """All roster players, oldest first."""
        ...

    def get_players(self, player_ids: Sequence[UUID]) -> list[PlayerModel]:
        """Players matching any of the IDs. Unknown IDs are silently absent from the result."""
        ...

    def insert_player(self, name: str) -> PlayerModel:
        ...

    def delete_player(self, player_id: UUID) -> PlayerModel | None:
        ...

    # --- memberships ---
    def list_game_players(self, game_id: UUID) -> list[GamePlayerModel]:
        """Members of a game ordered by seat."""
        ...

    def get_game_player(self, game_id: UUID, player_id: UUID) -> GamePlayerModel | None:
        ...

    def insert_game_player(self, game_id: UUID, player_id: UUID, seat: int) -> GamePlayerModel:
        """Seat a player in a game with a score of 0."""
        ...

    def update_game_player_score(self, game_id: UUID, player_id: UUID, score: int) -> GamePlayerModel | None:
        ...

    def delete_game_players(self, game_id: UUID) -> int:
        """Remove every membership of a game, returning how many rows went."""
        ...

    # --- ledger ---
    def list_score_updates(self, game_id: UUID) -> list[ScoreUpdateModel]:
        """Ledger of a game, oldest first."""
        ...

    def latest_score_update(self, game_id: UUID) -> ScoreUpdateModel | None:
        ...

    def insert_score_update(self, game_id: UUID, player_id: UUID, delta: int, note: Optional[str]) -> ScoreUpdateModel:
        ...

    def delete_score_update(self, update_id: UUID) -> ScoreUpdateModel | None:
        ...
