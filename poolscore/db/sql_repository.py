"""Implementation of ScoreStore using SQLAlchemy"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from poolscore.core.exceptions import StoreError
from poolscore.core.models import GameModel, GamePlayerModel, PlayerModel, ScoreUpdateModel
from poolscore.db.schema import DBGame, DBGamePlayer, DBPlayer, DBScoreUpdate

logger = logging.getLogger(__name__)


class SQLScoreStore:
    """Data stored using SQL / methods implemented using SQLAlchemy.

    Each method runs in its own short-lived session and commits before returning.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    # --- games ---
    def list_games(self) -> list[GameModel]:
        with self._session() as db:
            query = select(DBGame).order_by(DBGame.created_at.desc())
            return [self._to_game(game_db) for game_db in db.scalars(query)]

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        with self._session() as db:
            game_db = db.get(DBGame, game_id)
            return self._to_game(game_db) if game_db else None

    def insert_game(self, title: Optional[str], max_players: Optional[int]) -> GameModel:
        with self._session() as db:
            game_db = DBGame(title=title, max_players=max_players)
            db.add(game_db)
            db.commit()
            db.refresh(game_db)
            return self._to_game(game_db)

    def update_game_status(self, game_id: UUID, status: str) -> GameModel | None:
        with self._session() as db:
            game_db = db.get(DBGame, game_id)
            if not game_db:
                return None
            game_db.status = str(status)
            db.commit()
            db.refresh(game_db)
            return self._to_game(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        with self._session() as db:
            game_db = db.get(DBGame, game_id)
            if not game_db:
                return None
            game_model = self._to_game(game_db)
            db.delete(game_db)
            db.commit()
            return game_model

    # --- roster ---
    def list_players(self) -> list[PlayerModel]:
        with self._session() as db:
            query = select(DBPlayer).order_by(DBPlayer.created_at)
            return [self._to_player(player_db) for player_db in db.scalars(query)]

    def get_players(self, player_ids: Sequence[UUID]) -> list[PlayerModel]:
        if not player_ids:
            return []
        with self._session() as db:
            query = select(DBPlayer).where(DBPlayer.id.in_(player_ids))
            return [self._to_player(player_db) for player_db in db.scalars(query)]

    def insert_player(self, name: str) -> PlayerModel:
        with self._session() as db:
            player_db = DBPlayer(name=name)
            db.add(player_db)
            db.commit()
            db.refresh(player_db)
            return self._to_player(player_db)

    def delete_player(self, player_id: UUID) -> PlayerModel | None:
        with self._session() as db:
            player_db = db.get(DBPlayer, player_id)
            if not player_db:
                return None
            player_model = self._to_player(player_db)
            db.delete(player_db)
            db.commit()
            return player_model

    # --- memberships ---
    def list_game_players(self, game_id: UUID) -> list[GamePlayerModel]:
        with self._session() as db:
            query = (
                select(DBGamePlayer, DBPlayer.name)
                .join(DBPlayer, DBPlayer.id == DBGamePlayer.player_id)
                .where(DBGamePlayer.game_id == game_id)
                .order_by(DBGamePlayer.seat)
            )
            return [self._to_game_player(member_db, name) for member_db, name in db.execute(query)]

    def get_game_player(self, game_id: UUID, player_id: UUID) -> GamePlayerModel | None:
        with self._session() as db:
            member_db = self._fetch_member(db, game_id, player_id)
            if not member_db:
                return None
            return self._to_game_player(member_db, self._player_name(db, player_id))

    def insert_game_player(self, game_id: UUID, player_id: UUID, seat: int) -> GamePlayerModel:
        with self._session() as db:
            member_db = DBGamePlayer(game_id=game_id, player_id=player_id, seat=seat, score=0)
            db.add(member_db)
            db.commit()
            db.refresh(member_db)
            return self._to_game_player(member_db, self._player_name(db, player_id))

    def update_game_player_score(self, game_id: UUID, player_id: UUID, score: int) -> GamePlayerModel | None:
        with self._session() as db:
            member_db = self._fetch_member(db, game_id, player_id)
            if not member_db:
                return None
            member_db.score = score
            db.commit()
            db.refresh(member_db)
            return self._to_game_player(member_db, self._player_name(db, player_id))

    def delete_game_players(self, game_id: UUID) -> int:
        with self._session() as db:
            result = db.execute(delete(DBGamePlayer).where(DBGamePlayer.game_id == game_id))
            db.commit()
            return result.rowcount

    # --- ledger ---
    def list_score_updates(self, game_id: UUID) -> list[ScoreUpdateModel]:
        with self._session() as db:
            query = (
                select(DBScoreUpdate)
                .where(DBScoreUpdate.game_id == game_id)
                .order_by(DBScoreUpdate.created_at, DBScoreUpdate.id)
            )
            return [self._to_score_update(update_db) for update_db in db.scalars(query)]

    def latest_score_update(self, game_id: UUID) -> ScoreUpdateModel | None:
        with self._session() as db:
            query = (
                select(DBScoreUpdate)
                .where(DBScoreUpdate.game_id == game_id)
                .order_by(DBScoreUpdate.created_at.desc(), DBScoreUpdate.id.desc())
                .limit(1)
            )
            update_db = db.scalar(query)
            return self._to_score_update(update_db) if update_db else None

    def insert_score_update(self, game_id: UUID, player_id: UUID, delta: int, note: Optional[str]) -> ScoreUpdateModel:
        with self._session() as db:
            update_db = DBScoreUpdate(game_id=game_id, player_id=player_id, delta=delta, note=note)
            db.add(update_db)
            db.commit()
            db.refresh(update_db)
            return self._to_score_update(update_db)

    def delete_score_update(self, update_id: UUID) -> ScoreUpdateModel | None:
        with self._session() as db:
            update_db = db.get(DBScoreUpdate, update_id)
            if not update_db:
                return None
            update_model = self._to_score_update(update_db)
            db.delete(update_db)
            db.commit()
            return update_model

    # -- Internal helpers --
    @contextmanager
    def _session(self) -> Iterator[Session]:
        """One unit of work. Any SQLAlchemy or driver overflow failure is rolled back and re-raised as StoreError."""
        db = self._session_factory()
        try:
            yield db
        except (SQLAlchemyError, OverflowError) as exc:
            db.rollback()
            logger.warning("Store call failed: %s", exc)
            raise StoreError(str(exc)) from exc
        finally:
            db.close()

    def _fetch_member(self, db: Session, game_id: UUID, player_id: UUID) -> DBGamePlayer | None:
        query = select(DBGamePlayer).where(
            DBGamePlayer.game_id == game_id, DBGamePlayer.player_id == player_id
        )
        return db.scalar(query)

    def _player_name(self, db: Session, player_id: UUID) -> str:
        return db.scalar(select(DBPlayer.name).where(DBPlayer.id == player_id)) or ""

    def _to_game(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            id=game_db.id,
            created_at=game_db.created_at,
            status=game_db.status,
            title=game_db.title,
            max_players=game_db.max_players,
        )

    def _to_player(self, player_db: DBPlayer) -> PlayerModel:
        return PlayerModel(id=player_db.id, name=player_db.name, created_at=player_db.created_at)

    def _to_game_player(self, member_db: DBGamePlayer, name: str) -> GamePlayerModel:
        return GamePlayerModel(
            id=member_db.id,
            game_id=member_db.game_id,
            player_id=member_db.player_id,
            name=name,
            seat=member_db.seat,
            score=member_db.score,
            created_at=member_db.created_at,
        )

    def _to_score_update(self, update_db: DBScoreUpdate) -> ScoreUpdateModel:
        return ScoreUpdateModel(
            id=update_db.id,
            game_id=update_db.game_id,
            player_id=update_db.player_id,
            delta=update_db.delta,
            created_at=update_db.created_at,
            note=update_db.note,
        )
