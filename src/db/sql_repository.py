"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from src.core.exceptions import StaleGameError
from src.core.models import GameModel, MoveRecordModel
from src.db.schema import DBGame, DBMove

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(
            id=new_id,
            board_state=game.board_state,
            current_turn=game.current_turn,
            status=game.status,
            result=game.result,
            in_check=game.in_check,
            move_history=game.move_history,
            registered_players=game.registered_players,
            version=game.version,
        )
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def update_game(
        self,
        game_id: UUID,
        game: GameModel,
        expected_version: int,
        move_record: Optional[MoveRecordModel] = None,
    ) -> GameModel | None:
        """
        Compare-and-swap: a single UPDATE guarded by the version that was read.
        If another writer got there first, no row matches and nothing gets stored.
        """
        query = (
            update(DBGame)
            .where(DBGame.id == game_id, DBGame.version == expected_version)
            .values(
                board_state=game.board_state,
                current_turn=game.current_turn,
                status=game.status,
                result=game.result,
                in_check=game.in_check,
                move_history=game.move_history,
                registered_players=game.registered_players,
                version=expected_version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(query)
        if result.rowcount == 0:
            self.db.rollback()
            if self._fetch_game(game_id) is None:
                return None
            logger.warning("Version conflict on game %s (expected version %d)", game_id, expected_version)
            raise StaleGameError(
                f"Game with {game_id=} changed since version {expected_version}. Reload and try again."
            )

        if move_record is not None:
            self.db.add(self._to_db_move(game_id, move_record))
        self.db.commit()

        game_db = self._fetch_game(game_id)
        assert game_db is not None
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record (and its move log)."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        for move_db in self.db.scalars(select(DBMove).where(DBMove.game_id == game_id)):
            self.db.delete(move_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def list_move_records(self, game_id: UUID) -> list[MoveRecordModel]:
        query = select(DBMove).where(DBMove.game_id == game_id).order_by(DBMove.id)
        return [self._to_record_model(move_db) for move_db in self.db.scalars(query)]

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            board_state=game_db.board_state,
            current_turn=game_db.current_turn,
            status=game_db.status,
            registered_players=game_db.registered_players,
            move_history=game_db.move_history,
            result=game_db.result,
            in_check=game_db.in_check,
            version=game_db.version,
        )

    def _to_db_move(self, game_id: UUID, record: MoveRecordModel) -> DBMove:
        return DBMove(
            game_id=game_id,
            player=record.player,
            from_position=record.from_position,
            to_position=record.to_position,
            piece_type=record.piece_type,
            piece_color=record.piece_color,
            captured_piece=record.captured_piece,
            is_castling=record.is_castling,
            is_en_passant=record.is_en_passant,
            promotion_piece=record.promotion_piece,
            notation=record.notation,
        )

    def _to_record_model(self, move_db: DBMove) -> MoveRecordModel:
        return MoveRecordModel(
            player=move_db.player,
            from_position=move_db.from_position,
            to_position=move_db.to_position,
            piece_type=move_db.piece_type,
            piece_color=move_db.piece_color,
            captured_piece=move_db.captured_piece,
            is_castling=move_db.is_castling,
            is_en_passant=move_db.is_en_passant,
            promotion_piece=move_db.promotion_piece,
            notation=move_db.notation,
        )
