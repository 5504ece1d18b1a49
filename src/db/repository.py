"""Protocol repository (can implement later for SQL Alchemy / simple Excel table etc.)"""

from typing import Optional, Protocol
from uuid import UUID

from src.core.models import GameModel, MoveRecordModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(
        self,
        game_id: UUID,
        game: GameModel,
        expected_version: int,
        move_record: Optional[MoveRecordModel] = None,
    ) -> GameModel | None:
        """
        Overwrite an existing record, only if it is still at `expected_version` (raise StaleGameError otherwise).
        The stored version is bumped by one. The move record (if given) is stored in the same transaction.
        Returns None if the record does not exist.
        """
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        ...

    def list_move_records(self, game_id: UUID) -> list[MoveRecordModel]:
        """Audit log of a game, in the order the moves were played."""
        ...
