"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from dataclasses import asdict
from typing import Optional
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    FinishGameRequest,
    GameResponse,
    GetGameRequest,
    JoinGameRequest,
    MoveRecordResponse,
    MoveRequest,
    ValidateMoveResponse,
)
from src.chess.game import Game
from src.chess.moves import Move
from src.chess.rules import MoveError
from src.chess.square import Square
from src.core.config import Settings
from src.core.exceptions import IllegalMoveError, RepositoryError, StaleGameError
from src.core.models import GameModel, MoveRecordModel
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game.

    Every write states the version of the game it was computed from. When two moves for the same game
    race each other, the repository accepts the first and the second fails with StaleGameError.
    """

    def __init__(self, repository: GameRepository, settings: Optional[Settings] = None) -> None:
        self.repo = repository
        self.settings = settings or Settings()

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """First player requested to create a new game."""

        # Use info in CreateGameRequest to create a new Game, and convert into GameModel
        new_game = Game.new_game(
            white_player=request.player_name, black_player=request.opponent_name
        )
        created_game_data = new_game.to_model()

        # Store the GameModel in the repository
        stored_game, game_id = self.repo.create_game(created_game_data)
        logger.info("Created game %s for %s", game_id, request.player_name)

        # Return a GameResponse
        return self._create_game_response(game_id, stored_game)

    def join_game(self, request: JoinGameRequest) -> GameResponse:
        """Second player requested to join a game."""

        # Retrieve persisted GameModel from repository
        stored_model = self._fetch_game(request.game_id)

        # Create a new Game instance from the retrieved GameModel
        game = Game.from_model(stored_model)

        # Register the requested player
        game.register_player(request.player_name)

        # store in repository (and return a GameResponse)
        return self._store(request.game_id, game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def validate_move(self, request: MoveRequest) -> ValidateMoveResponse:
        """Check a move without playing it. Nothing gets stored."""
        stored_model = self.repo.get_game(request.game_id)
        if stored_model is None:
            return ValidateMoveResponse(
                is_valid=False, error=MoveError.GAME_NOT_ACTIVE, reason="Game not found"
            )

        game = Game.from_model(stored_model)
        verdict = game.validate_move(
            request.player_name,
            self._build_move(request),
            check_king_safety=self.settings.validate_checks_king_safety,
            pawn_double_push_checks_path=self.settings.pawn_double_push_checks_path,
        )
        return ValidateMoveResponse(
            is_valid=verdict.is_valid, error=verdict.error, reason=verdict.reason
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt."""

        # Retrieve persisted GameModel from repository
        stored_model = self.repo.get_game(request.game_id)
        if stored_model is None:
            raise IllegalMoveError(MoveError.GAME_NOT_ACTIVE, "Game not found")

        # Create a new Game instance from the retrieved GameModel
        game = Game.from_model(stored_model)

        # Attempt the move
        record = game.make_move(
            request.player_name,
            self._build_move(request),
            pawn_double_push_checks_path=self.settings.pawn_double_push_checks_path,
        )

        # store in repository, together with the audit record
        return self._store(request.game_id, game, move_record=record.to_model())

    def finish_game(self, request: FinishGameRequest) -> GameResponse:
        """The outcome was decided elsewhere (resignation, agreement, timeout, ...). Record it."""
        game = Game.from_model(self._fetch_game(request.game_id))
        game.finish(request.result)
        return self._store(request.game_id, game)

    def move_records(self, request: GetGameRequest) -> list[MoveRecordResponse]:
        """Detailed audit log of the moves played."""
        self._fetch_game(request.game_id)
        return [
            MoveRecordResponse.model_validate(asdict(record))
            for record in self.repo.list_move_records(request.game_id)
        ]

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _build_move(self, request: MoveRequest) -> Move:
        return Move(
            from_square=Square.from_wire(request.from_position.file, request.from_position.rank),
            to_square=Square.from_wire(request.to_position.file, request.to_position.rank),
            promote_to=request.promotion_piece,
        )

    def _store(
        self, game_id: UUID, game: Game, move_record: Optional[MoveRecordModel] = None
    ) -> GameResponse:
        """Write back with the version the game was read at."""
        try:
            stored = self.repo.update_game(
                game_id, game.to_model(), expected_version=game.version, move_record=move_record
            )
        except StaleGameError:
            logger.warning("Discarded outdated update of game %s", game_id)
            raise
        if stored is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return self._create_game_response(game_id, stored)

    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        return GameResponse(
            game_id=game_id,
            players=model.registered_players,
            board_state=model.board_state,
            current_turn=model.current_turn,
            status=model.status,
            result=model.result,
            in_check=model.in_check,
            move_history=model.move_history,
            version=model.version,
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
