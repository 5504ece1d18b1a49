"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of the board game -->
passes this information to the service layer, which can then pass it onwards to the API layer.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.board import Board
from src.chess.moves import Move, MoveRecord
from src.chess.rules import MoveError, MoveVerdict, validate_move
from src.core.exceptions import GameStateError, IllegalMoveError
from src.core.models import GameModel
from src.core.shared_types import Color, GameResult, Status

logger = logging.getLogger(__name__)


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    turn: Color
    status: Status
    players: dict[Color, str]
    move_history: list[str] = field(default_factory=list)
    result: Optional[GameResult] = None
    in_check: Optional[Color] = None
    version: int = 0

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        try:
            status = Status(model.status)
            turn = Color(model.current_turn)
            result = GameResult(model.result) if model.result else None
            in_check = Color(model.in_check) if model.in_check else None
            players = {Color(color): name for color, name in model.registered_players.items()}
        except ValueError as error:
            raise GameStateError(f"Invalid stored game: {error}") from error

        # create the Game. Stored boards must be playable: one king per color, one piece per square
        board = Board.from_snapshot(model.board_state)
        board.assert_kings()

        return cls(
            board=board,
            turn=turn,
            status=status,
            players=players,
            move_history=list(model.move_history),
            result=result,
            in_check=in_check,
            version=model.version,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""

        return GameModel(
            board_state=self.board.to_snapshot(),
            current_turn=self.turn.value,
            status=self.status.value,
            registered_players={color.value: name for color, name in self.players.items()},
            move_history=list(self.move_history),
            result=self.result.value if self.result else None,
            in_check=self.in_check.value if self.in_check else None,
            version=self.version,
        )

    @classmethod
    def new_game(
        cls,
        white_player: str,
        black_player: Optional[str] = None,
        board: Optional[Board] = None,
    ) -> Self:
        """
        The creating player takes the white pieces. If the opponent is already known, the game starts right away.
        """
        board = board if board is not None else Board.starting_position()
        board.assert_kings()
        players = {Color.WHITE: white_player}
        if black_player is not None:
            if black_player == white_player:
                raise GameStateError("Cannot play against yourself.")
            players[Color.BLACK] = black_player
        status = Status.ACTIVE if black_player is not None else Status.WAITING
        return cls(board=board, turn=Color.WHITE, status=status, players=players)

    def register_player(self, player: str) -> None:
        """Registering the 2nd player to an open game"""
        if self.status != Status.WAITING or Color.BLACK in self.players:
            raise GameStateError(
                f"Cannot join this game. Game is not accepting new players. status: {self.status}"
            )
        if self.players.get(Color.WHITE) == player:
            raise GameStateError("Cannot join your own game.")

        self.players[Color.BLACK] = player
        self._change_status(Status.ACTIVE)

    def finish(self, result: GameResult) -> None:
        """The end of a game is decided outside the engine (resignation, agreement, ...). It only gets recorded here."""
        if self.status != Status.ACTIVE:
            raise GameStateError(f"Only a game in progress can be finished. status: {self.status}")
        self.result = result
        self._change_status(Status.FINISHED)

    def player_color(self, player: str) -> Optional[Color]:
        return next((color for color, name in self.players.items() if name == player), None)

    def validate_move(
        self,
        player: str,
        move: Move,
        *,
        check_king_safety: bool = True,
        pawn_double_push_checks_path: bool = False,
    ) -> MoveVerdict:
        """
        Read-only check of a move attempt
        -----

        1. The game is in progress
        2. The player is seated at this game
        3. It is their turn
        4. The move itself is legal (see src/chess/rules.py)
        """
        if self.status != Status.ACTIVE:
            return MoveVerdict.reject(MoveError.GAME_NOT_ACTIVE, "Game is not active")

        player_color = self.player_color(player)
        if player_color is None:
            return MoveVerdict.reject(
                MoveError.PLAYER_NOT_IN_GAME, "Player is not part of this game"
            )

        if player_color != self.turn:
            return MoveVerdict.reject(MoveError.NOT_YOUR_TURN, "Not your turn")

        return validate_move(
            self.board,
            move,
            player_color,
            check_king_safety=check_king_safety,
            pawn_double_push_checks_path=pawn_double_push_checks_path,
        )

    def make_move(
        self, player: str, move: Move, *, pawn_double_push_checks_path: bool = False
    ) -> MoveRecord:
        """
        Attempt to make a move
        -----

        1. validate the move (always including the king safety check)
        2. snapshot the move for the audit record (before the board changes)
        3. update the board (capture, has_moved, promotion)
        4. update the move history, the check flag and the turn

        Either all of it happens, or (on an illegal move) nothing changes and IllegalMoveError is raised.
        """
        verdict = self.validate_move(
            player,
            move,
            check_king_safety=True,
            pawn_double_push_checks_path=pawn_double_push_checks_path,
        )
        if not verdict.is_valid:
            assert verdict.error is not None
            logger.info(
                "Rejected move %s by %s: %s (%s)",
                move.to_uci(),
                player,
                verdict.error,
                verdict.reason,
            )
            raise IllegalMoveError(verdict.error, verdict.reason)

        # Store move info before update
        record = MoveRecord.from_move_and_board(move, self.board, player)

        # compute everything on the new board first, then commit in one go
        new_board = self.board.after_move(move)
        opponent = self.turn.opponent
        opponent_in_check = new_board.is_check(opponent)

        self.board = new_board
        self.move_history.append(record.notation)
        self.in_check = opponent if opponent_in_check else None
        self.turn = opponent

        logger.debug("Accepted move %s by %s", record.notation, player)
        return record

    # -- PRIVATE HELPERS ---
    def _change_status(self, new_status: Status) -> None:
        self.status = new_status
