"""
Move legality
----

Combines the movement rules of src/chess/moves.py into a single verdict on a proposed move.
The checks run in a fixed order, and the first one failing decides the error reported back to the player.

Validation never changes the board and never raises for an illegal move: the answer is a MoveVerdict.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, Self

from src.chess.board import Board
from src.chess.moves import (
    PROMOTION_OPTIONS,
    SHAPE_ERRORS,
    SLIDING_PIECES,
    Move,
    check_pawn_move,
    is_double_push,
    is_path_blocked,
    is_promotion_move,
    shape_legal,
)
from src.chess.pieces import Piece
from src.core.shared_types import Color, PieceType


class MoveError(StrEnum):
    GAME_NOT_ACTIVE = "GameNotActive"
    PLAYER_NOT_IN_GAME = "PlayerNotInGame"
    NOT_YOUR_TURN = "NotYourTurn"
    NO_PIECE_AT_SOURCE = "NoPieceAtSource"
    CANNOT_MOVE_OPPONENT_PIECE = "CannotMoveOpponentPiece"
    INVALID_DESTINATION = "InvalidDestination"
    INVALID_MOVE = "InvalidMove"
    CANNOT_CAPTURE_OWN_PIECE = "CannotCaptureOwnPiece"
    PATH_BLOCKED = "PathBlocked"
    PROMOTION_REQUIRED = "PromotionRequired"
    PROMOTION_NOT_ALLOWED = "PromotionNotAllowed"
    MOVE_LEAVES_KING_IN_CHECK = "MoveLeavesKingInCheck"


@dataclass(frozen=True)
class MoveVerdict:
    is_valid: bool
    error: Optional[MoveError] = None
    reason: Optional[str] = None

    @classmethod
    def accept(cls) -> Self:
        return cls(is_valid=True)

    @classmethod
    def reject(cls, error: MoveError, reason: str) -> Self:
        return cls(is_valid=False, error=error, reason=reason)


def validate_move(
    board: Board,
    move: Move,
    color: Color,
    *,
    check_king_safety: bool = True,
    pawn_double_push_checks_path: bool = False,
) -> MoveVerdict:
    """
    Can the player with the `color` pieces make this move on this board?
    ----

    (whether the game is running, the player is seated and it is their turn is the Game's business)

    1. There is a piece on the starting square
    2. ... and it is yours
    3. The target square is on the board
    4. The piece can move like that (shape / pawn rules)
    5. You are not taking your own piece
    6. Sliding pieces are not jumping over anything
    7. Pawns reaching the back rank say what they promote into (and nothing else promotes)
    8. Your own king is not (left) in check after the move. Skipped when check_king_safety is False.

    ----
    pawn_double_push_checks_path: also reject a double push over an occupied square.
    Off by default: the double push has historically only looked at the target square.
    """
    piece = board.piece(move.from_square)
    if piece is None:
        return MoveVerdict.reject(MoveError.NO_PIECE_AT_SOURCE, "No piece at source position")

    if piece.color != color:
        return MoveVerdict.reject(
            MoveError.CANNOT_MOVE_OPPONENT_PIECE, "Cannot move opponent's piece"
        )

    if not move.to_square.is_within_bounds():
        return MoveVerdict.reject(MoveError.INVALID_DESTINATION, "Invalid destination position")

    shape_error = _shape_error(piece.type, color, move, board)
    if shape_error is not None:
        return MoveVerdict.reject(MoveError.INVALID_MOVE, shape_error)

    target = board.piece(move.to_square)
    if target is not None and target.color == color:
        return MoveVerdict.reject(
            MoveError.CANNOT_CAPTURE_OWN_PIECE, "Cannot capture your own piece"
        )

    if _is_blocked(piece.type, move, board) or (
        pawn_double_push_checks_path
        and is_double_push(piece, move)
        and is_path_blocked(move.from_square, move.to_square, board)
    ):
        return MoveVerdict.reject(MoveError.PATH_BLOCKED, "Path is blocked")

    promotion_verdict = _promotion_verdict(piece, move)
    if promotion_verdict is not None:
        return promotion_verdict

    if check_king_safety and board.after_move(move).is_check(color):
        return MoveVerdict.reject(
            MoveError.MOVE_LEAVES_KING_IN_CHECK, "Move would leave king in check"
        )

    return MoveVerdict.accept()


def _shape_error(piece_type: PieceType, color: Color, move: Move, board: Board) -> Optional[str]:
    if piece_type == PieceType.PAWN:
        return check_pawn_move(color, move.from_square, move.to_square, board)
    if not shape_legal(piece_type, move.from_square, move.to_square):
        return SHAPE_ERRORS[piece_type]
    return None


def _is_blocked(piece_type: PieceType, move: Move, board: Board) -> bool:
    """Knights jump, kings and pawns only take single steps (see above for the pawn double push)."""
    if piece_type not in SLIDING_PIECES:
        return False
    return is_path_blocked(move.from_square, move.to_square, board)


def _promotion_verdict(piece: Piece, move: Move) -> Optional[MoveVerdict]:
    reaches_back_rank = is_promotion_move(piece, move.to_square)
    if move.promote_to is not None:
        if piece.type != PieceType.PAWN:
            return MoveVerdict.reject(MoveError.PROMOTION_NOT_ALLOWED, "Only pawns can be promoted")
        if not reaches_back_rank:
            return MoveVerdict.reject(
                MoveError.PROMOTION_NOT_ALLOWED, "Promotion only allowed on back rank"
            )
        if move.promote_to not in PROMOTION_OPTIONS:
            return MoveVerdict.reject(
                MoveError.PROMOTION_NOT_ALLOWED, f"Cannot promote to a {move.promote_to}"
            )
    elif reaches_back_rank:
        return MoveVerdict.reject(MoveError.PROMOTION_REQUIRED, "Promotion piece required")
    return None
