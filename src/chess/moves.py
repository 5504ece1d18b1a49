"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the movement shape for each piece type.
Pawns are irregular enough (color, start rank, occupancy) to get their own rule.


Legality (ownership, turn, promotion, king safety) is checked later by src/chess/rules.py
"""

from copy import deepcopy
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.chess.pieces import FEN_TO_PIECE, PIECE_TO_FEN, Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.models import MoveRecordModel
from src.core.shared_types import Color, PieceType


class Board(Protocol):
    """Just the parts the movement rules need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def is_occupied(self, square: Square) -> bool: ...


Vector = tuple[int, int]


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made (the move intent of a player)"""

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceType] = None

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface:
        ---
        One of the standard chess notations for moves

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        """
        from_sq = Square.from_algebraic(uci[:2])
        to_sq = Square.from_algebraic(uci[2:4])
        promote_to = FEN_TO_PIECE[uci[4]] if len(uci) == 5 else None
        return cls(from_sq, to_sq, promote_to)

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        piece_char = PIECE_TO_FEN[self.promote_to] if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"


def displacement(from_square: Square, to_square: Square) -> Vector:
    """(delta file, delta rank)"""
    return to_square.file - from_square.file, to_square.rank - from_square.rank


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


# --- MOVEMENT GEOMETRY ---
def rook_shape(df: int, dr: int) -> bool:
    """Rooks move either horizontally or vertically"""
    return (df == 0) != (dr == 0)


def bishop_shape(df: int, dr: int) -> bool:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return df != 0 and abs(df) == abs(dr)


def queen_shape(df: int, dr: int) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return rook_shape(df, dr) or bishop_shape(df, dr)


def knight_shape(df: int, dr: int) -> bool:
    """Knights always move such that |delta_rank| + |delta_file| = 3 (and neither is zero)"""
    return (abs(df), abs(dr)) in ((1, 2), (2, 1))


def king_shape(df: int, dr: int) -> bool:
    """The king can move by a single square at the time."""
    return max(abs(df), abs(dr)) == 1


# -- STRATEGY PATTERN: MOVEMENT SHAPES ---
ShapeFn = Callable[[int, int], bool]
SHAPE_RULES: dict[PieceType, ShapeFn] = {
    PieceType.KNIGHT: knight_shape,
    PieceType.BISHOP: bishop_shape,
    PieceType.ROOK: rook_shape,
    PieceType.QUEEN: queen_shape,
    PieceType.KING: king_shape,
}

SHAPE_ERRORS: dict[PieceType, str] = {
    PieceType.KNIGHT: "Knight must move in L-shape",
    PieceType.BISHOP: "Bishop can only move diagonally",
    PieceType.ROOK: "Rook can only move horizontally or vertically",
    PieceType.QUEEN: "Queen can move horizontally, vertically, or diagonally",
    PieceType.KING: "King can only move one square",
}

SLIDING_PIECES: frozenset[PieceType] = frozenset(
    {PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN}
)


def shape_legal(piece_type: PieceType, from_square: Square, to_square: Square) -> bool:
    """Does the displacement match the movement pattern of the piece? Occupancy is ignored."""
    if piece_type == PieceType.PAWN:
        raise ValueError(
            "Pawn moves depend on color and occupancy. Use check_pawn_move() instead."
        )
    df, dr = displacement(from_square, to_square)
    return SHAPE_RULES[piece_type](df, dr)


# --- PAWN RULES ---
# Pawn pushes : Black moves down the board, White moves up the board
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: -1}
PAWN_START_RANK: dict[Color, int] = {Color.WHITE: 2, Color.BLACK: BOARD_DIMENSIONS[1] - 1}
PROMOTION_RANK: dict[Color, int] = {Color.WHITE: BOARD_DIMENSIONS[1], Color.BLACK: 1}

PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
]


def check_pawn_move(
    color: Color, from_square: Square, to_square: Square, board: Board
) -> Optional[str]:
    """
    A pawn:
    - moves by a single square forward (onto an empty square).
    - It can move by two in their first move (so when on their starting rank)
    - takes diagonally, and only when there is a piece to take (no en passant)

    Returns None if the move is allowed, otherwise the reason why not.

    NOTE: The square jumped over by a double push is not checked here (see rules.py).
    NOTE: Taking your own piece diagonally passes here, and is rejected by the own-capture rule afterwards.
    """
    df, dr = displacement(from_square, to_square)
    direction = PAWN_DIRECTION[color]

    if dr != 0 and _sign(dr) != direction:
        return "Pawn cannot move backwards"

    if df == 0:
        single_push = dr == direction
        double_push = dr == 2 * direction and from_square.rank == PAWN_START_RANK[color]
        if not (single_push or double_push):
            return "Invalid pawn forward movement"
        if board.is_occupied(to_square):
            return "Pawn cannot capture moving forward"
        return None

    if abs(df) == 1 and dr == direction:
        if not board.is_occupied(to_square):
            return "Pawn can only move diagonally to capture"
        return None

    return "Invalid pawn movement"


def is_double_push(piece: Piece, move: Move) -> bool:
    df, dr = displacement(move.from_square, move.to_square)
    return (
        piece.type == PieceType.PAWN
        and df == 0
        and dr == 2 * PAWN_DIRECTION[piece.color]
    )


def is_promotion_move(piece: Piece, to_square: Square) -> bool:
    """check if the move is a pawn move that reaches the opponent's back rank"""
    return piece.type == PieceType.PAWN and to_square.rank == PROMOTION_RANK[piece.color]


# --- PATH OBSTRUCTION ---
def squares_between(from_square: Square, to_square: Square) -> list[Square]:
    """
    Find the squares strictly in between the two squares specified.

    Only defined for squares on a shared rank, file, or diagonal.
    """
    df, dr = displacement(from_square, to_square)
    if not (df == 0 or dr == 0 or abs(df) == abs(dr)):
        raise ValueError(
            f"squares_between requires both squares to lie on a line. \n from: {from_square}\n to:{to_square}"
        )

    step_file, step_rank = _sign(df), _sign(dr)
    squares_found: list[Square] = []
    square = Square(from_square.file + step_file, from_square.rank + step_rank)
    while square != to_square and (step_file or step_rank):
        squares_found.append(square)
        square = Square(square.file + step_file, square.rank + step_rank)
    return squares_found


def is_path_blocked(from_square: Square, to_square: Square, board: Board) -> bool:
    """A sliding piece cannot jump: any piece in between blocks the move."""
    return any(board.is_occupied(square) for square in squares_between(from_square, to_square))


# --- ATTACKING RULES ---
def attacks_square(piece: Piece, from_square: Square, target: Square, board: Board) -> bool:
    """
    Could the piece standing on from_square capture a piece standing on target?

    NOTE: Pawn moves are not symmetric. A pawn only ever attacks the two squares diagonally in front of it.
    """
    if piece.type == PieceType.PAWN:
        df, dr = displacement(from_square, target)
        return abs(df) == 1 and dr == PAWN_DIRECTION[piece.color]

    if not shape_legal(piece.type, from_square, target):
        return False

    if piece.type in SLIDING_PIECES:
        return not is_path_blocked(from_square, target, board)
    return True


# --- NOTATION ---
NOTATION_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}


def move_notation(piece_type: PieceType, move: Move, is_capture: bool) -> str:
    """
    Token stored in the move history: <piece letter><from><x if capture><to>

    ex) "e2e4", "Nb1c3", "Qd1xd7". Not SAN: the source square is always written out.
    """
    capture = "x" if is_capture else ""
    return (
        f"{NOTATION_LETTERS[piece_type]}{move.from_square.to_algebraic()}"
        f"{capture}{move.to_square.to_algebraic()}"
    )


@dataclass(frozen=True)
class MoveRecord:
    """Snapshot of an accepted move, taken before the board gets updated."""

    move: Move
    player: str
    moving_piece: Piece
    captured_piece: Optional[Piece]
    notation: str
    # Castling and en passant are not supported: the flags only keep the shape of the audit record
    is_castling: bool = False
    is_en_passant: bool = False

    @classmethod
    def from_move_and_board(cls, move: Move, board: Board, player: str) -> Self:
        moving_piece = board.piece(move.from_square)
        if moving_piece is None:
            raise ValueError(f"No piece on {move.from_square.to_algebraic()} to record.")
        captured_piece = board.piece(move.to_square)
        return cls(
            move=move,
            player=player,
            moving_piece=deepcopy(moving_piece),
            captured_piece=deepcopy(captured_piece),
            notation=move_notation(moving_piece.type, move, captured_piece is not None),
        )

    @property
    def promotion_piece(self) -> Optional[PieceType]:
        return self.move.promote_to

    def to_model(self) -> MoveRecordModel:
        captured = (
            self.captured_piece.to_snapshot(self.move.to_square)
            if self.captured_piece is not None
            else None
        )
        return MoveRecordModel(
            player=self.player,
            from_position=self.move.from_square.to_wire(),
            to_position=self.move.to_square.to_wire(),
            piece_type=self.moving_piece.type.value,
            piece_color=self.moving_piece.color.value,
            captured_piece=captured,
            is_castling=self.is_castling,
            is_en_passant=self.is_en_passant,
            promotion_piece=self.promotion_piece.value if self.promotion_piece else None,
            notation=self.notation,
        )
