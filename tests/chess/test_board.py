"""Unit tests for /src/chess/board.py"""

from typing import Callable

import pytest

from src.chess.board import STARTING_POSITION, Board, Color, Move, Square
from src.chess.pieces import Piece, PieceType
from src.core.exceptions import InvalidBoardError

EMPTY_FEN = "/".join(["8"] * 8)


@pytest.fixture
def board_with_single_piece() -> Callable[[PieceType, Color, str], Board]:
    """Call the inner function that will be returned with the desired piece type, color, and square"""

    def _create_board(piece_type: PieceType, color: Color, square_name: str = "d4") -> Board:
        board = Board.empty()
        board.place_piece(Piece(piece_type, color), Square.from_algebraic(square_name))
        return board

    return _create_board


# --- CREATION / ENCODING ---
def test_empty_board_has_every_square() -> None:
    board = Board.empty()
    assert len(board.position) == 64
    assert board.pieces() == []
    assert board.to_fen() == EMPTY_FEN


def test_starting_position() -> None:
    board = Board.starting_position()
    assert board.to_fen() == STARTING_POSITION
    assert len(board.pieces()) == 32
    assert board.piece(Square.from_algebraic("e1")) == Piece(PieceType.KING, Color.WHITE)
    assert board.piece(Square.from_algebraic("d8")) == Piece(PieceType.QUEEN, Color.BLACK)
    assert len(board.locate_pieces(PieceType.PAWN, Color.WHITE)) == 8
    assert all(square.rank == 7 for square in board.locate_pieces(PieceType.PAWN, Color.BLACK))
    assert not any(piece.has_moved for _, piece in board.pieces())


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_POSITION,
        EMPTY_FEN,
        "r3k2r/pppq1ppp/2npbn2/4p3/2B1P3/2NP1N2/PPP2PPP/R1BQ1RK1",
        "8/8/8/3P4/8/8/8/8",
    ],
)
def test_fen_roundtrip(fen: str) -> None:
    assert Board.from_fen(fen).to_fen() == fen


def test_fen_with_wrong_number_of_ranks() -> None:
    with pytest.raises(InvalidBoardError):
        Board.from_fen("8/8/8")


def test_snapshot_roundtrip() -> None:
    board = Board.starting_position()
    board.move_piece(Move.from_uci("g1f3"))
    restored = Board.from_snapshot(board.to_snapshot())
    assert restored == board
    assert restored.piece(Square.from_algebraic("f3")).has_moved


def test_snapshot_with_two_pieces_on_one_square() -> None:
    """At most one piece per square: a stacked snapshot is refused loudly"""
    pieces = [
        {"type": "rook", "color": "white", "position": {"file": "a", "rank": 1}, "has_moved": False},
        {"type": "knight", "color": "black", "position": {"file": "a", "rank": 1}, "has_moved": False},
    ]
    with pytest.raises(InvalidBoardError):
        Board.from_snapshot(pieces)


def test_snapshot_with_piece_off_the_board() -> None:
    pieces = [{"type": "rook", "color": "white", "position": {"file": "i", "rank": 1}, "has_moved": False}]
    with pytest.raises(InvalidBoardError):
        Board.from_snapshot(pieces)


# --- LOOKUP ---
def test_lookup(board_with_single_piece: Callable[[PieceType, Color, str], Board]) -> None:
    board = board_with_single_piece(PieceType.BISHOP, Color.BLACK, "c5")
    c5 = Square.from_algebraic("c5")
    assert board.piece(c5) == Piece(PieceType.BISHOP, Color.BLACK)
    assert board.is_occupied(c5)
    assert not board.is_occupied(Square.from_algebraic("c4"))
    assert board.locate_color(Color.BLACK) == [c5]
    assert board.locate_color(Color.WHITE) == []


def test_lookup_off_the_board() -> None:
    """Asking for a square that does not exist is simply empty"""
    board = Board.starting_position()
    assert board.piece(Square(9, 1)) is None
    assert not board.is_occupied(Square(0, 0))


@pytest.mark.parametrize("piece_type", list(PieceType))
def test_place_piece_on_occupied_square(piece_type: PieceType, board_with_single_piece) -> None:
    board = board_with_single_piece(PieceType.PAWN, Color.WHITE, "d4")
    with pytest.raises(InvalidBoardError):
        board.place_piece(Piece(piece_type, Color.BLACK), Square.from_algebraic("d4"))


# --- KINGS ---
def test_find_king() -> None:
    board = Board.starting_position()
    assert board.find_king(Color.WHITE) == Square.from_algebraic("e1")
    assert board.find_king(Color.BLACK) == Square.from_algebraic("e8")
    board.assert_kings()


@pytest.mark.parametrize(
    "fen",
    [
        EMPTY_FEN,  # no kings at all
        "4k3/8/8/8/8/8/8/8",  # white king missing
        "4k3/8/8/8/8/8/8/3KK3",  # two white kings
    ],
)
def test_missing_or_extra_kings(fen: str) -> None:
    board = Board.from_fen(fen)
    with pytest.raises(InvalidBoardError):
        board.assert_kings()
    with pytest.raises(InvalidBoardError):
        board.is_check(Color.WHITE)


# --- MOVING PIECES ---
def test_move_piece() -> None:
    board = Board.starting_position()
    captured = board.move_piece(Move.from_uci("e2e4"))
    assert captured is None
    assert board.piece(Square.from_algebraic("e2")) is None
    assert board.piece(Square.from_algebraic("e4")) == Piece(PieceType.PAWN, Color.WHITE, has_moved=True)


def test_move_piece_with_capture() -> None:
    board = Board.from_fen("8/8/8/3p4/8/8/8/3Q4")
    captured = board.move_piece(Move.from_uci("d1d5"))
    assert captured == Piece(PieceType.PAWN, Color.BLACK)
    assert board.piece(Square.from_algebraic("d5")).type == PieceType.QUEEN
    assert len(board.pieces()) == 1


def test_move_piece_with_promotion() -> None:
    board = Board.from_fen("8/4P3/8/8/8/8/8/8")
    board.move_piece(Move.from_uci("e7e8n"))
    assert board.piece(Square.from_algebraic("e8")) == Piece(PieceType.KNIGHT, Color.WHITE, has_moved=True)


def test_move_from_empty_square() -> None:
    with pytest.raises(InvalidBoardError):
        Board.from_fen(EMPTY_FEN).move_piece(Move.from_uci("a1a2"))


def test_after_move_leaves_board_untouched() -> None:
    board = Board.starting_position()
    new_board = board.after_move(Move.from_uci("e2e4"))
    assert board.to_fen() == STARTING_POSITION
    assert not board.piece(Square.from_algebraic("e2")).has_moved
    assert new_board.to_fen() == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR"


# --- CHECK DETECTION ---
def test_no_check_in_starting_position() -> None:
    board = Board.starting_position()
    assert not board.is_check(Color.WHITE)
    assert not board.is_check(Color.BLACK)


@pytest.mark.parametrize(
    "fen, color, expected",
    [
        ("4k3/8/8/8/8/8/8/4R1K1", Color.BLACK, True),  # rook on the e-file
        ("4k3/8/8/8/B7/8/8/6K1", Color.BLACK, True),  # bishop on a4, diagonal a4-e8
        ("4k3/8/8/8/Q7/8/8/6K1", Color.BLACK, True),  # queen on a4, same diagonal
        ("4k3/8/8/8/8/8/8/Q5K1", Color.BLACK, False),  # queen on a1, not on a line with e8
        ("4k3/8/3N4/8/8/8/8/6K1", Color.BLACK, True),  # knight on d6
        ("4k3/3P4/8/8/8/8/8/6K1", Color.BLACK, True),  # pawn on d7
        ("4k3/8/8/8/8/8/5p2/4K3", Color.WHITE, True),  # black pawn on f2
        ("4k3/8/8/8/8/8/8/r3K3", Color.WHITE, True),  # black rook on the first rank
        ("4k3/8/8/8/8/8/8/4K3", Color.WHITE, False),  # kings only
    ],
)
def test_check_by_each_piece_type(fen: str, color: Color, expected: bool) -> None:
    board = Board.from_fen(fen)
    assert board.is_check(color) == expected


def test_check_is_blocked_by_any_piece() -> None:
    # rook on e1 aims at the king on e8, but a pawn on e4 is in between (of either color)
    assert not Board.from_fen("4k3/8/8/8/4P3/8/8/4R1K1").is_check(Color.BLACK)
    assert not Board.from_fen("4k3/8/8/8/4p3/8/8/4R1K1").is_check(Color.BLACK)


def test_pawn_in_front_of_king_gives_no_check() -> None:
    """Pawns only attack diagonally"""
    assert not Board.from_fen("4k3/4P3/8/8/8/8/8/6K1").is_check(Color.BLACK)
    # a pawn behind the king (moving away from it) does not attack it either
    assert not Board.from_fen("8/8/8/3P4/4k3/8/8/6K1").is_check(Color.BLACK)


def test_own_pieces_give_no_check() -> None:
    assert not Board.from_fen("4k2r/8/8/8/8/8/8/6K1").is_check(Color.BLACK)


def test_is_square_attacked() -> None:
    board = Board.starting_position()
    assert board.is_square_attacked(Square.from_algebraic("f3"), Color.WHITE)
    assert not board.is_square_attacked(Square.from_algebraic("e4"), Color.WHITE)
    assert board.is_square_attacked(Square.from_algebraic("f6"), Color.BLACK)


@pytest.mark.parametrize(
    "data",
    [
        {"type": "dragon", "color": "white", "position": {"file": "a", "rank": 1}, "has_moved": False},
        {"type": "rook", "color": "white", "has_moved": False},
    ],
)
def test_snapshot_with_unreadable_piece(data: dict) -> None:
    with pytest.raises(InvalidBoardError):
        Board.from_snapshot([data])
