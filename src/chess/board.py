"""The Game board implements all rules that effect the `position` (in chess: the configuration of pieces on the board)"""

from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Optional, Self

from src.chess.moves import Move, attacks_square
from src.chess.pieces import Piece
from src.chess.square import ALL_SQUARES, BOARD_DIMENSIONS, Square
from src.core.exceptions import InvalidBoardError
from src.core.shared_types import Color, PieceType

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


@dataclass
class Board:
    """
    Every square of the board is a key of `position`: either holding a piece or None.
    Hence a lookup is a single dict access, and two pieces can never share a square.
    """

    position: dict[Square, Optional[Piece]]

    @classmethod
    def empty(cls) -> Self:
        return cls({square: None for square in ALL_SQUARES})

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.

        NOTE: FEN does not know whether a piece has moved. All pieces get has_moved=False.
        """
        board = cls.empty()
        fen_by_ranks = fen_str.split("/")
        if len(fen_by_ranks) != BOARD_DIMENSIONS[1]:
            raise InvalidBoardError(f"Expected {BOARD_DIMENSIONS[1]} ranks in {fen_str!r}")
        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = BOARD_DIMENSIONS[1] - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 1
            for character in fen_one_rank:
                if character.isalpha():
                    board.place_piece(Piece.from_fen(character), Square(file, rank))
                    file += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1], 0, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(1, BOARD_DIMENSIONS[0] + 1):
            piece = self.piece(Square(file, rank))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    @classmethod
    def from_snapshot(cls, pieces: list[dict[str, Any]]) -> Self:
        """Build the board from the stored list of pieces. Refuses stacked or off-board pieces."""
        board = cls.empty()
        for data in pieces:
            try:
                piece, square = Piece.from_snapshot(data)
            except (KeyError, ValueError) as error:
                raise InvalidBoardError(f"Cannot read stored piece {data!r}") from error
            board.place_piece(piece, square)
        return board

    def to_snapshot(self) -> list[dict[str, Any]]:
        return [
            piece.to_snapshot(square)
            for square, piece in self.position.items()
            if piece is not None
        ]

    # --- LOOKUP ---
    def piece(self, square: Square) -> Optional[Piece]:
        """None for an empty square, or a square that is not on the board at all."""
        return self.position.get(square)

    def is_occupied(self, square: Square) -> bool:
        return self.piece(square) is not None

    def pieces(self) -> list[tuple[Square, Piece]]:
        return [(square, piece) for square, piece in self.position.items() if piece is not None]

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Square]:
        return [
            square
            for square, piece in self.pieces()
            if piece.type == piece_type and piece.color == color
        ]

    def locate_color(self, color: Color) -> list[Square]:
        return [square for square, piece in self.pieces() if piece.color == color]

    def find_king(self, color: Color) -> Square:
        kings = self.locate_pieces(PieceType.KING, color)
        if len(kings) != 1:
            raise InvalidBoardError(
                f"Expected exactly one {color} king on the board, found {len(kings)}."
            )
        return kings[0]

    def assert_kings(self) -> None:
        """A playable board has exactly one king per color."""
        for color in Color:
            self.find_king(color)

    # --- UPDATES ---
    def place_piece(self, piece: Piece, square: Square) -> None:
        if square not in self.position:
            raise InvalidBoardError(f"Square {square} is not on the board.")
        if self.position[square] is not None:
            raise InvalidBoardError(
                f"Cannot place {piece.color} {piece.type} on {square.to_algebraic()}: square is occupied."
            )
        self.position[square] = piece

    def remove_piece(self, square: Square) -> Optional[Piece]:
        removed = self.position.get(square)
        if square in self.position:
            self.position[square] = None
        return removed

    def move_piece(self, move: Move) -> Optional[Piece]:
        """
        Update the position on the board. Returns the captured piece (if any).

        The moving piece is marked as moved, and promoted if the move asks for it.
        """
        piece_that_moved = self.remove_piece(move.from_square)
        if piece_that_moved is None:
            raise InvalidBoardError(f"No piece on {move.from_square.to_algebraic()} to move.")
        captured = self.remove_piece(move.to_square)
        piece_that_moved.has_moved = True
        if move.promote_to is not None:
            piece_that_moved.promote_to(move.promote_to)
        self.position[move.to_square] = piece_that_moved
        return captured

    def after_move(self, move: Move) -> Self:
        """Scratch copy of the board with the move applied. The board itself is left untouched."""
        board = deepcopy(self)
        board.move_piece(move)
        return board

    # --- CHECK DETECTION ---
    def is_square_attacked(self, square: Square, by_color: Color) -> bool:
        return any(
            attacks_square(piece, from_square, square, self)
            for from_square, piece in self.pieces()
            if piece.color == by_color
        )

    def is_check(self, color: Color) -> bool:
        """Is the king of the given color attacked by any of the opponent's pieces?"""
        king_square = self.find_king(color)
        return self.is_square_attacked(king_square, color.opponent)
