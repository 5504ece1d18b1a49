"""Defines the types of chess pieces"""

from dataclasses import dataclass
from typing import Any, Self

from src.chess.square import Square
from src.core.shared_types import Color, PieceType

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}


@dataclass
class Piece:
    type: PieceType
    color: Color
    has_moved: bool = False

    @classmethod
    def from_fen(cls, character: str) -> Self:
        """FEN board letters: uppercase for white, lowercase for black"""
        color = Color.WHITE if character.isupper() else Color.BLACK
        return cls(FEN_TO_PIECE[character.lower()], color)

    def to_fen(self) -> str:
        letter = PIECE_TO_FEN[self.type]
        return letter.upper() if self.color == Color.WHITE else letter

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> tuple[Self, Square]:
        """Parse one entry of a stored board. Returns the piece together with the square it stands on."""
        piece = cls(
            type=PieceType(data["type"]),
            color=Color(data["color"]),
            has_moved=bool(data.get("has_moved", False)),
        )
        position = data["position"]
        return piece, Square.from_wire(position["file"], int(position["rank"]))

    def to_snapshot(self, square: Square) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "color": self.color.value,
            "position": square.to_wire(),
            "has_moved": self.has_moved,
        }

    def promote_to(self, new_type: PieceType) -> None:
        self.type = new_type
