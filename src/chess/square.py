"""
Squares of the board, counted from 1: a1 = (1, 1), h8 = (8, 8)

Squares are plain coordinates. A square outside the board can exist (a player may ask for "i9"),
it just never holds a piece and never is a legal destination.
"""

from __future__ import annotations

from dataclasses import dataclass

# (files, ranks)
BOARD_DIMENSIONS = (8, 8)


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_wire(cls, file_letter: str, rank: int) -> Square:
        """Wire format keeps file and rank apart: {'file': 'e', 'rank': 4}"""
        return cls(ord(file_letter) - ord("a") + 1, rank)

    @classmethod
    def from_algebraic(cls, name: str) -> Square:
        """'e4' -> (5, 4). The rank may have more than one digit, so 'a10' stays recognizably off the board."""
        return cls.from_wire(name[0], int(name[1:]))

    @property
    def file_letter(self) -> str:
        return chr(ord("a") + self.file - 1)

    def to_algebraic(self) -> str:
        return self.file_letter + str(self.rank)

    def to_wire(self) -> dict[str, str | int]:
        return {"file": self.file_letter, "rank": self.rank}

    def is_within_bounds(self) -> bool:
        files, ranks = BOARD_DIMENSIONS
        return 1 <= self.file <= files and 1 <= self.rank <= ranks


ALL_SQUARES: tuple[Square, ...] = tuple(
    Square(file, rank)
    for rank in range(1, BOARD_DIMENSIONS[1] + 1)
    for file in range(1, BOARD_DIMENSIONS[0] + 1)
)
