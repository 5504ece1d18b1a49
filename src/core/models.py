"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Any, Optional

# Type aliases to make GameModel easier to read
PieceColor = str
PlayerName = str
PieceData = dict[str, Any]
PositionData = dict[str, Any]


@dataclass
class GameModel:
    """Transport-safe representation of a chess game used between API, Service, DB, and Game layers.

    board_state holds one entry per piece: {"type", "color", "position": {"file", "rank"}, "has_moved"}
    version increases by one with every stored change, so writers can detect they worked on an outdated copy.
    """

    board_state: list[PieceData]
    current_turn: str
    status: str
    registered_players: dict[PieceColor, PlayerName]
    move_history: list[str] = field(default_factory=list)
    result: Optional[str] = None
    in_check: Optional[str] = None
    version: int = 0


@dataclass
class MoveRecordModel:
    """Audit entry of a single accepted move."""

    player: PlayerName
    from_position: PositionData
    to_position: PositionData
    piece_type: str
    piece_color: str
    captured_piece: Optional[PieceData]
    is_castling: bool
    is_en_passant: bool
    promotion_piece: Optional[str]
    notation: str
