"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, GameResult, PieceType, Status

PieceColor = str
PlayerName = str


class PositionModel(BaseModel):
    """Wire format of a square: a one-character lowercase file and an integer rank.

    NOTE: the bounds (a-h, 1-8) are a rule of the game and get checked by the engine, not here.
    """

    file: str
    rank: int

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        if not (len(value) == 1 and value.isalpha() and value.islower()):
            raise InvalidRequestError(
                f"Cannot interpret file: {value!r}. Expected a single lowercase letter."
            )
        return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    player_name: str
    opponent_name: Optional[str] = None


class JoinGameRequest(BaseModel):
    game_id: UUID
    player_name: str


class MoveRequest(BaseModel):
    """Used for both validating and making a move."""

    game_id: UUID
    player_name: str
    from_position: PositionModel
    to_position: PositionModel
    promotion_piece: Optional[PieceType] = None


class FinishGameRequest(BaseModel):
    game_id: UUID
    result: GameResult


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class PieceResponse(BaseModel):
    type: PieceType
    color: Color
    position: PositionModel
    has_moved: bool


class GameResponse(BaseModel):
    game_id: UUID
    players: dict[PieceColor, PlayerName]
    board_state: list[PieceResponse]
    current_turn: Color
    status: Status
    result: Optional[GameResult]
    in_check: Optional[Color]
    move_history: list[str]
    version: int


class ValidateMoveResponse(BaseModel):
    is_valid: bool
    error: Optional[str] = None
    reason: Optional[str] = None


class MoveRecordResponse(BaseModel):
    player: PlayerName
    from_position: PositionModel
    to_position: PositionModel
    piece_type: PieceType
    piece_color: Color
    captured_piece: Optional[PieceResponse]
    is_castling: bool
    is_en_passant: bool
    promotion_piece: Optional[PieceType]
    notation: str
