"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import JSON, ForeignKey
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    board_state: Mapped[list[dict[str, Any]]] = mapped_column(JSON)
    current_turn: Mapped[str]
    status: Mapped[str]
    result: Mapped[Optional[str]]
    in_check: Mapped[Optional[str]]
    move_history: Mapped[list[str]] = mapped_column(JSON, default=list)
    registered_players: Mapped[dict[str, str]] = mapped_column(JSON)
    # Bumped on every write. Writers state the version they read (compare-and-swap).
    version: Mapped[int] = mapped_column(default=0)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)


class DBMove(Base):
    """Audit log: one row per accepted move."""

    __tablename__ = "moves"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    game_id: Mapped[UUID] = mapped_column(ForeignKey("games.id", ondelete="CASCADE"))
    player: Mapped[str]
    from_position: Mapped[dict[str, Any]] = mapped_column(JSON)
    to_position: Mapped[dict[str, Any]] = mapped_column(JSON)
    piece_type: Mapped[str]
    piece_color: Mapped[str]
    captured_piece: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    is_castling: Mapped[bool] = mapped_column(default=False)
    is_en_passant: Mapped[bool] = mapped_column(default=False)
    promotion_piece: Mapped[Optional[str]]
    notation: Mapped[str]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
