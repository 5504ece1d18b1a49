"""Centralized application configuration.

Settings are read from environment variables prefixed with CHESS_ (or a .env.chess file).
Nothing is required: the defaults give a local SQLite database and the reference move rules.
"""

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CHESS_",
        env_file=".env.chess",
        env_file_encoding="utf-8",
    )

    # Persistence
    database_url: str = "sqlite:///chess.db"
    echo_sql: bool = False

    # Logging
    log_level: str = "INFO"

    # Move rules
    # Run the "does not leave your own king in check" veto when only validating (not making) a move
    validate_checks_king_safety: bool = True
    # Reject a pawn double push when the square it jumps over is occupied
    pawn_double_push_checks_path: bool = False


def configure_logging(settings: Settings) -> None:
    """Call once at application start."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
