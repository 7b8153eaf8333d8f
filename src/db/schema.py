"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBMatch(Base):
    __tablename__ = "matches"
    id: Mapped[str] = mapped_column(primary_key=True)
    # GameState in its wire format (GameState.to_dict())
    state: Mapped[dict[str, Any]] = mapped_column(JSON)
    game_status: Mapped[str]
    winner: Mapped[Optional[str]]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
