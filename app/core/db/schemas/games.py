from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    JSON,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.db.base import Base

if TYPE_CHECKING:
    from .auth import User


class GameTemplate(Base):
    __tablename__ = "game_templates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    slug: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)

    games: Mapped[list["Game"]] = relationship("Game", back_populates="game_template")


class Game(Base):
    __tablename__ = "games"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    thumbnail_image: Mapped[str] = mapped_column(String, nullable=False, default="")
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    creator_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    game_template_id: Mapped[int] = mapped_column(
        ForeignKey("game_templates.id"), nullable=False, index=True
    )
    # Opaque document owned by the template's game kind
    game_json: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    total_played: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    creator: Mapped["User"] = relationship("User", back_populates="games")
    game_template: Mapped["GameTemplate"] = relationship(
        "GameTemplate", back_populates="games", lazy="joined"
    )
    liked: Mapped[list["GameLike"]] = relationship(
        "GameLike", back_populates="game", cascade="all, delete-orphan"
    )


class GameLike(Base):
    __tablename__ = "game_likes"
    __table_args__ = (UniqueConstraint("game_id", "user_id", name="uq_game_like"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    game_id: Mapped[str] = mapped_column(
        ForeignKey("games.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    game: Mapped["Game"] = relationship("Game", back_populates="liked")


__all__ = ["GameTemplate", "Game", "GameLike"]
