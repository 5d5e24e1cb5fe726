from __future__ import annotations

from typing import TYPE_CHECKING
from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fastapi_users_db_sqlalchemy import SQLAlchemyBaseUserTable

from app.core.db.base import Base

if TYPE_CHECKING:
    from .games import Game


class User(SQLAlchemyBaseUserTable[int], Base):
    """Account row; ``is_superuser`` grants the admin role over all games."""

    __tablename__ = "users"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    games: Mapped[list["Game"]] = relationship(
        "Game", back_populates="creator", cascade="all, delete-orphan"
    )


__all__ = ["User"]
