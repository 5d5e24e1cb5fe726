"""Database service classes for game persistence."""

from __future__ import annotations

from typing import Optional, Protocol

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db.schemas.games import Game, GameLike, GameTemplate


class GameRepository(Protocol):
    """Persistence operations the games service relies on."""

    async def load(self, game_id: str) -> Optional[Game]: ...

    async def find_by_name(self, name: str) -> Optional[Game]: ...

    async def get_template(self, slug: str) -> Optional[GameTemplate]: ...

    async def count_likes(self, game_id: str) -> int: ...

    async def save(self, game: Game) -> Game: ...

    async def delete(self, game_id: str) -> None: ...

    async def increment_played(self, game_id: str) -> Optional[int]: ...


class GameService:
    """SQLAlchemy-backed game persistence; last writer wins on concurrent saves."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def load(self, game_id: str) -> Optional[Game]:
        result = await self.session.execute(select(Game).where(Game.id == game_id))
        return result.scalar_one_or_none()

    async def find_by_name(self, name: str) -> Optional[Game]:
        result = await self.session.execute(select(Game).where(Game.name == name))
        return result.scalar_one_or_none()

    async def get_template(self, slug: str) -> Optional[GameTemplate]:
        result = await self.session.execute(
            select(GameTemplate).where(GameTemplate.slug == slug)
        )
        return result.scalar_one_or_none()

    async def count_likes(self, game_id: str) -> int:
        result = await self.session.execute(
            select(func.count(GameLike.id)).where(GameLike.game_id == game_id)
        )
        return result.scalar() or 0

    async def save(self, game: Game) -> Game:
        self.session.add(game)
        await self.session.commit()
        await self.session.refresh(game)
        return game

    async def delete(self, game_id: str) -> None:
        await self.session.execute(delete(Game).where(Game.id == game_id))
        await self.session.commit()

    async def increment_played(self, game_id: str) -> Optional[int]:
        result = await self.session.execute(
            update(Game)
            .where(Game.id == game_id)
            .values(total_played=Game.total_played + 1)
            .returning(Game.total_played)
        )
        total = result.scalar_one_or_none()
        await self.session.commit()
        return total

    async def ensure_template(self, slug: str, name: str) -> GameTemplate:
        template = await self.get_template(slug)
        if template:
            return template
        template = GameTemplate(slug=slug, name=name)
        self.session.add(template)
        await self.session.commit()
        await self.session.refresh(template)
        return template
