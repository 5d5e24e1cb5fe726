from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db.base import get_session
from app.core.db.schemas.auth import User
from app.core.db_services import GameService
from app.core.file_storage import file_storage
from app.modules.auth import actor_for, fastapi_users
from app.modules.games.models import Actor
from app.modules.games.service import MathGeneratorService


async def current_actor(
    user: User = Depends(fastapi_users.current_user(active=True)),
) -> Actor:
    return actor_for(user)


async def get_math_generator_service(
    session: AsyncSession = Depends(get_session),
) -> MathGeneratorService:
    return MathGeneratorService(GameService(session), file_storage)


CurrentActor = Annotated[Actor, Depends(current_actor)]
MathService = Annotated[MathGeneratorService, Depends(get_math_generator_service)]
