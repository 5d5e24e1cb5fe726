"""Player and creator views of a stored game.

Neither projection exposes per-question answers. Whether the caller may see
a projection at all is decided by the service layer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.modules.games.models import (
    GameDetailView,
    GamePlayView,
    MathGeneratorDocument,
    PlayQuestion,
)

if TYPE_CHECKING:
    from app.core.db.schemas.games import Game


def project_play(game: "Game", document: MathGeneratorDocument) -> GamePlayView:
    return GamePlayView(
        id=game.id,
        name=game.name,
        description=game.description,
        thumbnail_image=game.thumbnail_image or "",
        settings=document.settings,
        score_per_question=document.score_per_question,
        questions=[
            PlayQuestion(index=i, question=q.question, options=list(q.options))
            for i, q in enumerate(document.questions)
        ],
    )


def project_detail(
    game: "Game", document: MathGeneratorDocument, liked_by_count: int = 0
) -> GameDetailView:
    return GameDetailView(
        id=game.id,
        name=game.name,
        description=game.description,
        thumbnail_image=game.thumbnail_image or "",
        is_published=game.is_published,
        creator_id=game.creator_id,
        settings=document.settings,
        score_per_question=document.score_per_question,
        total_played=game.total_played or 0,
        liked_by_count=liked_by_count,
        created_at=game.created_at,
        updated_at=game.updated_at,
    )
