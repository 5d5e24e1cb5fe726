"""Math generator game lifecycle: create, play, grade, edit, delete.

This is the calling layer around the pure document engine. It owns access
control (owner or admin for private operations, published flag for public
play), name uniqueness, thumbnails and persistence. Every check runs before
the single write an operation performs.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from app.core.config import settings as app_settings
from app.core.db.schemas.games import Game
from app.core.db_services import GameRepository
from app.core.exceptions import (
    GameConflict,
    GameForbidden,
    GameNotFound,
    InvalidGameSettings,
)
from app.core.file_storage import FileStorage
from app.core.logging import get_logger
from app.modules.games.generator import RandomSource
from app.modules.games.kinds import GameKind, MathGeneratorKind
from app.modules.games.models import (
    Actor,
    AnswerSubmission,
    CreateMathGame,
    GameDetailView,
    GamePlayView,
    GameSettings,
    GradeResult,
    Thumbnail,
    UpdateMathGame,
)


logger = get_logger(__name__)

THUMBNAIL_PREFIX = "game/math"


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class MathGeneratorService:
    def __init__(
        self,
        repository: GameRepository,
        storage: FileStorage,
        rng: Optional[RandomSource] = None,
        kind: Optional[GameKind] = None,
    ) -> None:
        self.repository = repository
        self.storage = storage
        self.rng = rng
        self.kind = kind or MathGeneratorKind()

    # Helpers ------------------------------------------------------------
    async def _load_game(self, game_id: str) -> Game:
        game = await self.repository.load(game_id)
        if not game or game.game_template.slug != self.kind.slug:
            raise GameNotFound("Game not found")
        return game

    @staticmethod
    def _ensure_can_manage(game: Game, actor: Actor, action: str) -> None:
        if not actor.is_admin and game.creator_id != actor.user_id:
            raise GameForbidden(f"You do not have permission to {action} this game")

    async def _ensure_name_available(self, name: str) -> None:
        if await self.repository.find_by_name(name):
            raise GameConflict("Game name already exists")

    @staticmethod
    def _check_question_count(count: Optional[int]) -> None:
        limit = app_settings.games.max_question_count
        if count is not None and count > limit:
            raise InvalidGameSettings(f"question_count may not exceed {limit}")

    # Authoring ----------------------------------------------------------
    async def create_game(
        self,
        data: CreateMathGame,
        actor: Actor,
        thumbnail: Optional[Thumbnail] = None,
    ) -> dict[str, Any]:
        self._check_question_count(data.question_count)
        await self._ensure_name_available(data.name)

        template = await self.repository.get_template(self.kind.slug)
        if not template:
            raise GameNotFound("Template not found. Run seed!")

        game_settings = GameSettings(
            operation=data.operation,
            difficulty=data.difficulty,
            game_type=data.game_type,
            theme=data.theme,
            question_count=data.question_count,
        )
        document = self.kind.generate(game_settings, data.score_per_question, self.rng)

        game_id = str(uuid4())
        thumbnail_path = ""
        if thumbnail:
            thumbnail_path = await self.storage.upload(
                f"{THUMBNAIL_PREFIX}/{game_id}", thumbnail.filename, thumbnail.content
            )

        game = Game(
            id=game_id,
            name=data.name,
            description=data.description,
            thumbnail_image=thumbnail_path,
            is_published=data.is_publish_immediately,
            creator_id=actor.user_id,
            game_template_id=template.id,
            game_json=self.kind.dump(document),
            total_played=0,
        )
        game.game_template = template
        await self.repository.save(game)
        logger.info(
            "Created game with %d questions",
            len(document.questions),
            extra={"game_id": game_id, "actor": actor.user_id},
        )
        return {
            "id": game_id,
            "game_template": {
                "id": template.id,
                "name": template.name,
                "slug": template.slug,
            },
        }

    # Play ---------------------------------------------------------------
    async def get_game_play(
        self, game_id: str, is_public: bool, actor: Optional[Actor] = None
    ) -> GamePlayView:
        game = await self._load_game(game_id)
        if is_public:
            if not game.is_published:
                raise GameForbidden("Game is not published")
        elif actor is None or (not actor.is_admin and game.creator_id != actor.user_id):
            raise GameForbidden("Access denied")

        document = self.kind.parse(game.game_json)
        return self.kind.project_play(game, document)

    async def check_answer(
        self, game_id: str, submission: AnswerSubmission
    ) -> GradeResult:
        game = await self._load_game(game_id)
        document = self.kind.parse(game.game_json)
        return self.kind.grade(document, submission.answers)

    async def record_play(self, game_id: str) -> dict[str, Any]:
        await self._load_game(game_id)
        total = await self.repository.increment_played(game_id)
        return {"id": game_id, "total_played": total}

    # Creator views --------------------------------------------------------
    async def get_game_detail(self, game_id: str, actor: Actor) -> GameDetailView:
        game = await self._load_game(game_id)
        self._ensure_can_manage(game, actor, "view")
        document = self.kind.parse(game.game_json)
        likes = await self.repository.count_likes(game_id)
        return self.kind.project_detail(game, document, likes)

    async def update_game(
        self,
        game_id: str,
        data: UpdateMathGame,
        actor: Actor,
        thumbnail: Optional[Thumbnail] = None,
    ) -> dict[str, Any]:
        game = await self._load_game(game_id)
        self._ensure_can_manage(game, actor, "update")
        self._check_question_count(data.question_count)

        if data.name is not None and data.name != game.name:
            await self._ensure_name_available(data.name)

        current = self.kind.parse(game.game_json)
        outcome = self.kind.reconcile(current, data.document_edit(), self.rng)
        logger.info(
            "Game edit resolved to %s",
            outcome.action.value,
            extra={"game_id": game_id, "actor": actor.user_id},
        )

        previous_thumbnail = game.thumbnail_image
        thumbnail_path = previous_thumbnail
        if thumbnail:
            thumbnail_path = await self.storage.upload(
                f"{THUMBNAIL_PREFIX}/{game_id}", thumbnail.filename, thumbnail.content
            )

        game.game_json = self.kind.dump(outcome.document)
        game.thumbnail_image = thumbnail_path
        game.updated_at = _now()
        if data.name is not None:
            game.name = data.name
        if data.description is not None:
            game.description = data.description
        if data.is_publish is not None:
            game.is_published = data.is_publish

        await self.repository.save(game)
        # Old file goes only once the new path is persisted
        if previous_thumbnail and previous_thumbnail != thumbnail_path:
            await self.storage.remove(previous_thumbnail)
        return {"id": game_id, "updated": True}

    async def delete_game(self, game_id: str, actor: Actor) -> dict[str, Any]:
        game = await self._load_game(game_id)
        self._ensure_can_manage(game, actor, "delete")

        if game.thumbnail_image:
            await self.storage.remove(game.thumbnail_image)

        await self.repository.delete(game_id)
        logger.info(
            "Deleted game", extra={"game_id": game_id, "actor": actor.user_id}
        )
        return {"id": game_id, "deleted": True}
