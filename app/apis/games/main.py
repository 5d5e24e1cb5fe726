from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from app.core.config import settings
from app.apis.deps import CurrentActor, MathService
from app.apis.games.schemas import (
    CreateGameResponse,
    DeleteGameResponse,
    PlayCountResponse,
    UpdateGameResponse,
)
from app.modules.games.models import (
    AnswerSubmission,
    CreateMathGame,
    Difficulty,
    GameDetailView,
    GamePlayView,
    GradeResult,
    Operation,
    Thumbnail,
    UpdateMathGame,
)


router = APIRouter()

BASE = f"/{settings.app.version}/game/game-type/math-generator"


async def _read_thumbnail(upload: UploadFile) -> Thumbnail:
    if upload.content_type and not upload.content_type.startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Thumbnail must be an image",
        )
    content = await upload.read()
    if len(content) > settings.games.max_thumbnail_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Thumbnail too large",
        )
    return Thumbnail(filename=upload.filename or "thumbnail", content=content)


def _create_form(
    name: str = Form(...),
    operation: Operation = Form(...),
    difficulty: Difficulty = Form(...),
    question_count: int = Form(...),
    description: Optional[str] = Form(None),
    is_publish_immediately: bool = Form(False),
    game_type: str = Form("multiple_choice"),
    theme: str = Form("default"),
    score_per_question: float = Form(1),
) -> CreateMathGame:
    try:
        return CreateMathGame(
            name=name,
            description=description,
            is_publish_immediately=is_publish_immediately,
            operation=operation,
            difficulty=difficulty,
            game_type=game_type,
            theme=theme,
            question_count=question_count,
            score_per_question=score_per_question,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from e


@router.post(
    BASE,
    response_model=CreateGameResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["math-generator"],
)
async def create_game(
    req: Annotated[CreateMathGame, Depends(_create_form)],
    actor: CurrentActor,
    service: MathService,
    thumbnail_image: Optional[UploadFile] = File(None),
) -> CreateGameResponse:
    thumbnail = await _read_thumbnail(thumbnail_image) if thumbnail_image else None
    created = await service.create_game(req, actor, thumbnail=thumbnail)
    return CreateGameResponse.model_validate(created)


@router.get(
    f"{BASE}/{{game_id}}/play/public",
    response_model=GamePlayView,
    tags=["math-generator"],
)
async def get_public_play(game_id: str, service: MathService) -> GamePlayView:
    return await service.get_game_play(game_id, is_public=True)


@router.get(
    f"{BASE}/{{game_id}}/play/private",
    response_model=GamePlayView,
    tags=["math-generator"],
)
async def get_private_play(
    game_id: str, actor: CurrentActor, service: MathService
) -> GamePlayView:
    return await service.get_game_play(game_id, is_public=False, actor=actor)


@router.post(
    f"{BASE}/{{game_id}}/check",
    response_model=GradeResult,
    response_model_exclude_none=True,
    tags=["math-generator"],
)
async def check_answer(
    game_id: str, req: AnswerSubmission, service: MathService
) -> GradeResult:
    return await service.check_answer(game_id, req)


@router.post(
    f"{BASE}/{{game_id}}/play-count",
    response_model=PlayCountResponse,
    tags=["math-generator"],
)
async def record_play(game_id: str, service: MathService) -> PlayCountResponse:
    return PlayCountResponse.model_validate(await service.record_play(game_id))


@router.get(
    f"{BASE}/{{game_id}}",
    response_model=GameDetailView,
    tags=["math-generator"],
)
async def get_game_detail(
    game_id: str, actor: CurrentActor, service: MathService
) -> GameDetailView:
    return await service.get_game_detail(game_id, actor)


@router.patch(
    f"{BASE}/{{game_id}}",
    response_model=UpdateGameResponse,
    tags=["math-generator"],
)
async def update_game(
    game_id: str, req: UpdateMathGame, actor: CurrentActor, service: MathService
) -> UpdateGameResponse:
    return UpdateGameResponse.model_validate(
        await service.update_game(game_id, req, actor)
    )


@router.put(
    f"{BASE}/{{game_id}}/thumbnail",
    response_model=UpdateGameResponse,
    tags=["math-generator"],
)
async def replace_thumbnail(
    game_id: str,
    actor: CurrentActor,
    service: MathService,
    thumbnail_image: UploadFile = File(...),
) -> UpdateGameResponse:
    thumbnail = await _read_thumbnail(thumbnail_image)
    return UpdateGameResponse.model_validate(
        await service.update_game(game_id, UpdateMathGame(), actor, thumbnail=thumbnail)
    )


@router.delete(
    f"{BASE}/{{game_id}}",
    response_model=DeleteGameResponse,
    tags=["math-generator"],
)
async def delete_game(
    game_id: str, actor: CurrentActor, service: MathService
) -> DeleteGameResponse:
    return DeleteGameResponse.model_validate(await service.delete_game(game_id, actor))
