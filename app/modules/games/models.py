"""Pydantic models for the math generator game document and its views.

The document (``MathGeneratorDocument``) is what gets persisted in
``games.game_json``; its shape is the one compatibility-sensitive artifact
of the service, so it carries an explicit ``version`` tag. Everything else
here is derived: projections served to players/creators and grading
results.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


CURRENT_DOCUMENT_VERSION = 1


class Operation(str, Enum):
    ADDITION = "addition"
    SUBTRACTION = "subtraction"
    MULTIPLICATION = "multiplication"
    DIVISION = "division"
    RANDOM = "random"


CONCRETE_OPERATIONS: tuple[Operation, ...] = (
    Operation.ADDITION,
    Operation.SUBTRACTION,
    Operation.MULTIPLICATION,
    Operation.DIVISION,
)


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class Actor(BaseModel):
    """Authenticated caller as seen by the games service."""

    user_id: int
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class GameSettings(BaseModel):
    operation: Operation
    difficulty: Difficulty
    game_type: str
    theme: str
    question_count: int = Field(..., ge=1)


class MathQuestion(BaseModel):
    """A single generated question; ``answer`` is always one of ``options``."""

    question: str
    answer: int
    options: list[int] = Field(..., min_length=4, max_length=4)

    @model_validator(mode="after")
    def _check_options(self) -> "MathQuestion":
        if len(set(self.options)) != len(self.options):
            raise ValueError("options must be distinct")
        if self.answer not in self.options:
            raise ValueError("answer must be one of the options")
        return self


class MathGeneratorDocument(BaseModel):
    version: Literal[1] = CURRENT_DOCUMENT_VERSION
    settings: GameSettings
    score_per_question: float = Field(..., gt=0)
    questions: list[MathQuestion] = Field(default_factory=list)


# Edits ---------------------------------------------------------------------


class DocumentEdit(BaseModel):
    """Partial edit of a document. ``None`` means "leave unchanged"."""

    operation: Optional[Operation] = None
    difficulty: Optional[Difficulty] = None
    question_count: Optional[int] = Field(default=None, ge=1)
    game_type: Optional[str] = None
    theme: Optional[str] = None
    score_per_question: Optional[float] = Field(default=None, gt=0)

    @property
    def requires_regeneration(self) -> bool:
        return (
            self.operation is not None
            or self.difficulty is not None
            or self.question_count is not None
        )


class ReconcileAction(str, Enum):
    REGENERATE = "regenerate"
    PATCH = "patch"


class Reconciliation(BaseModel):
    action: ReconcileAction
    document: MathGeneratorDocument


# Grading -------------------------------------------------------------------


class SubmittedAnswer(BaseModel):
    question_index: int
    selected_answer: Union[int, float, str, None] = None


class AnswerSubmission(BaseModel):
    answers: list[SubmittedAnswer] = Field(default_factory=list)


class QuestionResult(BaseModel):
    question_index: int
    is_correct: bool
    # Only set for in-range answers that were wrong
    correct_answer: Optional[int] = None


class GradeResult(BaseModel):
    score: float
    correct_count: int
    max_score: float
    results: list[QuestionResult] = Field(default_factory=list)


# Projections ---------------------------------------------------------------


class PlayQuestion(BaseModel):
    index: int
    question: str
    options: list[int]


class GamePlayView(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    thumbnail_image: str = ""
    settings: GameSettings
    score_per_question: float
    questions: list[PlayQuestion] = Field(default_factory=list)


class GameDetailView(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    thumbnail_image: str = ""
    is_published: bool
    creator_id: int
    settings: GameSettings
    score_per_question: float
    total_played: int = 0
    liked_by_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Authoring -----------------------------------------------------------------


class CreateMathGame(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    description: Optional[str] = None
    is_publish_immediately: bool = False
    operation: Operation
    difficulty: Difficulty
    game_type: str = "multiple_choice"
    theme: str = "default"
    question_count: int = Field(..., ge=1)
    score_per_question: float = Field(default=1, gt=0)


class UpdateMathGame(DocumentEdit):
    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    description: Optional[str] = None
    is_publish: Optional[bool] = None

    @model_validator(mode="after")
    def _strip_name(self) -> "UpdateMathGame":
        if self.name is not None:
            self.name = self.name.strip() or None
        return self

    def document_edit(self) -> DocumentEdit:
        return DocumentEdit.model_validate(
            self.model_dump(include=set(DocumentEdit.model_fields))
        )


class Thumbnail(BaseModel):
    """Raw thumbnail upload handed to the file storage collaborator."""

    filename: str
    content: bytes


__all__ = [
    "CURRENT_DOCUMENT_VERSION",
    "Operation",
    "CONCRETE_OPERATIONS",
    "Difficulty",
    "Role",
    "Actor",
    "GameSettings",
    "MathQuestion",
    "MathGeneratorDocument",
    "DocumentEdit",
    "ReconcileAction",
    "Reconciliation",
    "SubmittedAnswer",
    "AnswerSubmission",
    "QuestionResult",
    "GradeResult",
    "PlayQuestion",
    "GamePlayView",
    "GameDetailView",
    "CreateMathGame",
    "UpdateMathGame",
    "Thumbnail",
]
