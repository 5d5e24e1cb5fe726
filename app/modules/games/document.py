"""Assembly, serialization and versioned loading of game documents."""

from __future__ import annotations

from typing import Any, Callable, Optional

from app.core.exceptions import DocumentVersionError
from app.modules.games.models import (
    CURRENT_DOCUMENT_VERSION,
    GameSettings,
    MathGeneratorDocument,
    MathQuestion,
)


def _upgrade_v0(raw: dict[str, Any]) -> dict[str, Any]:
    # v0 is the untagged shape; only the tag is new in v1
    return {**raw, "version": 1}


# version -> function producing the next version's shape
MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    0: _upgrade_v0,
}


def build_document(
    settings: GameSettings,
    score_per_question: float,
    questions: list[MathQuestion],
) -> MathGeneratorDocument:
    if settings.question_count < 1:
        raise ValueError("question_count must be at least 1")
    if len(questions) != settings.question_count:
        raise ValueError(
            f"expected {settings.question_count} questions, got {len(questions)}"
        )
    return MathGeneratorDocument(
        settings=settings,
        score_per_question=score_per_question,
        questions=list(questions),
    )


def parse_document(raw: Optional[dict[str, Any]]) -> MathGeneratorDocument:
    """Load a stored ``game_json`` payload, upgrading older versions in memory."""
    if not isinstance(raw, dict):
        raise DocumentVersionError("Game document is missing or malformed")
    version = raw.get("version", 0)
    if not isinstance(version, int) or version > CURRENT_DOCUMENT_VERSION:
        raise DocumentVersionError(f"Unsupported game document version: {version!r}")
    while version < CURRENT_DOCUMENT_VERSION:
        raw = MIGRATIONS[version](raw)
        version = raw["version"]
    return MathGeneratorDocument.model_validate(raw)


def dump_document(document: MathGeneratorDocument) -> dict[str, Any]:
    return document.model_dump(mode="json")
