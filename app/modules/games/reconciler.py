"""Decide whether an edit regenerates questions or patches display fields.

Regeneration is the expensive path and replaces the whole question list, so
answers submitted against the old indices no longer line up. Only
operation, difficulty and question_count trigger it.
"""

from __future__ import annotations

from typing import Optional

from app.modules.games.document import build_document
from app.modules.games.generator import RandomSource, generate_questions
from app.modules.games.models import (
    DocumentEdit,
    MathGeneratorDocument,
    Reconciliation,
    ReconcileAction,
)


def reconcile(
    document: MathGeneratorDocument,
    edit: DocumentEdit,
    rng: Optional[RandomSource] = None,
) -> Reconciliation:
    changes = edit.model_dump(exclude_none=True, exclude={"score_per_question"})
    settings = document.settings.model_copy(update=changes)
    score = (
        edit.score_per_question
        if edit.score_per_question is not None
        else document.score_per_question
    )

    if edit.requires_regeneration:
        questions = generate_questions(
            settings.operation, settings.difficulty, settings.question_count, rng
        )
        return Reconciliation(
            action=ReconcileAction.REGENERATE,
            document=build_document(settings, score, questions),
        )

    patched = document.model_copy(
        update={"settings": settings, "score_per_question": score}, deep=True
    )
    return Reconciliation(action=ReconcileAction.PATCH, document=patched)
