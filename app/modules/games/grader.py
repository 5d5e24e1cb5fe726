"""Answer grading for math generator documents."""

from __future__ import annotations

import math
from typing import Iterable, Optional, Union

from app.modules.games.models import (
    GradeResult,
    MathGeneratorDocument,
    QuestionResult,
    SubmittedAnswer,
)


def _as_number(value: Union[int, float, str, None]) -> Optional[Union[int, float]]:
    if value is None or isinstance(value, bool):
        return None
    # Ints compare exactly; huge ones would overflow a float
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) else value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except (ValueError, OverflowError):
        return None
    return None if math.isnan(number) else number


def grade(
    document: MathGeneratorDocument, answers: Iterable[SubmittedAnswer]
) -> GradeResult:
    """Grade submitted answers; bad indices count as wrong, never as errors."""
    questions = document.questions
    correct_count = 0
    results: list[QuestionResult] = []

    for ans in answers:
        idx = ans.question_index
        if idx < 0 or idx >= len(questions):
            results.append(QuestionResult(question_index=idx, is_correct=False))
            continue

        expected = questions[idx].answer
        is_correct = _as_number(ans.selected_answer) == expected
        if is_correct:
            correct_count += 1
        results.append(
            QuestionResult(
                question_index=idx,
                is_correct=is_correct,
                correct_answer=None if is_correct else expected,
            )
        )

    total = len(questions)
    return GradeResult(
        score=(correct_count / total) * 100 if total > 0 else 0,
        correct_count=correct_count,
        max_score=total * document.score_per_question,
        results=results,
    )
