"""Arithmetic question generator for the math generator game.

Provides:
- generate_questions(operation, difficulty, count, rng=None) -> list[MathQuestion]

The randomness source is injected (anything with ``randint``, ``choice`` and
``shuffle``, i.e. ``random.Random``) so callers and tests control it.
"""

from __future__ import annotations

import random
from typing import Optional, Protocol, Sequence, TypeVar

from app.core.logging import get_logger
from app.modules.games.models import (
    CONCRETE_OPERATIONS,
    Difficulty,
    MathQuestion,
    Operation,
)


logger = get_logger(__name__)

T = TypeVar("T")

OPERAND_RANGE: dict[Difficulty, int] = {
    Difficulty.EASY: 10,
    Difficulty.MEDIUM: 20,
    Difficulty.HARD: 50,
}
# Multiplication and division use times-table operands at every difficulty
TABLE_MAX = 12
OPTION_COUNT = 4
DISTRACTOR_OFFSET_MIN = -10
DISTRACTOR_OFFSET_MAX = 9
MAX_DISTRACTOR_ATTEMPTS = 50


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...

    def choice(self, seq: Sequence[T]) -> T: ...

    def shuffle(self, x: list) -> None: ...


def _build_prompt(
    operation: Operation, rng: RandomSource, a: int, b: int
) -> tuple[str, int]:
    if operation == Operation.SUBTRACTION:
        hi, lo = max(a, b), min(a, b)
        return f"{hi} - {lo}", hi - lo
    if operation == Operation.MULTIPLICATION:
        m1 = rng.randint(1, TABLE_MAX)
        m2 = rng.randint(1, TABLE_MAX)
        return f"{m1} × {m2}", m1 * m2
    if operation == Operation.DIVISION:
        divisor = rng.randint(1, TABLE_MAX)
        quotient = rng.randint(1, TABLE_MAX)
        return f"{divisor * quotient} ÷ {divisor}", quotient
    return f"{a} + {b}", a + b


def _build_options(answer: int, rng: RandomSource) -> list[int]:
    options = [answer]
    while len(options) < OPTION_COUNT:
        for _ in range(MAX_DISTRACTOR_ATTEMPTS):
            candidate = answer + rng.randint(
                DISTRACTOR_OFFSET_MIN, DISTRACTOR_OFFSET_MAX
            )
            if candidate > 0 and candidate not in options:
                break
        else:
            candidate = answer + len(options) + 1
            while candidate in options:
                candidate += 1
            logger.warning(
                "Distractor search exhausted for answer=%s; using filler %s",
                answer,
                candidate,
            )
        options.append(candidate)
    rng.shuffle(options)
    return options


def generate_question(
    operation: Operation, difficulty: Difficulty, rng: RandomSource
) -> MathQuestion:
    """Generate one question; ``random`` resolves to a concrete operation here."""
    upper = OPERAND_RANGE[difficulty]
    a = rng.randint(1, upper)
    b = rng.randint(1, upper)
    if operation == Operation.RANDOM:
        operation = rng.choice(CONCRETE_OPERATIONS)
    prompt, answer = _build_prompt(operation, rng, a, b)
    return MathQuestion(
        question=prompt, answer=answer, options=_build_options(answer, rng)
    )


def generate_questions(
    operation: Operation,
    difficulty: Difficulty,
    count: int,
    rng: Optional[RandomSource] = None,
) -> list[MathQuestion]:
    """Generate ``count`` questions in order; list position is the question index."""
    if count < 1:
        raise ValueError("question count must be at least 1")
    rng = rng or random.Random()
    operation = Operation(operation)
    difficulty = Difficulty(difficulty)
    return [generate_question(operation, difficulty, rng) for _ in range(count)]
