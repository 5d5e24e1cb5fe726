"""Game kinds selectable by template slug.

Each mini-game kind bundles the operations the service needs on its stored
document. Only the math generator is implemented; other slugs in the shared
games table resolve to ``GameNotFound``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Optional, Protocol

from app.core.exceptions import GameNotFound
from app.modules.games import document as doc
from app.modules.games.generator import RandomSource, generate_questions
from app.modules.games.grader import grade
from app.modules.games.models import (
    DocumentEdit,
    GameDetailView,
    GamePlayView,
    GameSettings,
    GradeResult,
    MathGeneratorDocument,
    Reconciliation,
    SubmittedAnswer,
)
from app.modules.games.projector import project_detail, project_play
from app.modules.games.reconciler import reconcile

if TYPE_CHECKING:
    from app.core.db.schemas.games import Game


class GameKind(Protocol):
    slug: str
    display_name: str

    def generate(
        self,
        settings: GameSettings,
        score_per_question: float,
        rng: Optional[RandomSource] = None,
    ) -> MathGeneratorDocument: ...

    def parse(self, raw: Any) -> MathGeneratorDocument: ...

    def dump(self, document: MathGeneratorDocument) -> dict[str, Any]: ...

    def project_play(
        self, game: "Game", document: MathGeneratorDocument
    ) -> GamePlayView: ...

    def project_detail(
        self, game: "Game", document: MathGeneratorDocument, liked_by_count: int
    ) -> GameDetailView: ...

    def grade(
        self, document: MathGeneratorDocument, answers: Iterable[SubmittedAnswer]
    ) -> GradeResult: ...

    def reconcile(
        self,
        document: MathGeneratorDocument,
        edit: DocumentEdit,
        rng: Optional[RandomSource] = None,
    ) -> Reconciliation: ...


class MathGeneratorKind:
    slug = "math-generator"
    display_name = "Math Generator"

    def generate(self, settings, score_per_question, rng=None):
        questions = generate_questions(
            settings.operation, settings.difficulty, settings.question_count, rng
        )
        return doc.build_document(settings, score_per_question, questions)

    def parse(self, raw):
        return doc.parse_document(raw)

    def dump(self, document):
        return doc.dump_document(document)

    def project_play(self, game, document):
        return project_play(game, document)

    def project_detail(self, game, document, liked_by_count):
        return project_detail(game, document, liked_by_count)

    def grade(self, document, answers):
        return grade(document, answers)

    def reconcile(self, document, edit, rng=None):
        return reconcile(document, edit, rng)


_REGISTRY: dict[str, GameKind] = {
    MathGeneratorKind.slug: MathGeneratorKind(),
}


def get_game_kind(slug: str) -> GameKind:
    kind = _REGISTRY.get(slug)
    if kind is None:
        raise GameNotFound(f"Unknown game type: {slug}")
    return kind


def registered_kinds() -> list[GameKind]:
    return list(_REGISTRY.values())
