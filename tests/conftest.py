import os
import random
import tempfile
from datetime import datetime
from typing import Optional

import pytest

# Settings are read at import time, so the environment must be ready first
_TMP = tempfile.mkdtemp(prefix="game-forge-tests-")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_DB_PORT", "5432")
os.environ.setdefault("POSTGRES_DB_NAME", "games_test")
os.environ.setdefault("POSTGRES_DB_USER", "games")
os.environ.setdefault("POSTGRES_DB_PASSWORD", "games")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("JWT_KEY_FILE", os.path.join(_TMP, "jwt_rsa_key.pem"))
os.environ.setdefault("UPLOADS_DIR", os.path.join(_TMP, "uploads"))
os.environ.setdefault("MODE", "dev")

from app.core.db.schemas.games import Game, GameTemplate  # noqa: E402
from app.modules.games.document import build_document, dump_document  # noqa: E402
from app.modules.games.models import (  # noqa: E402
    Actor,
    Difficulty,
    GameSettings,
    MathGeneratorDocument,
    MathQuestion,
    Operation,
    Role,
)


class ScriptedRandom:
    """Random source that replays scripted ``randint`` values, then falls back."""

    def __init__(self, values, fallback: Optional[random.Random] = None):
        self.values = list(values)
        self.fallback = fallback or random.Random(0)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        if self.values:
            value = self.values.pop(0)
            assert a <= value <= b, f"scripted {value} outside {a}..{b}"
            return value
        return self.fallback.randint(a, b)

    def choice(self, seq):
        return seq[0]

    def shuffle(self, x: list) -> None:
        pass


class LowestRandom:
    """Always draws the lower bound."""

    def randint(self, a: int, b: int) -> int:
        return a

    def choice(self, seq):
        return seq[0]

    def shuffle(self, x: list) -> None:
        pass


class FakeGameRepository:
    def __init__(self) -> None:
        self.games: dict[str, Game] = {}
        self.templates: dict[str, GameTemplate] = {}
        self.likes: dict[str, int] = {}
        self.saves = 0

    def add_template(self, slug: str, name: str, template_id: int) -> GameTemplate:
        template = GameTemplate(id=template_id, slug=slug, name=name)
        self.templates[slug] = template
        return template

    async def load(self, game_id: str) -> Optional[Game]:
        return self.games.get(game_id)

    async def find_by_name(self, name: str) -> Optional[Game]:
        return next((g for g in self.games.values() if g.name == name), None)

    async def get_template(self, slug: str) -> Optional[GameTemplate]:
        return self.templates.get(slug)

    async def count_likes(self, game_id: str) -> int:
        return self.likes.get(game_id, 0)

    async def save(self, game: Game) -> Game:
        now = datetime(2026, 1, 1, 12, 0, 0)
        if game.total_played is None:
            game.total_played = 0
        if game.created_at is None:
            game.created_at = now
        if game.updated_at is None:
            game.updated_at = now
        self.games[game.id] = game
        self.saves += 1
        return game

    async def delete(self, game_id: str) -> None:
        self.games.pop(game_id, None)

    async def increment_played(self, game_id: str) -> Optional[int]:
        game = self.games.get(game_id)
        if game is None:
            return None
        game.total_played = (game.total_played or 0) + 1
        return game.total_played


class FakeStorage:
    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.removed: list[str] = []
        self._counter = 0

    async def upload(self, path_prefix: str, filename: str, content: bytes) -> str:
        self._counter += 1
        path = f"{path_prefix}/{self._counter}_{filename}"
        self.files[path] = content
        return path

    async def remove(self, stored_path: str) -> None:
        self.removed.append(stored_path)
        self.files.pop(stored_path, None)


def make_document(
    answers=(7, 12, 3),
    score_per_question: float = 10,
    operation: Operation = Operation.ADDITION,
    difficulty: Difficulty = Difficulty.EASY,
    game_type: str = "multiple_choice",
    theme: str = "forest",
) -> MathGeneratorDocument:
    questions = [
        MathQuestion(
            question=f"{ans - 1} + 1",
            answer=ans,
            options=[ans, ans + 1, ans + 2, ans + 3],
        )
        for ans in answers
    ]
    settings = GameSettings(
        operation=operation,
        difficulty=difficulty,
        game_type=game_type,
        theme=theme,
        question_count=len(questions),
    )
    return build_document(settings, score_per_question, questions)


def make_game(
    repo: FakeGameRepository,
    template: GameTemplate,
    game_id: str = "game-1",
    creator_id: int = 1,
    is_published: bool = True,
    document: Optional[MathGeneratorDocument] = None,
    name: str = "Sums",
    thumbnail_image: str = "",
) -> Game:
    game = Game(
        id=game_id,
        name=name,
        description="Practice sums",
        thumbnail_image=thumbnail_image,
        is_published=is_published,
        creator_id=creator_id,
        game_template_id=template.id,
        game_json=dump_document(document or make_document()),
        total_played=0,
        created_at=datetime(2026, 1, 1, 12, 0, 0),
        updated_at=datetime(2026, 1, 1, 12, 0, 0),
    )
    game.game_template = template
    repo.games[game_id] = game
    return game


@pytest.fixture
def repo() -> FakeGameRepository:
    return FakeGameRepository()


@pytest.fixture
def math_template(repo: FakeGameRepository) -> GameTemplate:
    return repo.add_template("math-generator", "Math Generator", 1)


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def owner() -> Actor:
    return Actor(user_id=1, role=Role.USER)


@pytest.fixture
def stranger() -> Actor:
    return Actor(user_id=2, role=Role.USER)


@pytest.fixture
def admin() -> Actor:
    return Actor(user_id=99, role=Role.ADMIN)
