import asyncio
import random

import pytest

from app.core.exceptions import (
    GameConflict,
    GameForbidden,
    GameNotFound,
    InvalidGameSettings,
)
from app.modules.games.document import parse_document
from app.modules.games.models import (
    AnswerSubmission,
    CreateMathGame,
    Operation,
    SubmittedAnswer,
    Thumbnail,
    UpdateMathGame,
)
from app.modules.games.service import MathGeneratorService

from tests.conftest import make_document, make_game


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def service(repo, storage, math_template):
    return MathGeneratorService(repo, storage, rng=random.Random(123))


def _create_payload(**overrides) -> CreateMathGame:
    data = {
        "name": "Times tables",
        "description": "Drill",
        "operation": "multiplication",
        "difficulty": "medium",
        "game_type": "multiple_choice",
        "theme": "space",
        "question_count": 5,
        "score_per_question": 20,
        "is_publish_immediately": True,
    }
    data.update(overrides)
    return CreateMathGame(**data)


# create -------------------------------------------------------------------


def test_create_game_persists_generated_document(service, repo, owner):
    created = run(service.create_game(_create_payload(), owner))

    assert created["game_template"] == {
        "id": 1,
        "name": "Math Generator",
        "slug": "math-generator",
    }
    game = repo.games[created["id"]]
    assert game.creator_id == owner.user_id
    assert game.is_published is True
    assert game.thumbnail_image == ""

    doc = parse_document(game.game_json)
    assert game.game_json["version"] == 1
    assert doc.settings.operation == Operation.MULTIPLICATION
    assert len(doc.questions) == 5
    assert doc.score_per_question == 20


def test_create_uploads_thumbnail_under_game_prefix(service, storage, owner):
    thumb = Thumbnail(filename="cover.png", content=b"png")
    created = run(service.create_game(_create_payload(), owner, thumbnail=thumb))

    (path,) = storage.files
    assert path.startswith(f"game/math/{created['id']}/")


def test_create_rejects_duplicate_name(service, repo, math_template, owner):
    make_game(repo, math_template, name="Times tables")
    with pytest.raises(GameConflict):
        run(service.create_game(_create_payload(), owner))
    assert len(repo.games) == 1


def test_create_without_template(repo, storage, owner):
    service = MathGeneratorService(repo, storage)
    with pytest.raises(GameNotFound, match="Run seed"):
        run(service.create_game(_create_payload(), owner))


def test_create_rejects_oversized_question_count(service, owner, storage):
    with pytest.raises(InvalidGameSettings):
        run(service.create_game(_create_payload(question_count=10_000), owner))
    assert storage.files == {}


# play ---------------------------------------------------------------------


def test_public_play_requires_published(service, repo, math_template):
    make_game(repo, math_template, is_published=False)
    with pytest.raises(GameForbidden, match="not published"):
        run(service.get_game_play("game-1", is_public=True))


def test_public_play_hides_answers(service, repo, math_template):
    make_game(repo, math_template, document=make_document(answers=(7, 8)))
    view = run(service.get_game_play("game-1", is_public=True))

    assert [q.index for q in view.questions] == [0, 1]
    assert "answer" not in view.model_dump()["questions"][0]


def test_private_play_for_owner_and_admin_only(
    service, repo, math_template, owner, stranger, admin
):
    make_game(repo, math_template, is_published=False)

    assert run(service.get_game_play("game-1", False, owner)).id == "game-1"
    assert run(service.get_game_play("game-1", False, admin)).id == "game-1"
    with pytest.raises(GameForbidden):
        run(service.get_game_play("game-1", False, stranger))
    with pytest.raises(GameForbidden):
        run(service.get_game_play("game-1", False, None))


def test_other_template_is_not_found(service, repo, owner):
    quiz = repo.add_template("quiz", "Quiz", 2)
    make_game(repo, quiz)
    with pytest.raises(GameNotFound):
        run(service.get_game_play("game-1", True))
    with pytest.raises(GameNotFound):
        run(service.get_game_detail("game-1", owner))


def test_missing_game_is_not_found(service, owner):
    with pytest.raises(GameNotFound):
        run(service.check_answer("nope", AnswerSubmission()))
    with pytest.raises(GameNotFound):
        run(service.delete_game("nope", owner))


# grading --------------------------------------------------------------------


def test_check_answer_does_not_touch_counters(service, repo, math_template):
    game = make_game(repo, math_template, document=make_document(answers=(7, 12)))
    submission = AnswerSubmission(
        answers=[
            SubmittedAnswer(question_index=0, selected_answer="7"),
            SubmittedAnswer(question_index=5, selected_answer=1),
        ]
    )
    before = dict(game.game_json)

    result = run(service.check_answer("game-1", submission))

    assert result.correct_count == 1
    assert result.score == 50
    assert result.results[1].correct_answer is None
    assert game.total_played == 0
    assert game.game_json == before
    assert repo.saves == 0


def test_record_play_increments(service, repo, math_template):
    make_game(repo, math_template)
    assert run(service.record_play("game-1"))["total_played"] == 1
    assert run(service.record_play("game-1"))["total_played"] == 2


# detail -------------------------------------------------------------------


def test_detail_for_owner(service, repo, math_template, owner, stranger, admin):
    make_game(repo, math_template)
    repo.likes["game-1"] = 3

    view = run(service.get_game_detail("game-1", owner))
    assert view.liked_by_count == 3
    assert view.settings.question_count == 3
    assert run(service.get_game_detail("game-1", admin)).id == "game-1"
    with pytest.raises(GameForbidden):
        run(service.get_game_detail("game-1", stranger))


# update -------------------------------------------------------------------


def test_theme_edit_keeps_questions(service, repo, math_template, owner):
    game = make_game(repo, math_template)
    questions_before = list(game.game_json["questions"])

    result = run(service.update_game("game-1", UpdateMathGame(theme="ocean"), owner))

    assert result == {"id": "game-1", "updated": True}
    assert game.game_json["questions"] == questions_before
    assert game.game_json["settings"]["theme"] == "ocean"


def test_count_edit_regenerates(service, repo, math_template, owner):
    game = make_game(repo, math_template)
    run(service.update_game("game-1", UpdateMathGame(question_count=6), owner))

    doc = parse_document(game.game_json)
    assert len(doc.questions) == 6
    assert doc.settings.theme == "forest"
    assert doc.settings.game_type == "multiple_choice"


def test_update_top_level_fields(service, repo, math_template, owner):
    game = make_game(repo, math_template, is_published=False)
    old_updated = game.updated_at

    run(
        service.update_game(
            "game-1",
            UpdateMathGame(name="Renamed", description="New", is_publish=True),
            owner,
        )
    )

    assert game.name == "Renamed"
    assert game.description == "New"
    assert game.is_published is True
    assert game.updated_at != old_updated


def test_rename_to_taken_name_fails_before_writing(
    service, repo, math_template, owner
):
    game = make_game(repo, math_template)
    make_game(repo, math_template, game_id="game-2", name="Taken")
    before = dict(game.game_json)

    with pytest.raises(GameConflict):
        run(
            service.update_game(
                "game-1", UpdateMathGame(name="Taken", question_count=9), owner
            )
        )
    assert game.game_json == before
    assert game.name == "Sums"


def test_rename_to_own_name_is_allowed(service, repo, math_template, owner):
    make_game(repo, math_template)
    run(service.update_game("game-1", UpdateMathGame(name="Sums"), owner))


def test_update_forbidden_for_stranger(service, repo, math_template, stranger):
    game = make_game(repo, math_template)
    before = dict(game.game_json)
    with pytest.raises(GameForbidden):
        run(service.update_game("game-1", UpdateMathGame(theme="x"), stranger))
    assert game.game_json == before


def test_admin_may_update(service, repo, math_template, admin):
    game = make_game(repo, math_template)
    run(service.update_game("game-1", UpdateMathGame(theme="admin"), admin))
    assert game.game_json["settings"]["theme"] == "admin"


def test_thumbnail_replacement(service, repo, storage, math_template, owner):
    storage.files["game/math/game-1/old.png"] = b"old"
    game = make_game(repo, math_template, thumbnail_image="game/math/game-1/old.png")

    run(
        service.update_game(
            "game-1",
            UpdateMathGame(),
            owner,
            thumbnail=Thumbnail(filename="new.png", content=b"new"),
        )
    )

    assert storage.removed == ["game/math/game-1/old.png"]
    assert game.thumbnail_image.startswith("game/math/game-1/")
    assert storage.files[game.thumbnail_image] == b"new"


def test_failed_save_keeps_old_thumbnail(
    service, repo, storage, math_template, owner, monkeypatch
):
    storage.files["game/math/game-1/old.png"] = b"old"
    make_game(repo, math_template, thumbnail_image="game/math/game-1/old.png")

    async def failing_save(game):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(repo, "save", failing_save)

    with pytest.raises(RuntimeError):
        run(
            service.update_game(
                "game-1",
                UpdateMathGame(),
                owner,
                thumbnail=Thumbnail(filename="new.png", content=b"new"),
            )
        )

    assert storage.removed == []
    assert storage.files["game/math/game-1/old.png"] == b"old"


def test_last_writer_wins(service, repo, math_template, owner, admin):
    game = make_game(repo, math_template)
    run(service.update_game("game-1", UpdateMathGame(theme="first"), owner))
    run(service.update_game("game-1", UpdateMathGame(theme="second"), admin))
    assert game.game_json["settings"]["theme"] == "second"


# delete -------------------------------------------------------------------


def test_delete_releases_thumbnail(service, repo, storage, math_template, owner):
    make_game(repo, math_template, thumbnail_image="game/math/game-1/t.png")
    result = run(service.delete_game("game-1", owner))

    assert result == {"id": "game-1", "deleted": True}
    assert "game-1" not in repo.games
    assert storage.removed == ["game/math/game-1/t.png"]


def test_delete_forbidden_for_stranger(service, repo, storage, math_template, stranger):
    make_game(repo, math_template, thumbnail_image="game/math/game-1/t.png")
    with pytest.raises(GameForbidden):
        run(service.delete_game("game-1", stranger))
    assert "game-1" in repo.games
    assert storage.removed == []
