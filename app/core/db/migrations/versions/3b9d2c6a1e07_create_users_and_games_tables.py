"""create users, game templates, games and likes tables

Revision ID: 3b9d2c6a1e07
Revises:
Create Date: 2026-10-19 09:12:40.118203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3b9d2c6a1e07"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create auth and game storage tables, then seed the math generator template."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("hashed_password", sa.String(length=1024), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_superuser", sa.Boolean(), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)

    templates = op.create_table(
        "game_templates",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_game_templates_slug"), "game_templates", ["slug"], unique=True
    )
    op.create_index(
        op.f("ix_game_templates_id"), "game_templates", ["id"], unique=False
    )

    op.create_table(
        "games",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("thumbnail_image", sa.String(), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        sa.Column("creator_id", sa.Integer(), nullable=False),
        sa.Column("game_template_id", sa.Integer(), nullable=False),
        sa.Column("game_json", sa.JSON(), nullable=False),
        sa.Column("total_played", sa.Integer(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False
        ),
        sa.ForeignKeyConstraint(["creator_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["game_template_id"], ["game_templates.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_games_name"), "games", ["name"], unique=True)
    op.create_index(op.f("ix_games_creator_id"), "games", ["creator_id"], unique=False)
    op.create_index(
        op.f("ix_games_game_template_id"), "games", ["game_template_id"], unique=False
    )
    op.create_index(op.f("ix_games_created_at"), "games", ["created_at"], unique=False)

    op.create_table(
        "game_likes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("game_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False
        ),
        sa.ForeignKeyConstraint(["game_id"], ["games.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("game_id", "user_id", name="uq_game_like"),
    )
    op.create_index(op.f("ix_game_likes_id"), "game_likes", ["id"], unique=False)
    op.create_index(
        op.f("ix_game_likes_game_id"), "game_likes", ["game_id"], unique=False
    )
    op.create_index(
        op.f("ix_game_likes_user_id"), "game_likes", ["user_id"], unique=False
    )

    op.bulk_insert(templates, [{"slug": "math-generator", "name": "Math Generator"}])


def downgrade() -> None:
    """Drop game and auth tables in dependency order."""
    op.drop_table("game_likes")
    op.drop_table("games")
    op.drop_table("game_templates")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
