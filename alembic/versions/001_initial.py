"""Initial schema: users and searchable items

Revision ID: 001
Revises:
Create Date: 2025-02-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "items",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("condition", sa.String(32), nullable=False),
        sa.Column("location", sa.String(255), nullable=False, server_default=""),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("coordinates_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("moderation_status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_items_owner_id", "items", ["owner_id"], unique=False)
    op.create_index("ix_items_title", "items", ["title"], unique=False)
    op.create_index("ix_items_category", "items", ["category"], unique=False)
    op.create_index("ix_items_condition", "items", ["condition"], unique=False)
    op.create_index("ix_items_available_created_at", "items", ["available", "created_at"], unique=False)
    op.create_index("ix_items_category_available", "items", ["category", "available"], unique=False)
    op.create_index("ix_items_lat_lng", "items", ["latitude", "longitude"], unique=False)
    if op.get_bind().dialect.name == "postgresql":
        # Full-text index matching ItemRepository's to_tsvector expression
        op.execute(
            "CREATE INDEX ix_items_fulltext ON items USING GIN "
            "(to_tsvector('simple', coalesce(title, '') || ' ' || coalesce(description, '')))"
        )


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS ix_items_fulltext")
    op.drop_index("ix_items_lat_lng", "items")
    op.drop_index("ix_items_category_available", "items")
    op.drop_index("ix_items_available_created_at", "items")
    op.drop_index("ix_items_condition", "items")
    op.drop_index("ix_items_category", "items")
    op.drop_index("ix_items_title", "items")
    op.drop_index("ix_items_owner_id", "items")
    op.drop_table("items")
    op.drop_index("ix_users_email", "users")
    op.drop_table("users")
