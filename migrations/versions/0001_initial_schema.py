"""initial schema: users, categories, expenses

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-04-13 04:31:57

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _uuid_default():
    # gen_random_uuid() is built into PostgreSQL 13+
    if op.get_bind().dialect.name == "postgresql":
        return sa.text("gen_random_uuid()")
    return None


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), server_default=_uuid_default(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="users_pkey"),
        sa.UniqueConstraint("email", name="users_email_key"),
    )
    op.create_table(
        "categories",
        sa.Column("id", sa.Uuid(), server_default=_uuid_default(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("monthly_limit", sa.Numeric(10, 2), nullable=True),
        sa.Column("color", sa.String(length=7), server_default="#6366F1", nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="categories_user_id_fkey", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id", name="categories_pkey"),
        sa.UniqueConstraint("user_id", "name", name="categories_user_id_name_key"),
    )
    op.create_table(
        "expenses",
        sa.Column("id", sa.Uuid(), server_default=_uuid_default(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("category_id", sa.Uuid(), nullable=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("expense_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint("amount > 0", name="expenses_amount_positive"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], name="expenses_category_id_fkey", ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="expenses_user_id_fkey", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id", name="expenses_pkey"),
    )
    op.create_index("ix_expenses_user_id", "expenses", ["user_id"])


def downgrade():
    op.drop_index("ix_expenses_user_id", table_name="expenses")
    op.drop_table("expenses")
    op.drop_table("categories")
    op.drop_table("users")
