"""initial schema: accounts, settings, packages, ledger, admins

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19 00:00:01.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261019_000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "aicoach_users",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("account_type", sa.String(), nullable=False, server_default="standard"),
        sa.Column("credit_balance", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("assigned_provider", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=False, server_default="user"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_aicoach_users_email", "aicoach_users", ["email"], unique=False)

    op.create_table(
        "aicoach_settings",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("default_provider", sa.String(), nullable=False),
        sa.Column("internal_widget_provider", sa.String(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "aicoach_packages",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("credits", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("features", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "aicoach_transactions",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("provider", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("package_id", sa.String(), nullable=True),
        sa.Column("package_name", sa.String(), nullable=True),
        sa.Column("credits_added", sa.Integer(), nullable=True),
        sa.Column("amount_paid", sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_aicoach_transactions_user_id", "aicoach_transactions", ["user_id"], unique=False)
    op.create_index("ix_aicoach_transactions_timestamp", "aicoach_transactions", ["timestamp"], unique=False)
    op.create_index(
        "ix_aicoach_transactions_user_timestamp",
        "aicoach_transactions",
        ["user_id", "timestamp"],
        unique=False,
    )

    op.create_table(
        "aicoach_admins",
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("email"),
    )


def downgrade() -> None:
    op.drop_table("aicoach_admins")
    op.drop_index("ix_aicoach_transactions_user_timestamp", table_name="aicoach_transactions")
    op.drop_index("ix_aicoach_transactions_timestamp", table_name="aicoach_transactions")
    op.drop_index("ix_aicoach_transactions_user_id", table_name="aicoach_transactions")
    op.drop_table("aicoach_transactions")
    op.drop_table("aicoach_packages")
    op.drop_table("aicoach_settings")
    op.drop_index("ix_aicoach_users_email", table_name="aicoach_users")
    op.drop_table("aicoach_users")
