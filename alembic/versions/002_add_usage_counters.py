"""Add monthly usage counters."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "002_add_usage_counters"
down_revision = "001_initial"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "usage_counters",
        sa.Column("shop", sa.String(), nullable=False),
        sa.Column("period", sa.String(length=7), nullable=False),
        sa.Column("languages_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("translations_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("products_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.PrimaryKeyConstraint("shop", "period"),
    )


def downgrade() -> None:
    op.drop_table("usage_counters")
