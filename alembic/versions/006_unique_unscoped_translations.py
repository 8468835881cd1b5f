"""Unique key for translations without a market."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "006_unique_unscoped_translations"
down_revision = "005_add_pending_plan_change"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_index(
        "uq_translation_key_unscoped",
        "translations",
        ["shop", "resource_type", "resource_id", "field", "language_code"],
        unique=True,
        postgresql_where=sa.text("market_id IS NULL"),
    )


def downgrade() -> None:
    op.drop_index("uq_translation_key_unscoped", table_name="translations")
