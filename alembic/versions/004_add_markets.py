"""Add mirrored Shopify markets."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "004_add_markets"
down_revision = "003_add_languages_translations"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "markets",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("shop", sa.String(), nullable=False),
        sa.Column("shopify_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("shop", "shopify_id", name="uq_market_shop_shopify_id"),
    )
    op.create_index("ix_markets_shop", "markets", ["shop"])


def downgrade() -> None:
    op.drop_index("ix_markets_shop", table_name="markets")
    op.drop_table("markets")
