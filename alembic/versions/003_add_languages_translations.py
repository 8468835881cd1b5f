"""Add languages and translations."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "003_add_languages_translations"
down_revision = "002_add_usage_counters"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "languages",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("shop", sa.String(), nullable=False),
        sa.Column("code", sa.String(length=16), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("shop", "code", name="uq_language_shop_code"),
    )
    op.create_index("ix_languages_shop", "languages", ["shop"])

    op.create_table(
        "translations",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("shop", sa.String(), nullable=False),
        sa.Column("resource_type", sa.String(length=32), nullable=False),
        sa.Column("resource_id", sa.String(), nullable=False),
        sa.Column("field", sa.String(), nullable=False),
        sa.Column("language_code", sa.String(length=16), nullable=False),
        sa.Column("market_id", sa.String(), nullable=True),
        sa.Column("translated_value", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("status", sa.String(length=16), nullable=False, server_default=sa.text("'draft'")),
        sa.Column("auto_translated", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint(
            "shop",
            "resource_type",
            "resource_id",
            "field",
            "language_code",
            "market_id",
            name="uq_translation_key",
        ),
    )
    op.create_index("ix_translations_shop", "translations", ["shop"])
    op.create_index(
        "ix_translations_resource", "translations", ["shop", "resource_type", "resource_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_translations_resource", table_name="translations")
    op.drop_index("ix_translations_shop", table_name="translations")
    op.drop_table("translations")
    op.drop_index("ix_languages_shop", table_name="languages")
    op.drop_table("languages")
