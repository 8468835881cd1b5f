"""Translation model storing translated field values."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Index, String, Text, UniqueConstraint, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base, utcnow

STATUS_DRAFT = "draft"
STATUS_REVIEW = "review"
STATUS_PUBLISHED = "published"

TRANSLATION_STATUSES = (STATUS_DRAFT, STATUS_REVIEW, STATUS_PUBLISHED)


class Translation(Base):
    """One translated field of a Shopify resource, optionally market-scoped."""

    __tablename__ = "translations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    shop: Mapped[str] = mapped_column(String, nullable=False, index=True)
    resource_type: Mapped[str] = mapped_column(String(32), nullable=False)
    resource_id: Mapped[str] = mapped_column(String, nullable=False)
    field: Mapped[str] = mapped_column(String, nullable=False)
    language_code: Mapped[str] = mapped_column(String(16), nullable=False)
    market_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    translated_value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_DRAFT)
    auto_translated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint(
            "shop",
            "resource_type",
            "resource_id",
            "field",
            "language_code",
            "market_id",
            name="uq_translation_key",
        ),
        # market_id is NULL for unscoped rows and NULLs never collide in the key above.
        Index(
            "uq_translation_key_unscoped",
            "shop",
            "resource_type",
            "resource_id",
            "field",
            "language_code",
            unique=True,
            postgresql_where=text("market_id IS NULL"),
            sqlite_where=text("market_id IS NULL"),
        ),
        Index("ix_translations_resource", "shop", "resource_type", "resource_id"),
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return (
            f"<Translation {self.resource_type}:{self.resource_id} "
            f"{self.field}/{self.language_code} status={self.status}>"
        )
