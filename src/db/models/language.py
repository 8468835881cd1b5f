"""Language model definition"""
from datetime import datetime
import uuid

from sqlalchemy import Boolean, DateTime, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base, utcnow


class Language(Base):
    """A target language enabled by a shop."""

    __tablename__ = "languages"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    shop: Mapped[str] = mapped_column(String, nullable=False, index=True)
    code: Mapped[str] = mapped_column(String(16), nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("shop", "code", name="uq_language_shop_code"),
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Language {self.code} shop={self.shop} default={self.is_default}>"
