"""Monthly usage counters."""
from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base


class UsageCounter(Base):
    """Stores consumption per shop for one calendar month (``YYYY-MM``)."""

    __tablename__ = "usage_counters"

    shop: Mapped[str] = mapped_column(String, primary_key=True)
    period: Mapped[str] = mapped_column(String(7), primary_key=True)
    languages_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    translations_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    products_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def as_dict(self) -> dict[str, int]:
        return {
            "languages_count": self.languages_count or 0,
            "translations_count": self.translations_count or 0,
            "products_count": self.products_count or 0,
        }
