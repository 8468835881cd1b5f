"""Subscription model mirroring the shop's Shopify app subscription."""
from __future__ import annotations

import datetime as dt
from typing import Optional

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base, utcnow

STATUS_PENDING = "pending"
STATUS_ACTIVE = "active"
STATUS_CANCELLED = "cancelled"

SUBSCRIPTION_STATUSES = (STATUS_PENDING, STATUS_ACTIVE, STATUS_CANCELLED)


class Subscription(Base):
    """Represents the plan selection for a shop."""

    __tablename__ = "subscriptions"

    shop: Mapped[str] = mapped_column(String, primary_key=True)
    plan_id: Mapped[str] = mapped_column(String, nullable=False)
    plan_name: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default=STATUS_PENDING)
    shopify_subscription_id: Mapped[Optional[str]] = mapped_column(
        String, unique=True, nullable=True
    )
    current_period_start: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    current_period_end: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    # Plan change awaiting merchant approval; the fields above stay in force meanwhile.
    pending_plan_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    pending_subscription_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    trial_ends_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    cancelled_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False
    )

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Subscription shop={self.shop} plan={self.plan_id} status={self.status}>"
