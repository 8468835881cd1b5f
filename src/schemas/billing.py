"""Pydantic schemas for billing requests and responses"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SubscribeRequest(BaseModel):
    """Schema for starting a plan subscription."""

    plan_id: str = Field(..., description="Plan identifier (basic, pro, enterprise)")


class SubscriptionRead(BaseModel):
    """Schema returned when reading the shop's subscription."""

    shop: str = Field(..., description="Shop domain")
    plan_id: str = Field(..., description="Plan identifier")
    plan_name: str = Field(..., description="Plan display name")
    status: str = Field(..., description="pending, active or cancelled")
    shopify_subscription_id: Optional[str] = Field(default=None, description="Shopify AppSubscription GID")
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    trial_ends_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    pending_plan_id: Optional[str] = Field(default=None, description="Plan awaiting merchant approval")

    model_config = ConfigDict(from_attributes=True)
