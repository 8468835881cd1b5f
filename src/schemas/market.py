"""Pydantic schemas for Market resources"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MarketRead(BaseModel):
    """Schema returned when reading a mirrored market."""

    id: UUID = Field(..., description="Local identifier")
    shopify_id: str = Field(..., description="Shopify market GID")
    name: str = Field(..., description="Market name")
    enabled: bool = Field(..., description="Whether the market is enabled")
    updated_at: Optional[datetime] = Field(default=None, description="Last sync")

    model_config = ConfigDict(from_attributes=True)
