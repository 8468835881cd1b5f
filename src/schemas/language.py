"""Pydantic schemas for Language resources"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class LanguageCreate(BaseModel):
    """Schema for adding a language to a shop."""

    code: str = Field(..., min_length=2, max_length=16, description="Locale code, e.g. fr or pt-BR")
    name: str = Field(..., min_length=1, description="Display name")
    is_default: bool = Field(default=False, description="Make this the shop's default language")


class LanguageUpdate(BaseModel):
    """Schema for renaming a language or changing the default."""

    name: Optional[str] = Field(default=None, min_length=1, description="Display name")
    is_default: Optional[bool] = Field(default=None, description="Default language flag")


class LanguageRead(BaseModel):
    """Schema returned when reading a language."""

    id: UUID = Field(..., description="Language identifier")
    code: str = Field(..., description="Locale code")
    name: str = Field(..., description="Display name")
    is_default: bool = Field(..., description="Default language flag")
    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True)
