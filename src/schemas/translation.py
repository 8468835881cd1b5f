"""Pydantic schemas for Translation resources"""
from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

ResourceType = Literal["product", "collection", "page"]
TranslationStatus = Literal["draft", "review", "published"]


class TranslationKey(BaseModel):
    """Identifies one translated field of a resource."""

    resource_type: ResourceType = Field(..., description="Shopify resource kind")
    resource_id: str = Field(..., min_length=1, description="Shopify resource GID")
    field: str = Field(..., min_length=1, description="Translated field name")
    language_code: str = Field(..., min_length=2, description="Target language code")
    market_id: Optional[str] = Field(default=None, description="Market GID, if market-specific")


class TranslationSave(TranslationKey):
    """Schema for creating or overwriting a translation."""

    translated_value: str = Field(..., description="Translated text or HTML")
    status: TranslationStatus = Field(default="draft", description="Workflow status")


class TranslationUpdate(TranslationKey):
    """Schema for editing an existing translation."""

    translated_value: str = Field(..., description="Translated text or HTML")
    status: TranslationStatus = Field(default="draft", description="Workflow status")


class TranslationBulkSave(BaseModel):
    translations: List[TranslationSave] = Field(..., min_length=1)


class SyncRequest(BaseModel):
    """Push published translations of one language to Shopify."""

    resource_type: str = Field(..., description="Shopify resource kind")
    resource_id: str = Field(..., min_length=1, description="Shopify resource GID")
    language_code: str = Field(..., min_length=2, description="Language to sync")
    market_id: Optional[str] = Field(default=None, description="Restrict to one market")


class AutoTranslateRequest(BaseModel):
    resource_type: ResourceType = Field(..., description="Shopify resource kind")
    resource_id: str = Field(..., min_length=1, description="Shopify resource GID")
    language_code: str = Field(..., min_length=2, description="Target language code")
    market_id: Optional[str] = Field(default=None, description="Market GID, if market-specific")


class TranslationRead(BaseModel):
    """Schema returned when reading a translation."""

    id: UUID = Field(..., description="Translation identifier")
    resource_type: str
    resource_id: str
    field: str
    language_code: str
    market_id: Optional[str] = None
    translated_value: str
    status: str
    auto_translated: bool
    updated_at: Optional[datetime] = Field(default=None, description="Last change")

    model_config = ConfigDict(from_attributes=True)
