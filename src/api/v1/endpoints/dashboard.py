"""Dashboard summary endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db_session, get_shop
from src.schemas.billing import SubscriptionRead
from src.schemas.language import LanguageRead
from src.services import billing_service, language_service, translation_service
from src.services.usage import get_usage_stats


router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
async def dashboard(shop: str = Depends(get_shop), db: AsyncSession = Depends(get_db_session)):
    subscription = await billing_service.get_subscription(db, shop)
    stats = await translation_service.get_translation_stats(db, shop)
    languages = await language_service.get_languages(db, shop)
    usage = await get_usage_stats(db, shop)

    published = stats["by_status"].get("published", 0)
    completion = round(published / stats["total"] * 100) if stats["total"] else 0
    return {
        "subscription": SubscriptionRead.model_validate(subscription) if subscription else None,
        "stats": {**stats, "completion_percentage": completion},
        "languages": [LanguageRead.model_validate(lang) for lang in languages],
        "usage": usage,
    }
