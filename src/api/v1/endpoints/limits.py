"""Endpoints exposing current plan caps and usage."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db_session, get_shop
from src.repositories.language_repo import LanguageRepo
from src.repositories.usage_repo import current_period
from src.services.entitlements import check_usage_limits


router = APIRouter(prefix="/limits", tags=["limits"])


@router.get("/current")
async def current_limits(
    shop: str = Depends(get_shop), db: AsyncSession = Depends(get_db_session)
):
    check = await check_usage_limits(db, shop)
    if check.plan is None:
        return {"subscribed": False, **check.to_dict()}

    return {
        "subscribed": True,
        "period": current_period(),
        "languages": await LanguageRepo(db).count_for_shop(shop),
        **check.to_dict(),
    }
