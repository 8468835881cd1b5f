"""Version 1 API router."""
from fastapi import APIRouter

from src.api.v1.endpoints import (
    billing,
    content,
    dashboard,
    languages,
    limits,
    markets,
    translations,
    webhooks,
)

api_router = APIRouter()
api_router.include_router(billing.router)
api_router.include_router(limits.router)
api_router.include_router(languages.router)
api_router.include_router(translations.router)
api_router.include_router(content.router)
api_router.include_router(markets.router)
api_router.include_router(dashboard.router)
api_router.include_router(webhooks.router)
