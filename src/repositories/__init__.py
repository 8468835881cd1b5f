"""Repository layer package."""

from src.repositories.language_repo import LanguageRepo
from src.repositories.market_repo import MarketRepo
from src.repositories.shop_repo import ShopRepo
from src.repositories.subscription_repo import SubscriptionRepo
from src.repositories.translation_repo import TranslationRepo
from src.repositories.usage_repo import UsageRepo

__all__ = [
    "LanguageRepo",
    "MarketRepo",
    "ShopRepo",
    "SubscriptionRepo",
    "TranslationRepo",
    "UsageRepo",
]
