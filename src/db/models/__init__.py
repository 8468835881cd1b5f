"""Database models package exports."""

from src.db.models.language import Language
from src.db.models.market import Market
from src.db.models.shop import Shop
from src.db.models.subscription import Subscription
from src.db.models.translation import Translation
from src.db.models.usage_counter import UsageCounter

__all__ = [
    "Language",
    "Market",
    "Shop",
    "Subscription",
    "Translation",
    "UsageCounter",
]
