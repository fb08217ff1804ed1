from app.db.models.item import Item, ItemCategory, ItemCondition, ModerationStatus
from app.db.models.user import User

__all__ = ["Item", "ItemCategory", "ItemCondition", "ModerationStatus", "User"]
