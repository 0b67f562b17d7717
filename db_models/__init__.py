"""ORM models. Importing the package registers every table on Base.metadata."""
from db_models.user import User, UserRole
from db_models.apar import Apar, AparType, AparStatus
from db_models.inspection import Inspection, OverallStatus
from db_models.inspection_item import InspectionItem, ItemType, ItemStatus

__all__ = [
    "User",
    "UserRole",
    "Apar",
    "AparType",
    "AparStatus",
    "Inspection",
    "OverallStatus",
    "InspectionItem",
    "ItemType",
    "ItemStatus",
]
