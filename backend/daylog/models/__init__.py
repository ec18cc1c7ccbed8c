"""Models package - Import all models for SQLAlchemy registration."""
from daylog.models.user import User
from daylog.models.activity import Activity, ActivityDetail
from daylog.models.custom_option import CustomOption

__all__ = [
    "User",
    "Activity",
    "ActivityDetail",
    "CustomOption",
]
