"""
Utility functions for the application.
"""
from typing import Any, Dict
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_storage_datetime(value: datetime) -> datetime:
    """Normalize a datetime for storage: aware values are converted to naive UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def as_bool(value: Any) -> bool:
    """Map a storage-native flag (TINYINT 0/1, '0'/'1', bool) to a bool."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, bytes):
        # BIT(1) columns come back as raw bytes
        return int.from_bytes(value, "big") != 0
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "t", "yes")
    return bool(int(value))


def format_response(data: Any = None, message: str = "Success") -> Dict[str, Any]:
    """Format API response."""
    response = {"message": message}
    if data is not None:
        response["data"] = data
    return response


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"message": message}
    if details:
        response["details"] = details
    return response
