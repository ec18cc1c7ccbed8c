"""
Custom option routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
from daylog.db.session import get_db
from daylog.schemas.custom_option import CustomOptionCreate, CustomOptionResponse
from daylog.services import custom_option_service
from daylog.api.dependencies import get_current_user_id
from daylog.core.utils import format_response

router = APIRouter(prefix="/custom-options", tags=["custom-options"])


@router.get("")
def get_custom_options(
    option_type: Optional[str] = None,
    owner_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get all custom options, optionally for one option type."""
    options = custom_option_service.list_options(owner_id, db, option_type=option_type)
    return format_response(
        [CustomOptionResponse.model_validate(o) for o in options],
        "Custom options fetched successfully."
    )


@router.post("", status_code=status.HTTP_201_CREATED)
def add_custom_option(
    option_data: CustomOptionCreate,
    owner_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Add a custom option."""
    option = custom_option_service.add_option(owner_id, option_data.option_type, option_data.value, db)
    return format_response(CustomOptionResponse.model_validate(option), "Custom option added successfully.")


@router.delete("/{option_id}")
def delete_custom_option(
    option_id: int,
    owner_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Delete a custom option."""
    custom_option_service.delete_option(option_id, owner_id, db)
    return format_response(message="Custom option deleted successfully.")
