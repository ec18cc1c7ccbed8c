"""
User routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from daylog.db.session import get_db
from daylog.schemas.user import UserResponse
from daylog.services import auth_service
from daylog.api.dependencies import get_current_user_id
from daylog.core.utils import format_response

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me")
def get_current_user_info(
    owner_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get current user information."""
    user = auth_service.get_user(owner_id, db)
    return format_response(UserResponse.model_validate(user), "User fetched successfully.")
