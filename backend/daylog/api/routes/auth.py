"""
Authentication routes for register and login.

Logout is client-side: tokens are stateless and expire on their own.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from daylog.db.session import get_db
from daylog.schemas.user import UserCredentials
from daylog.services import auth_service
from daylog.core.utils import format_response

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(credentials: UserCredentials, db: Session = Depends(get_db)):
    """Register a new user and return a token."""
    token = auth_service.register_user(credentials.username, credentials.password, db)
    return format_response(token, "User registered successfully.")


@router.post("/login")
def login(credentials: UserCredentials, db: Session = Depends(get_db)):
    """Login and get JWT token."""
    token = auth_service.login_user(credentials.username, credentials.password, db)
    return format_response(token, "Logged in successfully.")
