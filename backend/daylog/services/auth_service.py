"""
Auth service: account registration, login and token validation.
"""
import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from daylog.core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from daylog.core.security import (
    create_access_token, decode_access_token, get_password_hash, verify_password
)
from daylog.models import User
from daylog.schemas.user import Token

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."


def _require_credentials(username: Optional[str], password: Optional[str]):
    if not username or not username.strip() or not password:
        raise ValidationError("Username and password are required.")


def issue_token(user: User) -> Token:
    """Sign a session token for the user."""
    access_token = create_access_token(
        data={"sub": str(user.id), "user_id": user.id, "username": user.username}
    )
    return Token(access_token=access_token, user_id=user.id, username=user.username)


def register_user(username: Optional[str], password: Optional[str], db: Session) -> Token:
    """Create an account and return a session token for it."""
    _require_credentials(username, password)

    existing_user = db.query(User).filter(User.username == username).first()
    if existing_user:
        raise ConflictError("User already exists.")

    new_user = User(
        username=username,
        password_hash=get_password_hash(password)
    )
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same name
        db.rollback()
        raise ConflictError("User already exists.")
    db.refresh(new_user)

    logger.info("Registered user %s", new_user.id)
    return issue_token(new_user)


def login_user(username: Optional[str], password: Optional[str], db: Session) -> Token:
    """Check credentials and return a session token."""
    _require_credentials(username, password)

    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password, user.password_hash):
        raise AuthenticationError(INVALID_CREDENTIALS)

    return issue_token(user)


def resolve_owner(token: Optional[str]) -> int:
    """Validate a session token and return the user id it carries."""
    if not token:
        raise AuthenticationError("No token, authorization denied.")

    payload = decode_access_token(token)
    if not payload:
        raise AuthenticationError("Token is not valid.")

    user_id = payload.get("user_id", payload.get("sub"))
    try:
        return int(user_id)
    except (TypeError, ValueError):
        raise AuthenticationError("Token is not valid.")


def get_user(user_id: int, db: Session) -> User:
    """Fetch the account behind a token."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found.")
    return user
