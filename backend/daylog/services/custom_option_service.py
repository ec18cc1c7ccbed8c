"""
Custom option service for per-user option lists.
"""
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
from daylog.core.exceptions import ConflictError, NotFoundError, ValidationError
from daylog.models import CustomOption


def list_options(owner_id: int, db: Session, option_type: Optional[str] = None) -> List[CustomOption]:
    """Get the user's options ordered by type, then value."""
    query = db.query(CustomOption).filter(CustomOption.user_id == owner_id)
    if option_type is not None:
        query = query.filter(CustomOption.option_type == option_type)
    return query.order_by(CustomOption.option_type.asc(), CustomOption.value.asc()).all()


def add_option(owner_id: int, option_type: Optional[str], value: Optional[str], db: Session) -> CustomOption:
    """Add an option. An existing (type, value) pair for the user is a conflict, never overwritten."""
    if not option_type or not option_type.strip() or not value or not value.strip():
        raise ValidationError("Option type and value are required.")

    existing = db.query(CustomOption).filter(
        CustomOption.user_id == owner_id,
        CustomOption.option_type == option_type,
        CustomOption.value == value
    ).first()
    if existing:
        raise ConflictError("Option already exists for this type and user.")

    option = CustomOption(user_id=owner_id, option_type=option_type, value=value)
    db.add(option)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Option already exists for this type and user.")
    db.refresh(option)

    return option


def delete_option(option_id: int, owner_id: int, db: Session) -> None:
    """Delete an option owned by the user."""
    deleted = db.query(CustomOption).filter(
        CustomOption.id == option_id,
        CustomOption.user_id == owner_id
    ).delete(synchronize_session=False)
    if not deleted:
        raise NotFoundError("Custom option not found or unauthorized.")
    db.commit()
