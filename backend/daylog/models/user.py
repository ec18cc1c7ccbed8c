"""
User model for authentication.
"""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from daylog.db.base import BaseModel


class User(BaseModel):
    """User model with immutable username."""
    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Relationships
    activities = relationship("Activity", back_populates="user", cascade="all, delete-orphan")
    custom_options = relationship("CustomOption", back_populates="user", cascade="all, delete-orphan")
