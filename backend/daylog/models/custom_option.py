"""
Custom option model for per-user option vocabularies (e.g. moods).
"""
from sqlalchemy import Column, String, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from daylog.db.base import BaseModel


class CustomOption(BaseModel):
    """One value within a user's named option list."""
    __tablename__ = "custom_options"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    option_type = Column(String(50), nullable=False)
    value = Column(String(255), nullable=False)

    # Relationships
    user = relationship("User", back_populates="custom_options")

    # Unique constraint: a value appears once per option type per user
    __table_args__ = (
        UniqueConstraint('user_id', 'option_type', 'value', name='uq_user_option_type_value'),
    )
