"""
Activity model and its detail history.
"""
from sqlalchemy import Column, String, Text, DateTime, Boolean, ForeignKey, Integer, Index
from sqlalchemy.orm import relationship
from daylog.db.base import Base, BaseModel
from daylog.core.utils import utc_now


class Activity(BaseModel):
    """A start/end checkpoint owned by one user. end_time unset means in progress."""
    __tablename__ = "activities"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=True)
    start_location = Column(String(255), nullable=True)
    end_location = Column(String(255), nullable=True)
    is_fixed_schedule = Column(Boolean, default=False, nullable=False)

    # Relationships
    user = relationship("User", back_populates="activities")
    details = relationship(
        "ActivityDetail",
        back_populates="activity",
        cascade="all, delete-orphan",
        order_by=lambda: [ActivityDetail.recorded_at.desc(), ActivityDetail.id.desc()],
    )

    __table_args__ = (
        Index("idx_activities_user_start", "user_id", "start_time"),
    )


class ActivityDetail(Base):
    """Subjective check-in recorded against an activity."""
    __tablename__ = "activity_details"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    activity_id = Column(Integer, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False, index=True)
    mood = Column(String(100), nullable=True)
    energy_level = Column(String(50), nullable=True)
    environment_description = Column(Text, nullable=True)
    related_people = Column(Text, nullable=True)
    personal_feeling = Column(Text, nullable=True)
    recorded_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    # Relationships
    activity = relationship("Activity", back_populates="details")

    __table_args__ = (
        Index("idx_activity_details_latest", "activity_id", "recorded_at"),
    )
