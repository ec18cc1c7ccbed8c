"""
Activity routes: start/end checkpoints, detail history, lists and search.
"""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from daylog.db.session import get_db
from daylog.schemas.activity import (
    ActivityCreate, ActivityEnd, ActivityUpdate, ActivityDetailUpdate, SearchFilters
)
from daylog.services import activity_service
from daylog.api.dependencies import get_current_user_id
from daylog.core.exceptions import NotFoundError
from daylog.core.utils import format_response

router = APIRouter(prefix="/activities", tags=["activities"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_activity(
    activity_data: ActivityCreate,
    owner_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Start a new activity."""
    activity = activity_service.create_activity(
        owner_id=owner_id,
        title=activity_data.title,
        start_time=activity_data.start_time,
        description=activity_data.description,
        start_location=activity_data.start_location,
        is_fixed_schedule=activity_data.is_fixed_schedule,
        db=db
    )
    return format_response(activity, "Activity started successfully.")


@router.get("")
def get_activities(
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    owner_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Paginated list, newest first, each with its latest detail."""
    activities = activity_service.list_by_owner(owner_id, limit, offset, db)
    return format_response(activities, "Activities fetched successfully.")


# Fixed paths must be registered before /{activity_id}
@router.get("/today")
def get_today_activities(
    date: Optional[str] = None,
    owner_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Activities for today (UTC), or for ?date=YYYY-MM-DD."""
    day = date if date is not None else datetime.now(timezone.utc).date().isoformat()
    activities = activity_service.list_for_date(owner_id, day, db)
    return format_response(activities, "Activities fetched successfully.")


@router.get("/fixed")
def get_fixed_schedules(
    owner_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """All fixed-schedule activities."""
    schedules = activity_service.list_fixed_schedules(owner_id, db)
    return format_response(schedules, "Fixed schedules fetched successfully.")


@router.get("/search")
def search_activities(
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    day: Optional[int] = Query(None, ge=1, le=31),
    hour: Optional[int] = Query(None, ge=0, le=23),
    title: Optional[str] = None,
    description: Optional[str] = None,
    start_location: Optional[str] = None,
    end_location: Optional[str] = None,
    related_people: Optional[str] = None,
    personal_feeling: Optional[str] = None,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    owner_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Search by date parts and case-insensitive text fragments."""
    filters = SearchFilters(
        year=year,
        month=month,
        day=day,
        hour=hour,
        title=title,
        description=description,
        start_location=start_location,
        end_location=end_location,
        related_people=related_people,
        personal_feeling=personal_feeling
    )
    activities = activity_service.search_activities(owner_id, filters, limit, offset, db)
    return format_response(activities, "Activities fetched successfully.")


@router.get("/{activity_id}")
def get_activity(
    activity_id: int,
    owner_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get one activity with its full detail history."""
    activity = activity_service.get_activity(activity_id, owner_id, db)
    if activity is None:
        raise NotFoundError(activity_service.ACTIVITY_NOT_FOUND)
    return format_response(activity, "Activity fetched successfully.")


@router.put("/{activity_id}/end")
def end_activity(
    activity_id: int,
    end_data: ActivityEnd,
    owner_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """End an activity and record a detail."""
    detail = activity_service.complete_with_details(
        activity_id=activity_id,
        owner_id=owner_id,
        end_time=end_data.end_time,
        end_location=end_data.end_location,
        details=end_data.detail_fields(),
        db=db
    )
    return format_response(detail, "Activity ended and details recorded successfully.")


@router.put("/{activity_id}")
def update_activity(
    activity_id: int,
    activity_data: ActivityUpdate,
    owner_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Edit title, description and fixed-schedule flag."""
    activity = activity_service.update_basic_info(
        activity_id=activity_id,
        owner_id=owner_id,
        title=activity_data.title,
        description=activity_data.description,
        is_fixed_schedule=activity_data.is_fixed_schedule,
        db=db
    )
    return format_response(activity, "Activity updated successfully.")


@router.put("/{activity_id}/details/{detail_id}")
def update_activity_detail(
    activity_id: int,
    detail_id: int,
    detail_data: ActivityDetailUpdate,
    owner_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Edit one detail record."""
    detail = activity_service.update_detail(
        detail_id=detail_id,
        activity_id=activity_id,
        owner_id=owner_id,
        fields=detail_data.model_dump(exclude_unset=True),
        db=db
    )
    return format_response(detail, "Activity details updated successfully.")


@router.delete("/{activity_id}")
def delete_activity(
    activity_id: int,
    owner_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Delete an activity and all of its details."""
    activity_service.delete_activity(activity_id, owner_id, db)
    return format_response(message="Activity deleted successfully.")
