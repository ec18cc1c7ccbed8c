"""
Activity service: checkpoints, their detail history, and the list/search queries.

Every operation is scoped to an owner id taken from the caller's token.
A row that exists but belongs to someone else is reported exactly like a
missing row.

List-style queries attach only the latest detail of each activity: the row
with the greatest recorded_at, ties broken by the highest id.
"""
import logging
import re
from datetime import date, datetime, timedelta
from typing import Any, List, Optional, Tuple
from sqlalchemy import and_, extract, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased
from daylog.core.config import settings
from daylog.core.exceptions import NotFoundError, ValidationError
from daylog.core.utils import utc_now
from daylog.models import Activity, ActivityDetail
from daylog.schemas.activity import (
    ActivityDetailResponse, ActivityResponse, DetailFields, SearchFilters
)

logger = logging.getLogger(__name__)

ACTIVITY_NOT_FOUND = "Activity not found or unauthorized."
DETAIL_NOT_FOUND = "Activity detail not found or unauthorized."
DAY_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


def _to_response(activity: Activity, details: List[ActivityDetail]) -> ActivityResponse:
    data = {column.name: getattr(activity, column.name) for column in Activity.__table__.columns}
    data["details"] = [ActivityDetailResponse.model_validate(d) for d in details]
    return ActivityResponse(**data)


def sanitize_pagination(limit: Any, offset: Any) -> Tuple[int, int]:
    """
    Coerce raw limit/offset values to non-negative ints.
    Non-numeric or negative values fall back to the defaults instead of erroring;
    values above the configured maximum are clamped to it.
    """
    default_limit = settings.DEFAULT_PAGE_LIMIT

    def _parse(value, default, maximum, name):
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            if value is not None:
                logger.warning("Invalid %s received: %r. Defaulting to %d.", name, value, default)
            return default
        if parsed < 0:
            logger.warning("Negative %s received: %r. Defaulting to %d.", name, value, default)
            return default
        if parsed > maximum:
            logger.warning("Oversized %s received: %r. Clamping to %d.", name, value, maximum)
            return maximum
        return parsed

    return (
        _parse(limit, default_limit, settings.MAX_PAGE_LIMIT, "limit"),
        _parse(offset, 0, settings.MAX_PAGE_OFFSET, "offset"),
    )


def parse_day(value: Optional[str]) -> date:
    """Parse a YYYY-MM-DD string."""
    if not isinstance(value, str) or not DAY_PATTERN.fullmatch(value):
        raise ValidationError("Date must be a YYYY-MM-DD string.")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD.")


def _with_latest_detail(db: Session):
    """
    Query of (Activity, latest ActivityDetail or None) pairs.

    Details are ranked per activity by recorded_at desc, id desc; the
    outer join keeps only rank 1, so activities without details still appear.
    """
    ranked = select(
        ActivityDetail,
        func.row_number().over(
            partition_by=ActivityDetail.activity_id,
            order_by=[ActivityDetail.recorded_at.desc(), ActivityDetail.id.desc()],
        ).label("detail_rank"),
    ).subquery("ranked_details")
    latest = aliased(ActivityDetail, ranked)

    query = db.query(Activity, latest).outerjoin(
        latest,
        and_(latest.activity_id == Activity.id, ranked.c.detail_rank == 1),
    )
    return query, latest


def _collect(rows) -> List[ActivityResponse]:
    return [_to_response(activity, [detail] if detail is not None else []) for activity, detail in rows]


def _get_owned(db: Session, activity_id: int, owner_id: int) -> Optional[Activity]:
    return db.query(Activity).filter(
        Activity.id == activity_id,
        Activity.user_id == owner_id
    ).first()


def create_activity(
    owner_id: int,
    title: Optional[str],
    start_time: Optional[datetime],
    description: Optional[str] = None,
    start_location: Optional[str] = None,
    is_fixed_schedule: Optional[bool] = False,
    db: Session = None
) -> ActivityResponse:
    """Start a new activity. No detail row is created."""
    if not title or not title.strip():
        raise ValidationError("Title and start time are required.")
    if start_time is None:
        raise ValidationError("Title and start time are required.")

    activity = Activity(
        user_id=owner_id,
        title=title,
        description=description,
        start_time=start_time,
        start_location=start_location,
        is_fixed_schedule=bool(is_fixed_schedule)
    )
    db.add(activity)
    db.commit()
    db.refresh(activity)

    logger.debug("Activity %s created for user %s", activity.id, owner_id)
    return _to_response(activity, [])


def complete_with_details(
    activity_id: int,
    owner_id: int,
    end_time: Optional[datetime],
    end_location: Optional[str],
    details: DetailFields,
    db: Session
) -> ActivityDetailResponse:
    """
    Stamp end time/location on the activity and append a detail row.

    Both writes are committed together or not at all. Completing an
    already-completed activity overwrites the end fields and appends
    another detail.
    """
    if end_time is None:
        raise ValidationError("Activity ID and end time are required.")

    try:
        activity = db.query(Activity).filter(
            Activity.id == activity_id,
            Activity.user_id == owner_id
        ).with_for_update().first()
        if not activity:
            raise NotFoundError(ACTIVITY_NOT_FOUND)
        if end_time < activity.start_time:
            raise ValidationError("End time cannot be earlier than start time.")

        now = utc_now()
        activity.end_time = end_time
        activity.end_location = end_location
        activity.updated_at = now

        detail = ActivityDetail(
            activity_id=activity.id,
            recorded_at=now,
            updated_at=now,
            **details.model_dump()
        )
        db.add(detail)
        db.commit()
    except (SQLAlchemyError, NotFoundError, ValidationError):
        db.rollback()
        raise

    db.refresh(detail)
    return ActivityDetailResponse.model_validate(detail)


def update_basic_info(
    activity_id: int,
    owner_id: int,
    title: Optional[str],
    description: Optional[str] = None,
    is_fixed_schedule: Optional[bool] = None,
    db: Session = None
) -> ActivityResponse:
    """Edit title, description and the fixed-schedule flag."""
    if not title or not title.strip():
        raise ValidationError("Title is required for updating activity.")

    activity = _get_owned(db, activity_id, owner_id)
    if not activity:
        raise NotFoundError(ACTIVITY_NOT_FOUND)

    activity.title = title
    activity.description = description
    if is_fixed_schedule is not None:
        activity.is_fixed_schedule = is_fixed_schedule
    activity.updated_at = utc_now()
    db.commit()
    db.refresh(activity)

    return _to_response(activity, list(activity.details))


def update_detail(
    detail_id: int,
    activity_id: int,
    owner_id: int,
    fields: dict,
    db: Session
) -> ActivityDetailResponse:
    """Edit the supplied fields of one detail record of an owned activity."""
    activity = _get_owned(db, activity_id, owner_id)
    if not activity:
        logger.debug("Detail update rejected: activity %s not owned by user %s", activity_id, owner_id)
        raise NotFoundError(DETAIL_NOT_FOUND)

    detail = db.query(ActivityDetail).filter(
        ActivityDetail.id == detail_id,
        ActivityDetail.activity_id == activity_id
    ).first()
    if not detail:
        logger.debug("Detail update rejected: detail %s not on activity %s", detail_id, activity_id)
        raise NotFoundError(DETAIL_NOT_FOUND)

    allowed = set(DetailFields.model_fields)
    for name, value in fields.items():
        if name in allowed:
            setattr(detail, name, value)
    detail.updated_at = utc_now()
    db.commit()
    db.refresh(detail)

    return ActivityDetailResponse.model_validate(detail)


def get_activity(activity_id: int, owner_id: int, db: Session) -> Optional[ActivityResponse]:
    """Activity with its full detail history, newest first; None if missing or not owned."""
    activity = _get_owned(db, activity_id, owner_id)
    if not activity:
        return None
    return _to_response(activity, list(activity.details))


def list_by_owner(owner_id: int, limit: Any, offset: Any, db: Session) -> List[ActivityResponse]:
    """Paginated activities, newest start first, each with its latest detail."""
    limit, offset = sanitize_pagination(limit, offset)
    query, _ = _with_latest_detail(db)
    rows = query.filter(
        Activity.user_id == owner_id
    ).order_by(
        Activity.start_time.desc(), Activity.id.desc()
    ).limit(limit).offset(offset).all()
    return _collect(rows)


def list_for_date(owner_id: int, day: Optional[str], db: Session) -> List[ActivityResponse]:
    """Activities whose stored (UTC) start_time falls on the given YYYY-MM-DD UTC day, oldest first."""
    start_of_day = datetime.combine(parse_day(day), datetime.min.time())
    next_day = start_of_day + timedelta(days=1)

    query, _ = _with_latest_detail(db)
    rows = query.filter(
        Activity.user_id == owner_id,
        Activity.start_time >= start_of_day,
        Activity.start_time < next_day
    ).order_by(
        Activity.start_time.asc(), Activity.id.asc()
    ).all()
    return _collect(rows)


def list_fixed_schedules(owner_id: int, db: Session) -> List[ActivityResponse]:
    """All fixed-schedule activities, oldest start first."""
    query, _ = _with_latest_detail(db)
    rows = query.filter(
        Activity.user_id == owner_id,
        Activity.is_fixed_schedule.is_(True)
    ).order_by(
        Activity.start_time.asc(), Activity.id.asc()
    ).all()
    return _collect(rows)


def search_activities(
    owner_id: int,
    filters: SearchFilters,
    limit: Any = None,
    offset: Any = None,
    db: Session = None
) -> List[ActivityResponse]:
    """
    AND-combine the supplied predicates.

    Date parts match start_time exactly. Text predicates are case-insensitive
    substring matches; related_people and personal_feeling match against the
    latest detail only. With no predicates this is list_by_owner.
    """
    limit, offset = sanitize_pagination(limit, offset)
    query, latest = _with_latest_detail(db)

    date_parts = {
        "year": extract("year", Activity.start_time),
        "month": extract("month", Activity.start_time),
        "day": extract("day", Activity.start_time),
        "hour": extract("hour", Activity.start_time),
    }
    text_columns = {
        "title": Activity.title,
        "description": Activity.description,
        "start_location": Activity.start_location,
        "end_location": Activity.end_location,
        "related_people": latest.related_people,
        "personal_feeling": latest.personal_feeling,
    }

    conditions = [Activity.user_id == owner_id]
    for name, value in filters.provided().items():
        if name in date_parts:
            conditions.append(date_parts[name] == value)
        elif name in text_columns:
            conditions.append(text_columns[name].icontains(value, autoescape=True))

    rows = query.filter(*conditions).order_by(
        Activity.start_time.desc(), Activity.id.desc()
    ).limit(limit).offset(offset).all()
    return _collect(rows)


def delete_activity(activity_id: int, owner_id: int, db: Session) -> None:
    """Delete an owned activity together with all of its details."""
    activity = _get_owned(db, activity_id, owner_id)
    if not activity:
        raise NotFoundError(ACTIVITY_NOT_FOUND)

    try:
        db.query(ActivityDetail).filter(
            ActivityDetail.activity_id == activity.id
        ).delete(synchronize_session=False)
        db.delete(activity)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
