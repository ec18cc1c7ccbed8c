"""
Tests for the activity service queries and writes.
"""
from datetime import datetime
import pytest
from daylog.core.exceptions import NotFoundError, ValidationError
from daylog.core.utils import as_bool
from daylog.models import Activity, ActivityDetail
from daylog.schemas.activity import DetailFields, SearchFilters
from daylog.services import activity_service


def _start(db, owner_id, title="Run", start_time=datetime(2024, 1, 1, 8, 0), **kwargs):
    return activity_service.create_activity(
        owner_id=owner_id, title=title, start_time=start_time, db=db, **kwargs
    )


def _add_detail(db, activity_id, recorded_at, **fields):
    detail = ActivityDetail(activity_id=activity_id, recorded_at=recorded_at, **fields)
    db.add(detail)
    db.commit()
    db.refresh(detail)
    return detail


def test_create_defaults(db, make_user):
    owner = make_user("alice")
    activity = _start(db, owner, description="Morning run", start_location="Park")

    assert activity.end_time is None
    assert activity.is_fixed_schedule is False
    assert activity.details == []
    assert activity.user_id == owner


def test_create_requires_title_and_start_time(db, make_user):
    owner = make_user("alice")
    with pytest.raises(ValidationError):
        _start(db, owner, title="")
    with pytest.raises(ValidationError):
        activity_service.create_activity(owner_id=owner, title="Run", start_time=None, db=db)


def test_get_round_trip(db, make_user):
    owner = make_user("alice")
    created = _start(db, owner, description="Morning run", start_location="Park", is_fixed_schedule=True)

    fetched = activity_service.get_activity(created.id, owner, db)
    assert fetched.title == "Run"
    assert fetched.description == "Morning run"
    assert fetched.start_time == datetime(2024, 1, 1, 8, 0)
    assert fetched.start_location == "Park"
    assert fetched.is_fixed_schedule is True
    assert fetched.details == []


def test_get_hides_other_users_activity(db, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    created = _start(db, alice)

    assert activity_service.get_activity(created.id, bob, db) is None
    assert activity_service.get_activity(created.id + 100, alice, db) is None


def test_complete_appends_detail(db, make_user):
    owner = make_user("alice")
    created = _start(db, owner)

    detail = activity_service.complete_with_details(
        created.id, owner, datetime(2024, 1, 1, 8, 30), "Home", DetailFields(mood="good"), db
    )

    fetched = activity_service.get_activity(created.id, owner, db)
    assert fetched.end_time == datetime(2024, 1, 1, 8, 30)
    assert fetched.end_location == "Home"
    assert [d.id for d in fetched.details] == [detail.id]
    assert fetched.details[0].mood == "good"


def test_complete_wrong_owner_writes_nothing(db, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    created = _start(db, alice)

    with pytest.raises(NotFoundError):
        activity_service.complete_with_details(
            created.id, bob, datetime(2024, 1, 1, 9, 0), None, DetailFields(mood="bad"), db
        )

    db.expire_all()
    assert db.query(ActivityDetail).count() == 0
    assert db.query(Activity).filter(Activity.id == created.id).one().end_time is None


def test_complete_rejects_end_before_start(db, make_user):
    owner = make_user("alice")
    created = _start(db, owner)

    with pytest.raises(ValidationError):
        activity_service.complete_with_details(
            created.id, owner, datetime(2024, 1, 1, 7, 0), None, DetailFields(), db
        )
    assert db.query(ActivityDetail).count() == 0


def test_complete_twice_keeps_history(db, make_user):
    owner = make_user("alice")
    created = _start(db, owner)

    activity_service.complete_with_details(
        created.id, owner, datetime(2024, 1, 1, 8, 30), None, DetailFields(mood="ok"), db
    )
    activity_service.complete_with_details(
        created.id, owner, datetime(2024, 1, 1, 9, 0), None, DetailFields(mood="great"), db
    )

    fetched = activity_service.get_activity(created.id, owner, db)
    assert fetched.end_time == datetime(2024, 1, 1, 9, 0)
    assert [d.mood for d in fetched.details] == ["great", "ok"]


def test_list_attaches_only_latest_detail(db, make_user):
    owner = make_user("alice")
    busy = _start(db, owner, title="Busy", start_time=datetime(2024, 1, 2, 8, 0))
    quiet = _start(db, owner, title="Quiet", start_time=datetime(2024, 1, 1, 8, 0))
    _add_detail(db, busy.id, datetime(2024, 1, 2, 9, 0), mood="first")
    newest = _add_detail(db, busy.id, datetime(2024, 1, 2, 11, 0), mood="newest")
    _add_detail(db, busy.id, datetime(2024, 1, 2, 10, 0), mood="middle")

    activities = activity_service.list_by_owner(owner, 10, 0, db)

    assert [a.title for a in activities] == ["Busy", "Quiet"]
    assert [d.id for d in activities[0].details] == [newest.id]
    assert activities[1].details == []
    assert quiet.id == activities[1].id


def test_latest_detail_tie_breaks_on_highest_id(db, make_user):
    owner = make_user("alice")
    created = _start(db, owner)
    same_time = datetime(2024, 1, 1, 9, 0)
    _add_detail(db, created.id, same_time, mood="a")
    second = _add_detail(db, created.id, same_time, mood="b")

    for _ in range(3):
        activities = activity_service.list_by_owner(owner, 10, 0, db)
        assert activities[0].details[0].id == second.id


def test_list_pagination_and_fallbacks(db, make_user):
    owner = make_user("alice")
    for hour in range(5):
        _start(db, owner, title=f"A{hour}", start_time=datetime(2024, 1, 1, hour, 0))

    page = activity_service.list_by_owner(owner, "2", "1", db)
    assert [a.title for a in page] == ["A3", "A2"]

    fallback = activity_service.list_by_owner(owner, "abc", "-4", db)
    assert [a.title for a in fallback] == ["A4", "A3", "A2", "A1", "A0"]


def test_sanitize_pagination():
    assert activity_service.sanitize_pagination(None, None) == (10, 0)
    assert activity_service.sanitize_pagination("abc", "-1") == (10, 0)
    assert activity_service.sanitize_pagination("5", 2) == (5, 2)
    assert activity_service.sanitize_pagination("99999999999999999999", "99999999999999999999") == (100, 1_000_000)


def test_list_for_date(db, make_user):
    owner = make_user("alice")
    _start(db, owner, title="Late", start_time=datetime(2024, 3, 5, 23, 59, 59))
    _start(db, owner, title="Midnight", start_time=datetime(2024, 3, 5, 0, 0, 0))
    _start(db, owner, title="Next day", start_time=datetime(2024, 3, 6, 0, 0, 0))
    _start(db, owner, title="Day before", start_time=datetime(2024, 3, 4, 23, 59, 59))

    activities = activity_service.list_for_date(owner, "2024-03-05", db)
    assert [a.title for a in activities] == ["Midnight", "Late"]


@pytest.mark.parametrize("bad_date", ["2024-13-01", "05/03/2024", "", None])
def test_list_for_date_rejects_malformed(db, make_user, bad_date):
    owner = make_user("alice")
    with pytest.raises(ValidationError):
        activity_service.list_for_date(owner, bad_date, db)


def test_list_fixed_schedules(db, make_user):
    owner = make_user("alice")
    _start(db, owner, title="Standup", start_time=datetime(2024, 1, 2, 9, 0), is_fixed_schedule=True)
    _start(db, owner, title="Gym", start_time=datetime(2024, 1, 1, 18, 0), is_fixed_schedule=True)
    _start(db, owner, title="Errand", start_time=datetime(2024, 1, 1, 12, 0))

    schedules = activity_service.list_fixed_schedules(owner, db)
    assert [s.title for s in schedules] == ["Gym", "Standup"]
    assert all(s.is_fixed_schedule for s in schedules)


def test_search_hour_zero_is_a_predicate(db, make_user):
    owner = make_user("alice")
    _start(db, owner, title="Midnight snack", start_time=datetime(2024, 1, 1, 0, 15))
    _start(db, owner, title="Breakfast", start_time=datetime(2024, 1, 1, 7, 0))

    results = activity_service.search_activities(owner, SearchFilters(hour=0), db=db)
    assert [a.title for a in results] == ["Midnight snack"]


def test_search_without_predicates_matches_list(db, make_user):
    owner = make_user("alice")
    _start(db, owner, title="One", start_time=datetime(2024, 1, 1, 8, 0))
    _start(db, owner, title="Two", start_time=datetime(2024, 1, 2, 8, 0))

    searched = activity_service.search_activities(owner, SearchFilters(), db=db)
    listed = activity_service.list_by_owner(owner, None, None, db)
    assert [a.id for a in searched] == [a.id for a in listed]


def test_search_combines_predicates(db, make_user):
    owner = make_user("alice")
    other = make_user("bob")
    _start(db, owner, title="Evening RUN", start_time=datetime(2024, 5, 1, 19, 0), start_location="River")
    _start(db, owner, title="Evening run", start_time=datetime(2023, 5, 1, 19, 0), start_location="River")
    _start(db, owner, title="Swim", start_time=datetime(2024, 5, 1, 19, 0), start_location="River")
    _start(db, other, title="Evening run", start_time=datetime(2024, 5, 1, 19, 0), start_location="River")

    results = activity_service.search_activities(
        owner, SearchFilters(year=2024, month=5, title="run", start_location="riv"), db=db
    )
    assert [a.title for a in results] == ["Evening RUN"]


def test_search_detail_fields_use_latest_detail(db, make_user):
    owner = make_user("alice")
    created = _start(db, owner)
    _add_detail(db, created.id, datetime(2024, 1, 1, 9, 0), related_people="Alice")
    _add_detail(db, created.id, datetime(2024, 1, 1, 10, 0), related_people="Bob", personal_feeling="Calm")

    assert activity_service.search_activities(owner, SearchFilters(related_people="alice"), db=db) == []
    matched = activity_service.search_activities(owner, SearchFilters(related_people="bob"), db=db)
    assert [a.id for a in matched] == [created.id]
    assert activity_service.search_activities(owner, SearchFilters(personal_feeling="CALM"), db=db)[0].id == created.id


def test_search_treats_wildcards_literally(db, make_user):
    owner = make_user("alice")
    _start(db, owner, title="100% effort")
    _start(db, owner, title="Half effort")

    results = activity_service.search_activities(owner, SearchFilters(title="%"), db=db)
    assert [a.title for a in results] == ["100% effort"]


def test_update_basic_info(db, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    created = _start(db, alice)

    updated = activity_service.update_basic_info(created.id, alice, "Long run", "10k", True, db=db)
    assert updated.title == "Long run"
    assert updated.is_fixed_schedule is True

    with pytest.raises(ValidationError):
        activity_service.update_basic_info(created.id, alice, "  ", db=db)
    with pytest.raises(NotFoundError):
        activity_service.update_basic_info(created.id, bob, "Hijack", db=db)


def test_update_basic_info_refreshes_updated_at_on_identical_values(db, make_user):
    alice = make_user("alice")
    created = _start(db, alice, description="easy")
    stale = datetime(2020, 1, 1)
    db.query(Activity).filter(Activity.id == created.id).update({"updated_at": stale})
    db.commit()

    updated = activity_service.update_basic_info(created.id, alice, "Run", "easy", db=db)
    assert updated.updated_at > stale


def test_update_detail_checks_ownership_chain(db, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    first = _start(db, alice, title="First")
    second = _start(db, alice, title="Second")
    detail = _add_detail(db, first.id, datetime(2024, 1, 1, 9, 0), mood="meh", energy_level="3")

    with pytest.raises(NotFoundError):
        activity_service.update_detail(detail.id, first.id, bob, {"mood": "x"}, db)
    with pytest.raises(NotFoundError):
        activity_service.update_detail(detail.id, second.id, alice, {"mood": "x"}, db)

    updated = activity_service.update_detail(detail.id, first.id, alice, {"mood": "happy"}, db)
    assert updated.mood == "happy"
    assert updated.energy_level == "3"


def test_delete_cascades_to_details(db, make_user):
    owner = make_user("alice")
    created = _start(db, owner)
    _add_detail(db, created.id, datetime(2024, 1, 1, 9, 0), mood="a")
    _add_detail(db, created.id, datetime(2024, 1, 1, 10, 0), mood="b")

    activity_service.delete_activity(created.id, owner, db)

    assert db.query(Activity).count() == 0
    assert db.query(ActivityDetail).filter(ActivityDetail.activity_id == created.id).count() == 0


def test_delete_other_users_activity(db, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    created = _start(db, alice)

    with pytest.raises(NotFoundError):
        activity_service.delete_activity(created.id, bob, db)
    assert db.query(Activity).count() == 1


@pytest.mark.parametrize("raw, expected", [
    (1, True), (0, False), (True, True), (None, False), (b"\x01", True), (b"\x00", False), ("0", False),
])
def test_as_bool(raw, expected):
    assert as_bool(raw) is expected
