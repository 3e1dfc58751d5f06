"""CRUD-функции поверх настоящей SQLite базы."""
import datetime

import pytest

from database.crud import crud_event, crud_signup, crud_slot
from database.crud.errors import NotFoundError, SlotFullError

START = datetime.datetime(2099, 3, 7, 9, 0)


@pytest.fixture
def event(db):
    return db(crud_event.create_event, title="Spring Open", start_time=START, location="Main Gym")


def test_list_events_hides_deleted(db, event):
    other = db(crud_event.create_event, title="Banquet", start_time=START - datetime.timedelta(days=1))
    db(crud_event.soft_delete_event, event.id)

    assert [ev.id for ev in db(crud_event.list_events)] == [other.id]
    assert [ev.id for ev in db(crud_event.list_events, include_deleted=True)] == [other.id, event.id]
    assert db(crud_event.get_event_by_id, event.id) is None

    assert db(crud_event.restore_event, event.id)
    assert db(crud_event.get_event_by_id, event.id).deleted_at is None


def test_list_public_events_skips_private(db, event):
    db(crud_event.create_event, title="Staff Meeting", start_time=START, is_public=False)
    assert [ev.title for ev in db(crud_event.list_public_events)] == ["Spring Open"]


def test_update_event(db, event):
    updated = db(crud_event.update_event, event.id, title="Spring Open II", location=None)
    assert updated.title == "Spring Open II"
    assert updated.location is None
    with pytest.raises(NotFoundError):
        db(crud_event.update_event, 9999, title="x")


def test_slots_ordered_with_untimed_last(db, event):
    db(crud_slot.create_slot, event.id, name="Cleanup")
    db(crud_slot.create_slot, event.id, name="Setup", start_time=START - datetime.timedelta(hours=1))
    db(crud_slot.create_slot, event.id, name="Door", start_time=START)

    slots = db(crud_slot.get_slots_for_event, event.id)
    assert [s.name for s in slots] == ["Setup", "Door", "Cleanup"]
    assert all(s.signups == [] for s in slots)


def test_create_slot_clamps_quantity(db, event):
    slot = db(crud_slot.create_slot, event.id, name="Grill", quantity_total=0)
    assert slot.quantity_total == 1


def test_create_slot_for_deleted_event(db, event):
    db(crud_event.soft_delete_event, event.id)
    with pytest.raises(NotFoundError):
        db(crud_slot.create_slot, event.id, name="Grill")


def test_signup_respects_capacity(db, event):
    slot = db(crud_slot.create_slot, event.id, name="Grill", quantity_total=2)
    first = db(crud_signup.create_signup, slot.id, " Ann Lee ", " Ann@Example.com ")
    db(crud_signup.create_signup, slot.id, "Bo Diaz", "bo@example.com", note="late")

    assert first.full_name == "Ann Lee"
    assert first.email == "ann@example.com"
    with pytest.raises(SlotFullError):
        db(crud_signup.create_signup, slot.id, "Cy Young", "cy@example.com")

    slots = db(crud_slot.get_slots_for_event, event.id)
    assert len(slots[0].signups) == 2


def test_signup_rejects_slot_of_other_event(db, event):
    other = db(crud_event.create_event, title="Banquet", start_time=START)
    slot = db(crud_slot.create_slot, other.id, name="Tables")
    with pytest.raises(NotFoundError):
        db(crud_signup.create_signup, slot.id, "Ann Lee", "ann@example.com", event_id=event.id)


def test_search_signups_by_email_and_last_name(db, event):
    slot = db(crud_slot.create_slot, event.id, name="Grill", quantity_total=5)
    db(crud_signup.create_signup, slot.id, "Ann Mary Lee", "family@example.com")
    db(crud_signup.create_signup, slot.id, "Bo Diaz", "family@example.com")

    found = db(crud_signup.search_signups, "FAMILY@example.com", "le")
    assert [s.full_name for s in found] == ["Ann Mary Lee"]
    assert found[0].slot.name == "Grill"
    assert db(crud_signup.search_signups, "family@example.com", "mary") == []


def test_search_signups_scoped_to_event(db, event):
    other = db(crud_event.create_event, title="Banquet", start_time=START)
    for ev in (event, other):
        slot = db(crud_slot.create_slot, ev.id, name=f"Slot {ev.id}")
        db(crud_signup.create_signup, slot.id, "Ann Lee", "ann@example.com")

    assert len(db(crud_signup.search_signups, "ann@example.com", "lee")) == 2
    scoped = db(crud_signup.search_signups, "ann@example.com", "lee", event_id=other.id)
    assert [s.slot.event_id for s in scoped] == [other.id]


def test_check_in_keeps_first_timestamp(db, event):
    slot = db(crud_slot.create_slot, event.id, name="Grill")
    signup = db(crud_signup.create_signup, slot.id, "Ann Lee", "ann@example.com")

    first = db(crud_signup.check_in, signup.id)
    assert first.checked_in is True
    assert first.checked_in_at is not None
    second = db(crud_signup.check_in, signup.id)
    assert second.checked_in_at == first.checked_in_at

    undone = db(crud_signup.undo_check_in, signup.id)
    assert undone.checked_in is False
    assert undone.checked_in_at is None

    with pytest.raises(NotFoundError):
        db(crud_signup.check_in, 9999)


def test_delete_slot_removes_signups(db, event):
    slot = db(crud_slot.create_slot, event.id, name="Grill", quantity_total=3)
    signup = db(crud_signup.create_signup, slot.id, "Ann Lee", "ann@example.com")

    assert db(crud_slot.delete_slot, slot.id) == event.id
    assert db(crud_signup.get_signup_by_id, signup.id) is None
    assert db(crud_slot.delete_slot, slot.id) is None


def test_delete_signup(db, event):
    slot = db(crud_slot.create_slot, event.id, name="Grill")
    signup = db(crud_signup.create_signup, slot.id, "Ann Lee", "ann@example.com")
    assert db(crud_signup.delete_signup, signup.id) == event.id
    assert db(crud_signup.delete_signup, signup.id) is None


def test_last_name_matches():
    assert crud_signup.last_name_matches("Ann Mary Lee", "LE")
    assert not crud_signup.last_name_matches("Ann Mary Lee", "mary")
    assert not crud_signup.last_name_matches("", "lee")


def test_update_slot(db, event):
    slot = db(crud_slot.create_slot, event.id, name="Grill", quantity_total=2)
    updated = db(crud_slot.update_slot, slot.id, name="Big Grill", quantity_total=-3)
    assert updated.name == "Big Grill"
    assert updated.quantity_total == 1
    with pytest.raises(NotFoundError):
        db(crud_slot.update_slot, 9999, name="x")


def test_get_signup_by_id_hides_deleted_events(db, event):
    slot = db(crud_slot.create_slot, event.id, name="Grill")
    signup = db(crud_signup.create_signup, slot.id, "Ann Lee", "ann@example.com")
    db(crud_event.soft_delete_event, event.id)

    assert db(crud_signup.get_signup_by_id, signup.id, include_deleted=False) is None
    assert db(crud_signup.get_signup_by_id, signup.id).id == signup.id


def test_all_slots_with_signups_for_deleted_events(db, event):
    db(crud_slot.create_slot, event.id, name="Grill")
    db(crud_event.soft_delete_event, event.id)

    assert db(crud_slot.get_all_slots_with_signups) == []
    assert [s.name for s in db(crud_slot.get_all_slots_with_signups, include_deleted=True)] == ["Grill"]
