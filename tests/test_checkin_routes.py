import datetime

import pytest

from database.crud import crud_event, crud_signup, crud_slot

START = datetime.datetime(2099, 3, 7, 9, 0)


@pytest.fixture
def signup(db):
    event = db(crud_event.create_event, title="Spring Open", start_time=START)
    slot = db(crud_slot.create_slot, event.id, name="Mat Crew AM", quantity_total=3)
    return db(crud_signup.create_signup, slot.id, "Ann Mary Lee", "ann@example.com")


def test_checkin_page_keeps_event_scope(client):
    text = client.get("/checkin?event=42").text
    assert 'name="event" value="42"' in text


def test_search_requires_both_fields(client):
    response = client.post("/checkin", data={"last_name": "Lee"})
    assert response.status_code == 400
    assert "Please enter last name and email." in response.text


def test_search_finds_signup(client, signup):
    response = client.post("/checkin", data={"last_name": "lee", "email": "ANN@example.com"})
    assert response.status_code == 200
    assert "Mat Crew AM" in response.text
    assert "Not Checked In" in response.text
    assert f'action="/checkin/{signup.id}"' in response.text


def test_search_without_matches(client, signup):
    response = client.post("/checkin", data={"last_name": "smith", "email": "ann@example.com"})
    assert "No matching signups found." in response.text


def test_search_scoped_to_other_event(client, db, signup):
    other = db(crud_event.create_event, title="Banquet", start_time=START)
    response = client.post("/checkin", data={
        "last_name": "lee", "email": "ann@example.com", "event": str(other.id),
    })
    assert "No matching signups found." in response.text


def test_check_in_marks_attendance(client, db, signup):
    response = client.post(f"/checkin/{signup.id}", data={"last_name": "Lee", "email": "ann@example.com"})
    assert response.status_code == 200
    assert "You checked in at" in response.text

    stored = db(crud_signup.get_signup_by_id, signup.id)
    assert stored.checked_in is True
    assert stored.checked_in_at is not None


def test_check_in_requires_matching_identity(client, db, signup):
    response = client.post(f"/checkin/{signup.id}", data={"last_name": "Diaz", "email": "ann@example.com"})
    assert response.status_code == 404
    assert db(crud_signup.get_signup_by_id, signup.id).checked_in is False


def test_check_in_refused_for_deleted_event(client, db, signup):
    event_id = db(crud_signup.get_signup_by_id, signup.id).slot.event_id
    db(crud_event.soft_delete_event, event_id)

    response = client.post(f"/checkin/{signup.id}", data={"last_name": "Lee", "email": "ann@example.com"})
    assert response.status_code == 404
    assert "Error checking in." in response.text
    assert db(crud_signup.get_signup_by_id, signup.id).checked_in is False


def test_check_in_refused_outside_event_scope(client, db, signup):
    other = db(crud_event.create_event, title="Banquet", start_time=START)
    response = client.post(f"/checkin/{signup.id}", data={
        "last_name": "Lee", "email": "ann@example.com", "event": str(other.id),
    })
    assert response.status_code == 404
    assert db(crud_signup.get_signup_by_id, signup.id).checked_in is False
