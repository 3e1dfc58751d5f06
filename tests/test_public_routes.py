import datetime

from database.crud import crud_event, crud_signup, crud_slot

START = datetime.datetime(2099, 3, 7, 9, 0)


def test_home_lists_public_events(client, db):
    db(crud_event.create_event, title="Spring Open", start_time=START, location="Main Gym")
    db(crud_event.create_event, title="Staff Only", start_time=START, is_public=False)
    deleted = db(crud_event.create_event, title="Cancelled Meet", start_time=START)
    db(crud_event.soft_delete_event, deleted.id)

    response = client.get("/")
    assert response.status_code == 200
    assert "Spring Open" in response.text
    assert "Main Gym" in response.text
    assert "Staff Only" not in response.text
    assert "Cancelled Meet" not in response.text


def test_home_without_events(client):
    response = client.get("/")
    assert "No events are currently available." in response.text


def test_event_titles_are_escaped(client, db):
    db(crud_event.create_event, title="<script>alert(1)</script>", start_time=START)
    response = client.get("/")
    assert "<script>alert(1)</script>" not in response.text
    assert "&lt;script&gt;" in response.text


def test_event_page_shows_grouped_slots_and_stats(client, db):
    event = db(crud_event.create_event, title="Spring Open", start_time=START)
    grill = db(crud_slot.create_slot, event.id, name="Grill", category="concessions", quantity_total=2)
    db(crud_slot.create_slot, event.id, name="Setup Crew", category="volunteer", quantity_total=2)
    db(crud_signup.create_signup, grill.id, "Ann Lee", "ann@example.com")

    response = client.get(f"/events/{event.id}")
    text = response.text
    assert response.status_code == 200
    assert "1 signups • 4 total spots (25% full)" in text
    assert text.index("Volunteers") < text.index("Concessions")
    assert "1/2 filled" in text
    assert "1 spots left" in text
    assert "Sat, Mar 7, 9:00 AM" in text


def test_event_page_marks_full_slots(client, db):
    event = db(crud_event.create_event, title="Spring Open", start_time=START)
    slot = db(crud_slot.create_slot, event.id, name="Grill", quantity_total=1)
    db(crud_signup.create_signup, slot.id, "Ann Lee", "ann@example.com")

    text = client.get(f"/events/{event.id}").text
    assert "1/1 filled" in text
    assert "badge-full" in text
    assert "disabled>Full</button>" in text


def test_event_page_preselects_slot(client, db):
    event = db(crud_event.create_event, title="Spring Open", start_time=START)
    slot = db(crud_slot.create_slot, event.id, name="Grill", quantity_total=2)

    text = client.get(f"/events/{event.id}?slot={slot.id}").text
    assert "Signing up for: Grill" in text
    assert f'name="slot_id" value="{slot.id}"' in text


def test_event_page_without_slots(client, db):
    event = db(crud_event.create_event, title="Spring Open", start_time=START)
    assert "No slots have been created yet." in client.get(f"/events/{event.id}").text


def test_unknown_or_deleted_event_is_404(client, db):
    assert client.get("/events/9999").status_code == 404
    event = db(crud_event.create_event, title="Spring Open", start_time=START)
    db(crud_event.soft_delete_event, event.id)
    response = client.get(f"/events/{event.id}")
    assert response.status_code == 404
    assert "Event not found." in response.text


def test_signup_flow(client, db):
    event = db(crud_event.create_event, title="Spring Open", start_time=START)
    slot = db(crud_slot.create_slot, event.id, name="Grill", quantity_total=1)

    response = client.post(f"/events/{event.id}/signup", data={
        "slot_id": str(slot.id), "full_name": "Ann Lee", "email": "ann@example.com", "note": "vegan",
    })
    assert response.status_code == 200
    assert "signed up. Thank you!" in response.text
    assert "1/1 filled" in response.text
    # Имя и email остаются в форме, заметка очищается
    assert 'value="Ann Lee"' in response.text
    assert "vegan" not in response.text

    response = client.post(f"/events/{event.id}/signup", data={
        "slot_id": str(slot.id), "full_name": "Bo Diaz", "email": "bo@example.com",
    })
    assert response.status_code == 409
    assert "This slot is full." in response.text


def test_signup_validation(client, db):
    event = db(crud_event.create_event, title="Spring Open", start_time=START)
    slot = db(crud_slot.create_slot, event.id, name="Grill")

    response = client.post(f"/events/{event.id}/signup", data={"full_name": "Ann", "email": "a@b.c"})
    assert response.status_code == 400
    assert "Please select a slot above before submitting." in response.text

    response = client.post(f"/events/{event.id}/signup", data={"slot_id": str(slot.id), "full_name": "Ann"})
    assert response.status_code == 400
    assert "Name and email are required to sign up." in response.text

    other = db(crud_event.create_event, title="Banquet", start_time=START)
    response = client.post(f"/events/{other.id}/signup", data={
        "slot_id": str(slot.id), "full_name": "Ann", "email": "a@b.c",
    })
    assert response.status_code == 400


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}
