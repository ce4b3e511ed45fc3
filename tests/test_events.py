import asyncio
import logging
from datetime import timedelta

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.api.events import service as event_service
from app.api.events.models import EventParticipantsLink
from app.api.users import service as user_service
from app.api.users.models import UserEventsLink
from app.core.auth.jwt import create_access_token
from app.response import CustomHTTPException

from conftest import EVENT, bearer, register


def participant_names(event):
    return [p["name"] for p in event["participants"]]


def test_create_event_makes_creator_a_participant(client, ann, park_cleanup, count_rows):
    assert park_cleanup["title"] == "Park Cleanup"
    assert park_cleanup["creator"] == {"id": ann["id"], "name": "Ann", "email": "ann@x.com"}
    assert participant_names(park_cleanup) == ["Ann"]
    assert park_cleanup["status"] == "upcoming"
    assert park_cleanup["date"].startswith("2025-06-01T10:00:00")

    assert count_rows(
        UserEventsLink,
        UserEventsLink.user_id == ann["id"],
        UserEventsLink.event_id == park_cleanup["id"],
    ) == 2
    profile = client.get("/api/auth/profile", headers=ann["headers"]).json()["data"]
    assert [e["id"] for e in profile["joinedEvents"]] == [park_cleanup["id"]]
    assert [e["id"] for e in profile["createdEvents"]] == [park_cleanup["id"]]


def test_create_event_requires_all_fields(client, ann):
    response = client.post(
        "/api/events", json={**EVENT, "location": ""}, headers=ann["headers"]
    )

    assert response.status_code == 400
    assert response.json()["message"] == "All fields are required"
    assert list(response.json()["errors"]) == ["location"]


def test_create_event_requires_authentication(client):
    response = client.post("/api/events", json=EVENT)

    assert response.status_code == 401


def test_list_events_is_ordered_by_date(client, ann):
    for title, date in [("B", "2025-08-01T10:00"), ("A", "2025-02-01T10:00"), ("C", "2025-12-01T10:00")]:
        client.post(
            "/api/events", json={**EVENT, "title": title, "date": date}, headers=ann["headers"]
        )

    response = client.get("/api/events")

    assert response.status_code == 200
    assert [e["title"] for e in response.json()["data"]] == ["A", "B", "C"]
    assert response.json()["data"][0]["participants"][0]["email"] == "ann@x.com"


def test_list_events_filters_by_category(client, ann):
    client.post("/api/events", json=EVENT, headers=ann["headers"])
    client.post(
        "/api/events", json={**EVENT, "category": "Education"}, headers=ann["headers"]
    )

    response = client.get("/api/events", params={"category": "Education"})

    assert [e["category"] for e in response.json()["data"]] == ["Education"]


def test_get_event(client, park_cleanup):
    response = client.get(f"/api/events/{park_cleanup['id']}")

    assert response.status_code == 200
    assert response.json()["data"]["id"] == park_cleanup["id"]


def test_get_missing_event_is_not_found(client):
    response = client.get("/api/events/424242")

    assert response.status_code == 404
    assert response.json()["message"] == "Event not found"


def test_creator_updates_only_editable_fields(client, ann, park_cleanup):
    response = client.put(
        f"/api/events/{park_cleanup['id']}",
        json={
            "title": "Lake Cleanup",
            "status": "ongoing",
            "date": "2030-01-01T00:00",
            "category": "Other",
        },
        headers=ann["headers"],
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["title"] == "Lake Cleanup"
    assert data["status"] == "ongoing"
    assert data["description"] == park_cleanup["description"]
    assert data["date"] == park_cleanup["date"]
    assert data["category"] == "Environmental"


@pytest.mark.parametrize("field", ["title", "description", "location"])
def test_update_cannot_blank_required_fields(client, ann, park_cleanup, field):
    response = client.put(
        f"/api/events/{park_cleanup['id']}",
        json={field: "  ", "status": "ongoing"},
        headers=ann["headers"],
    )

    assert response.status_code == 400
    assert field in response.json()["errors"]
    event = client.get(f"/api/events/{park_cleanup['id']}").json()["data"]
    assert event[field] == park_cleanup[field]
    assert event["status"] == "upcoming"


def test_non_creator_cannot_update_event(client, bob, park_cleanup):
    response = client.put(
        f"/api/events/{park_cleanup['id']}",
        json={"title": "Hijacked"},
        headers=bob["headers"],
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Not authorized to update this event"
    stored = client.get(f"/api/events/{park_cleanup['id']}").json()["data"]
    assert stored["title"] == "Park Cleanup"
    assert stored["updatedAt"] == park_cleanup["updatedAt"]


def test_update_missing_event_is_not_found(client, ann):
    response = client.put("/api/events/424242", json={"title": "x"}, headers=ann["headers"])

    assert response.status_code == 404


def test_end_to_end_join_flow(client):
    ann = register(client, "Ann", "ann@x.com", "pw123456")
    created = client.post("/api/events", json=EVENT, headers=bearer(ann["token"]))
    assert created.status_code == 201
    event = created.json()["data"]
    assert event["creator"]["name"] == "Ann"
    assert participant_names(event) == ["Ann"]

    bob = register(client, "Bob", "bob@x.com")
    joined = client.post(f"/api/events/{event['id']}/join", headers=bearer(bob["token"]))
    assert joined.status_code == 200
    assert joined.json()["message"] == "Successfully joined event"
    assert participant_names(joined.json()["data"]) == ["Ann", "Bob"]

    again = client.post(f"/api/events/{event['id']}/join", headers=bearer(bob["token"]))
    assert again.status_code == 400
    assert again.json()["message"] == "Already joined this event"
    assert again.json()["error"] == "ALREADY_JOINED"


def test_join_records_membership_once_on_both_sides(client, bob, park_cleanup, count_rows):
    event_id = park_cleanup["id"]
    client.post(f"/api/events/{event_id}/join", headers=bob["headers"])
    client.post(f"/api/events/{event_id}/join", headers=bob["headers"])

    assert count_rows(
        EventParticipantsLink,
        EventParticipantsLink.event_id == event_id,
        EventParticipantsLink.user_id == bob["id"],
    ) == 1
    assert count_rows(
        UserEventsLink,
        UserEventsLink.event_id == event_id,
        UserEventsLink.user_id == bob["id"],
    ) == 1
    profile = client.get("/api/auth/profile", headers=bob["headers"]).json()["data"]
    assert [e["id"] for e in profile["joinedEvents"]] == [event_id]


def test_creator_cannot_join_own_event_twice(client, ann, park_cleanup):
    response = client.post(f"/api/events/{park_cleanup['id']}/join", headers=ann["headers"])

    assert response.status_code == 400
    assert response.json()["message"] == "Already joined this event"


def test_join_missing_event_is_not_found(client, bob):
    response = client.post("/api/events/424242/join", headers=bob["headers"])

    assert response.status_code == 404


def test_join_full_event_is_rejected(client, ann, bob, carol):
    event = client.post(
        "/api/events", json={**EVENT, "maxParticipants": 2}, headers=ann["headers"]
    ).json()["data"]
    assert event["maxParticipants"] == 2

    assert client.post(f"/api/events/{event['id']}/join", headers=bob["headers"]).status_code == 200
    response = client.post(f"/api/events/{event['id']}/join", headers=carol["headers"])

    assert response.status_code == 400
    assert response.json()["message"] == "Event is full"


def test_concurrent_joins_respect_the_participant_cap(
    client, ann, session_factory, count_rows
):
    event = client.post(
        "/api/events", json={**EVENT, "maxParticipants": 2}, headers=ann["headers"]
    ).json()["data"]
    user_ids = [
        register(client, name, f"{name.lower()}@x.com")["user"]["id"]
        for name in ("Dan", "Eve", "Fay", "Gus", "Hal")
    ]

    async def join(user_id):
        async with session_factory() as session:
            try:
                await event_service.join_event(session, event["id"], user_id)
            except CustomHTTPException as exc:
                return exc.message
            return "joined"

    async def join_all():
        return await asyncio.gather(*(join(user_id) for user_id in user_ids))

    outcomes = asyncio.run(join_all())

    assert sorted(outcomes) == ["Event is full"] * 4 + ["joined"]
    assert count_rows(EventParticipantsLink, EventParticipantsLink.event_id == event["id"]) == 2
    assert count_rows(
        UserEventsLink,
        UserEventsLink.event_id == event["id"],
        UserEventsLink.relation == "joined",
    ) == 2


def test_join_with_token_of_deleted_user_is_not_found(client, park_cleanup, count_rows):
    token = create_access_token(
        {"user_id": 424242}, "test-secret-key", expires_delta=timedelta(days=1)
    )

    response = client.post(f"/api/events/{park_cleanup['id']}/join", headers=bearer(token))

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"
    assert count_rows(EventParticipantsLink, EventParticipantsLink.user_id == 424242) == 0


@pytest.fixture
def failing_user_update(monkeypatch):
    async def fail(*args, **kwargs):
        raise SQLAlchemyError("users table is locked")

    monkeypatch.setattr(user_service, "add_joined_event", fail)


def test_join_reverts_participation_when_user_update_fails(
    client, bob, park_cleanup, failing_user_update
):
    response = client.post(f"/api/events/{park_cleanup['id']}/join", headers=bob["headers"])

    assert response.status_code == 500
    assert response.json()["message"] == "Error joining event"
    assert "users table is locked" not in response.text
    event = client.get(f"/api/events/{park_cleanup['id']}").json()["data"]
    assert participant_names(event) == ["Ann"]


def test_failed_revert_is_logged_not_surfaced(
    client, bob, park_cleanup, failing_user_update, monkeypatch, caplog
):
    async def fail_pull(*args, **kwargs):
        raise SQLAlchemyError("events table is locked")

    monkeypatch.setattr(event_service, "pull", fail_pull)

    with caplog.at_level(logging.ERROR, logger="app.api.events.service"):
        response = client.post(
            f"/api/events/{park_cleanup['id']}/join", headers=bob["headers"]
        )

    assert response.status_code == 500
    assert response.json()["message"] == "Error joining event"
    assert any("Error reverting" in record.message for record in caplog.records)
