"""SOS alerts API tests."""

from beacon.core.errors import StorageError
from beacon.core.security import create_access_token
from beacon.models import Coordinate, PersonalContact

from conftest import HOME, auth_header, minutes_ago, offset_north


def test_sos_requires_token(client):
    """No bearer token -> 401 before anything is looked up."""
    for path in ("/sos/contacts", "/sos/nearby-users", "/sos/services"):
        r = client.post(path)
        assert r.status_code == 401


def test_sos_rejects_bad_token(client, users):
    """Tampered token -> 401."""
    users.add_user("me")
    token = create_access_token("me") + "x"
    r = client.post("/sos/contacts", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert users.lookups == []


def test_sos_rejects_token_without_subject(client):
    """Signed token with an empty ``sub`` -> 401."""
    token = create_access_token("me", extra={"sub": ""})
    r = client.post("/sos/services", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_sos_contacts_dispatches_to_each_contact(client, users, mailer):
    """Every contact with an email gets the alert; message is passed through."""
    users.add_user(
        "me",
        name="Asha",
        contacts=[
            PersonalContact(id="c1", name="Mom", relation="mother", email="mom@x.test"),
            PersonalContact(id="c2", name="Dad", relation="father", email="dad@x.test"),
        ],
    )

    r = client.post("/sos/contacts", headers=auth_header("me"), json={"message": "car broke down"})

    assert r.status_code == 200
    data = r.json()
    assert data["message"] == "SOS contact notifications processed"
    assert data["workflow"] == "contacts"
    assert data["dispatched"] == 2
    assert data["total_candidates"] == 2
    assert data["custom_message_included"] is True
    assert data["requester_location"] == {"lat": HOME.latitude, "lng": HOME.longitude}
    assert [res["id"] for res in data["results"]] == ["c1", "c2"]
    assert {m["to"] for m in mailer.sent} == {"mom@x.test", "dad@x.test"}


def test_sos_contacts_without_body(client, users, mailer):
    """Body is optional; no contacts -> zero dispatched, mailer untouched."""
    users.add_user("me")

    r = client.post("/sos/contacts", headers=auth_header("me"))

    assert r.status_code == 200
    data = r.json()
    assert data["message"] == "No SOS contacts with email to notify"
    assert data["dispatched"] == 0
    assert data["results"] == []
    assert data["custom_message_included"] is False
    assert mailer.sent == []


def test_sos_unknown_user_is_404(client):
    """Valid token for a user that does not exist."""
    r = client.post("/sos/services", headers=auth_header("deleted-user"))
    assert r.status_code == 404
    assert r.json()["detail"] == "User not found"


def test_sos_without_location_is_400(client, users):
    """Requester never shared a location."""
    users.add_user("me", coordinate=None)
    r = client.post("/sos/nearby-users", headers=auth_header("me"))
    assert r.status_code == 400
    assert r.json()["detail"] == "User location unavailable"


def test_sos_invalid_coordinate_is_400(client, users, locations):
    """Out-of-range latitude aborts before any search."""
    users.add_user("me", coordinate=Coordinate(200.0, 76.52))
    r = client.post("/sos/services", headers=auth_header("me"))
    assert r.status_code == 400
    assert locations.box_calls == []


def test_sos_nearby_users_reports_failures(client, users, mailer):
    """One send fails: dispatched counts only successes."""
    users.add_user("me")
    users.add_user("a", email="a@x.test", coordinate=offset_north(HOME, 200), last_location_at=minutes_ago(1))
    users.add_user("b", email="b@x.test", coordinate=offset_north(HOME, 400), last_location_at=minutes_ago(2))
    users.add_user("c", email="c@x.test", coordinate=offset_north(HOME, 600), last_location_at=minutes_ago(3))
    mailer.fail_for.add("b@x.test")

    r = client.post("/sos/nearby-users", headers=auth_header("me"), json={"max_users": 5})

    assert r.status_code == 200
    data = r.json()
    assert data["message"] == "Nearby user notifications processed"
    assert data["dispatched"] == 2
    assert data["total_candidates"] == 3
    assert data["freshness_minutes"] == 10
    assert data["search_status"] == "exhausted"
    failing = [res for res in data["results"] if not res["success"]]
    assert [res["id"] for res in failing] == ["b"]
    assert failing[0]["error"]
    assert data["results"][0]["distance_meters"] == 200


def test_sos_nearby_users_none_found(client, users):
    users.add_user("me")
    users.add_user("old", coordinate=HOME, last_location_at=minutes_ago(60))
    r = client.post("/sos/nearby-users", headers=auth_header("me"), json={})
    assert r.status_code == 200
    assert r.json()["message"] == "No nearby active users found within radius"
    assert r.json()["dispatched"] == 0


def test_sos_services_expanding_radius(client, users, locations, mailer):
    """Services are found by widening 2 -> 7 -> 12 km."""
    users.add_user("me", name="Asha")
    locations.add("police", offset_north(HOME, 1_500))
    locations.add("hospital", offset_north(HOME, 5_000))

    r = client.post("/sos/services", headers=auth_header("me"), json={"message": "  "})

    assert r.status_code == 200
    data = r.json()
    assert data["message"] == "Nearby service notifications processed"
    assert data["radii_tried"] == [2000, 7000, 12000]
    assert data["radius_used"] == 12000
    assert data["search_status"] == "exhausted"
    assert data["custom_message_included"] is False
    assert [res["id"] for res in data["results"]] == ["police", "hospital"]
    assert mailer.sent[0]["subject"] == "SOS ALERT near Asha"


def test_sos_services_none_found(client, users):
    users.add_user("me")
    r = client.post("/sos/services", headers=auth_header("me"))
    assert r.status_code == 200
    assert r.json()["message"] == "No nearby services found within expanding radii"


def test_sos_storage_failure_is_503(client, users):
    """A storage failure aborts the workflow with 503."""

    async def broken(user_id):
        raise StorageError("Storage unavailable during get_requester")

    users.get_requester = broken
    r = client.post("/sos/contacts", headers=auth_header("me"))
    assert r.status_code == 503


def test_sos_long_message_is_accepted(client, users, mailer):
    """Notes of any length go through to the email."""
    users.add_user("me", contacts=[PersonalContact(id="c1", name="Mom", relation="mother", email="mom@x.test")])
    note = "trapped on the third floor " * 200
    r = client.post("/sos/contacts", headers=auth_header("me"), json={"message": note})
    assert r.status_code == 200
    assert r.json()["custom_message_included"] is True
    assert note.strip() in mailer.sent[0]["text"]


def test_sos_nearby_users_huge_freshness_window(client, users):
    """An absurd freshness window is capped at one week instead of failing."""
    users.add_user("me")
    users.add_user("a", coordinate=offset_north(HOME, 300), last_location_at=minutes_ago(60 * 24 * 3))
    r = client.post("/sos/nearby-users", headers=auth_header("me"), json={"freshness_minutes": 10**10})
    assert r.status_code == 200
    data = r.json()
    assert data["freshness_minutes"] == 60 * 24 * 7
    assert [res["id"] for res in data["results"]] == ["a"]
