"""
Identity webhook: signature verification and user mirroring.
"""
import json
from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select
from svix.webhooks import Webhook

from config import settings
from model.user import User
from services.identity_sync import unique_username, username_from_email

URL = "/v1/webhooks/identity"


def _user_payload(clerk_id, email, username=None, **extra):
    payload = {
        "id": clerk_id,
        "email_addresses": [
            {"id": "idn_other", "email_address": "secondary@example.com"},
            {"id": "idn_primary", "email_address": email},
        ],
        "primary_email_address_id": "idn_primary",
        "username": username,
        "first_name": "Ana",
        "last_name": "Rojas",
    }
    payload.update(extra)
    return payload


@pytest.fixture
def deliver(client):
    """POST a signed event and return the response."""
    counter = iter(range(1, 1000))

    def _deliver(event_type, data, secret=None):
        body = json.dumps({"type": event_type, "data": data})
        msg_id = f"msg_{next(counter)}"
        timestamp = datetime.now(timezone.utc)
        signature = Webhook(secret or settings.WEBHOOK_SECRET).sign(msg_id, timestamp, body)
        headers = {
            "svix-id": msg_id,
            "svix-timestamp": str(int(timestamp.timestamp())),
            "svix-signature": signature,
            "content-type": "application/json",
        }
        return client.post(URL, content=body, headers=headers)

    return _deliver


def _user_count(db):
    return db.scalar(select(func.count()).select_from(User))


# ===================================================================
# Verification
# ===================================================================

class TestVerification:

    def test_missing_headers(self, client, db_session):
        response = client.post(URL, content=json.dumps({"type": "user.created", "data": {}}))
        assert response.status_code == 400
        assert response.text == "Missing headers"

    def test_bad_signature_writes_nothing(self, deliver, db_session):
        other_secret = "whsec_" + "c29tZS1vdGhlci1zZWNyZXQ="
        response = deliver("user.created", _user_payload("user_x", "x@example.com"), secret=other_secret)
        assert response.status_code == 400
        assert response.text == "Invalid signature"
        assert _user_count(db_session) == 0

    def test_unconfigured_secret(self, client, monkeypatch):
        monkeypatch.setattr(settings, "WEBHOOK_SECRET", "")
        response = client.post(URL, content="{}")
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Internal server error"}

    def test_unknown_event_is_acknowledged(self, deliver, db_session):
        response = deliver("session.created", {"id": "sess_1"})
        assert response.status_code == 200
        assert response.json() == {"success": True}


# ===================================================================
# User events
# ===================================================================

class TestUserEvents:

    def test_created_uses_primary_email(self, deliver, db_session):
        response = deliver("user.created", _user_payload("user_ana", "ana.rojas@example.com", image_url="http://img/a"))
        assert response.status_code == 200

        user = db_session.scalar(select(User).where(User.clerk_id == "user_ana"))
        assert user.email == "ana.rojas@example.com"
        assert user.username == "ana.rojas"
        assert user.name == "Ana Rojas"
        assert user.image == "http://img/a"

    def test_event_read_from_body_when_verify_returns_nothing(self, deliver, db_session, monkeypatch):
        original_verify = Webhook.verify

        def verify_only(self, data, headers):
            original_verify(self, data, headers)
            return None

        monkeypatch.setattr(Webhook, "verify", verify_only)
        response = deliver("user.created", _user_payload("user_quiet", "quiet@example.com"))
        assert response.status_code == 200
        assert db_session.scalar(select(User.username).where(User.clerk_id == "user_quiet")) == "quiet"

    def test_created_username_gets_suffix(self, deliver, db_session, make_user):
        make_user("ana")
        deliver("user.created", _user_payload("user_ana2", "ana@mail.cl"))
        user = db_session.scalar(select(User).where(User.clerk_id == "user_ana2"))
        assert user.username == "ana1"

    def test_redelivered_create_is_an_update(self, deliver, db_session):
        deliver("user.created", _user_payload("user_ana", "ana@example.com", username="ana"))
        deliver("user.created", _user_payload("user_ana", "ana.new@example.com", username="ana"))
        assert _user_count(db_session) == 1
        db_session.expire_all()
        assert db_session.scalar(select(User.email)) == "ana.new@example.com"

    def test_updated_patches_fields(self, deliver, db_session, make_user):
        user = make_user("before")
        response = deliver(
            "user.updated",
            _user_payload(user.clerk_id, "after@example.com", username="after", image_url="http://img/new"),
        )
        assert response.status_code == 200
        db_session.expire_all()
        user = db_session.get(User, user.id)
        assert (user.email, user.username, user.image) == ("after@example.com", "after", "http://img/new")

    def test_updated_keeps_username_when_taken(self, deliver, db_session, make_user):
        make_user("taken")
        user = make_user("mine")
        deliver("user.updated", _user_payload(user.clerk_id, "mine2@example.com", username="taken"))
        db_session.expire_all()
        assert db_session.get(User, user.id).username == "mine"

    def test_updated_unknown_user_is_created(self, deliver, db_session):
        deliver("user.updated", _user_payload("user_new", "new@example.com", username="nuevo"))
        assert db_session.scalar(select(User.username).where(User.clerk_id == "user_new")) == "nuevo"

    def test_deleted_is_idempotent(self, deliver, db_session, make_user):
        user = make_user()
        first = deliver("user.deleted", {"id": user.clerk_id, "deleted": True})
        second = deliver("user.deleted", {"id": user.clerk_id, "deleted": True})
        assert first.status_code == second.status_code == 200
        db_session.expire_all()
        assert _user_count(db_session) == 0


class TestUsernameHelpers:

    @pytest.mark.parametrize("email, expected", [
        ("maria.jose+news@example.com", "maria.josenews"),
        ("+++@example.com", "user"),
        (None, "user"),
    ])
    def test_username_from_email(self, email, expected):
        assert username_from_email(email) == expected

    def test_unique_username_skips_taken(self, db_session, make_user):
        make_user("eco")
        make_user("eco1")
        assert unique_username(db_session, "eco") == "eco2"
        assert unique_username(db_session, "libre") == "libre"
