"""Admin realtime channel over a real ASGI websocket."""

import time
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from laundry_api.core.config import settings
from laundry_api.core.deps import get_db
from laundry_api.core.security import create_session_token
from laundry_api.db.enums import UserRole
from laundry_api.main import app
from laundry_api.routers.websocket import _origin_is_allowed
from tests.conftest import make_user


ORDER_BODY = {"service": "Dry Clean", "pickupAddress": "4 Hill St", "clothTypes": ["Suit"]}


@pytest.fixture
def ws_client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_missing_token_closes_4001(ws_client):
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with ws_client.websocket_connect("/ws/admin"):
            pass

    assert exc_info.value.code == 4001
    assert exc_info.value.reason == "no_token"


def test_expired_token_closes_4001_with_reason(ws_client, admin_user):
    token = create_session_token(admin_user, expires_in=timedelta(seconds=-5))

    with pytest.raises(WebSocketDisconnect) as exc_info:
        with ws_client.websocket_connect(f"/ws/admin?token={token}"):
            pass

    assert exc_info.value.code == 4001
    assert exc_info.value.reason == "token_expired"


def test_customer_token_closes_4003(ws_client, customer_auth):
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with ws_client.websocket_connect(f"/ws/admin?token={customer_auth.token}"):
            pass

    assert exc_info.value.code == 4003


def test_ping_pong_with_header_token(ws_client, admin_auth):
    with ws_client.websocket_connect("/ws/admin", headers=admin_auth.headers) as ws:
        ws.send_text("ping")
        assert ws.receive_text() == "pong"
        ws.send_json({"type": "ping"})
        assert ws.receive_text() == "pong"


def test_binary_frame_is_ignored_and_socket_stays_open(ws_client, admin_auth):
    with ws_client.websocket_connect(f"/ws/admin?token={admin_auth.token}") as ws:
        ws.send_bytes(b"\x00\x01")
        ws.send_text("ping")
        assert ws.receive_text() == "pong"


def test_new_order_reaches_admin_with_matching_number(ws_client, admin_auth, customer_auth):
    with ws_client.websocket_connect(f"/ws/admin?token={admin_auth.token}") as ws:
        response = ws_client.post("/orders", json=ORDER_BODY, headers=customer_auth.headers)
        assert response.status_code == 201

        event = ws.receive_json()

    assert event["type"] == "admin:newOrder"
    assert event["data"]["orderNumber"] == response.json()["orderNumber"]
    assert event["data"]["user"]["name"] == "Asha"


def test_status_change_and_delete_events(ws_client, admin_auth, customer_auth):
    order = ws_client.post("/orders", json=ORDER_BODY, headers=customer_auth.headers).json()

    with ws_client.websocket_connect(f"/ws/admin?token={admin_auth.token}") as ws:
        ws_client.patch(
            f"/admin/orders/{order['id']}/status",
            json={"status": "delivered"},
            headers=admin_auth.headers,
        )
        updated = ws.receive_json()

        ws_client.delete(f"/orders/{order['id']}", headers=customer_auth.headers)
        deleted = ws.receive_json()

    assert updated["type"] == "admin:orderUpdated"
    assert updated["data"]["status"] == "Completed"
    assert deleted == {
        "type": "admin:orderDeleted",
        "data": {"id": order["id"], "orderNumber": order["orderNumber"]},
    }


def test_ticket_events(ws_client, admin_auth):
    with ws_client.websocket_connect(f"/ws/admin?token={admin_auth.token}") as ws:
        created = ws_client.post(
            "/api/tickets", json={"userName": "Meera", "mobile": "9845011111", "issue": "Late"}
        ).json()
        new_ticket = ws.receive_json()

        ws_client.post(
            f"/api/tickets/{created['id']}/reply",
            json={"message": "Driver is on the way"},
            headers=admin_auth.headers,
        )
        updated = ws.receive_json()

    assert new_ticket["type"] == "admin:newTicket"
    assert updated["type"] == "admin:ticketUpdated"
    assert updated["data"]["status"] == "Contacted"


def test_silent_subscriber_is_closed_4008(ws_client, admin_auth, monkeypatch):
    monkeypatch.setattr(settings, "WS_HEARTBEAT_TIMEOUT_SECONDS", 0.2)

    with ws_client.websocket_connect(f"/ws/admin?token={admin_auth.token}") as ws:
        with pytest.raises(WebSocketDisconnect) as exc_info:
            ws.receive_text()

    assert exc_info.value.code == 4008


def test_token_expiry_mid_connection_closes_4001(ws_client, admin_user):
    token = create_session_token(admin_user, expires_in=timedelta(seconds=2))

    with ws_client.websocket_connect(f"/ws/admin?token={token}") as ws:
        started = time.monotonic()
        with pytest.raises(WebSocketDisconnect) as exc_info:
            ws.receive_text()

    assert exc_info.value.code == 4001
    assert exc_info.value.reason == "token_expired"
    assert time.monotonic() - started < 5


def test_demoted_admin_socket_is_closed(ws_client, db, admin_auth):
    other_admin = make_user(db, name="Second", role=UserRole.ADMIN)
    other_token = create_session_token(other_admin)

    with ws_client.websocket_connect(f"/ws/admin?token={other_token}") as ws:
        response = ws_client.patch(
            f"/admin/users/{other_admin.id}/role",
            json={"role": "customer"},
            headers=admin_auth.headers,
        )
        assert response.status_code == 200

        with pytest.raises(WebSocketDisconnect) as exc_info:
            ws.receive_text()

    assert exc_info.value.code == 4003


# =============================================================================
# Origin checks
# =============================================================================

def test_origin_allowed_in_dev_even_if_not_listed():
    allowed = {"http://localhost:5173"}
    assert _origin_is_allowed("http://evil.com", allowed=allowed, is_dev=True)


def test_origin_allows_listed_origin_in_prod():
    allowed = {"http://localhost:5173"}
    assert _origin_is_allowed("http://localhost:5173", allowed=allowed, is_dev=False)


def test_origin_rejects_unlisted_origin_in_prod():
    allowed = {"http://localhost:5173"}
    assert not _origin_is_allowed("http://evil.com", allowed=allowed, is_dev=False)


def test_origin_rejects_missing_origin_in_prod():
    allowed = {"http://localhost:5173"}
    assert not _origin_is_allowed(None, allowed=allowed, is_dev=False)


def test_bad_origin_closes_4003_outside_dev(ws_client, admin_auth, monkeypatch):
    monkeypatch.setattr(settings, "ENV", "production")

    with pytest.raises(WebSocketDisconnect) as exc_info:
        with ws_client.websocket_connect(
            f"/ws/admin?token={admin_auth.token}", headers={"Origin": "http://evil.com"}
        ):
            pass

    assert exc_info.value.code == 4003
