"""Phone OTP password reset."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from laundry_api.core.config import settings
from laundry_api.db.models import PasswordResetCode


REQUEST_URL = "/auth/forgot-password/request-otp"
RESET_URL = "/auth/forgot-password/reset"


@pytest.mark.asyncio
async def test_request_for_known_phone_issues_code_in_dev(client: AsyncClient, customer):
    response = await client.post(REQUEST_URL, json={"phone": "98765 43210"})

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["ttlSeconds"] == settings.OTP_TTL_MINUTES * 60
    assert len(body["otp"]) == settings.OTP_LENGTH
    assert body["otp"].isdigit()


@pytest.mark.asyncio
async def test_request_for_unknown_phone_does_not_leak(client: AsyncClient, db):
    response = await client.post(REQUEST_URL, json={"phone": "1234567890"})

    assert response.status_code == 200
    assert response.json()["otp"] is None
    assert db.get(PasswordResetCode, "1234567890") is None


@pytest.mark.asyncio
async def test_code_is_withheld_outside_dev(client: AsyncClient, customer, monkeypatch):
    monkeypatch.setattr(settings, "ENV", "production")

    response = await client.post(REQUEST_URL, json={"phone": "9876543210"})

    assert response.status_code == 200
    assert response.json()["otp"] is None


@pytest.mark.asyncio
async def test_short_phone_is_400(client: AsyncClient):
    response = await client.post(REQUEST_URL, json={"phone": "12-34"})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_reset_with_valid_code(client: AsyncClient, customer, db):
    otp = (await client.post(REQUEST_URL, json={"phone": "9876543210"})).json()["otp"]

    response = await client.post(
        RESET_URL, json={"phone": "9876543210", "otp": otp, "newPassword": "fresh-start"}
    )

    assert response.status_code == 200
    assert db.get(PasswordResetCode, "9876543210") is None
    login = await client.post(
        "/login", json={"identifier": "9876543210", "password": "fresh-start"}
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_reset_with_wrong_code_is_401_and_keeps_code(client: AsyncClient, customer, db):
    otp = (await client.post(REQUEST_URL, json={"phone": "9876543210"})).json()["otp"]
    wrong = "0" * len(otp) if otp != "0" * len(otp) else "1" * len(otp)

    response = await client.post(
        RESET_URL, json={"phone": "9876543210", "otp": wrong, "newPassword": "x"}
    )

    assert response.status_code == 401
    assert db.get(PasswordResetCode, "9876543210") is not None


@pytest.mark.asyncio
async def test_reset_with_expired_code_is_400_and_consumes_it(client: AsyncClient, customer, db):
    otp = (await client.post(REQUEST_URL, json={"phone": "9876543210"})).json()["otp"]
    record = db.get(PasswordResetCode, "9876543210")
    record.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    db.commit()

    response = await client.post(
        RESET_URL, json={"phone": "9876543210", "otp": otp, "newPassword": "x"}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "OTP expired"
    db.expire_all()
    assert db.get(PasswordResetCode, "9876543210") is None


@pytest.mark.asyncio
async def test_reset_without_request_is_400(client: AsyncClient, customer):
    response = await client.post(
        RESET_URL, json={"phone": "9876543210", "otp": "1234", "newPassword": "x"}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "No OTP found or expired"


@pytest.mark.asyncio
async def test_reset_missing_fields_is_400(client: AsyncClient):
    response = await client.post(RESET_URL, json={"phone": "9876543210"})

    assert response.status_code == 400
