import pytest
from pydantic import ValidationError

from laundry_api.core.config import DEFAULT_JWT_SECRET, Settings


def test_placeholder_secret_rejected_outside_dev():
    with pytest.raises(ValidationError):
        Settings(ENV="production", JWT_SECRET=DEFAULT_JWT_SECRET)


def test_placeholder_secret_allowed_in_dev():
    config = Settings(ENV="dev", JWT_SECRET=DEFAULT_JWT_SECRET)

    assert config.is_dev


def test_cors_origins_list_strips_blanks():
    config = Settings(ENV="test", CORS_ORIGINS=" https://a.example , ,https://b.example")

    assert config.cors_origins_list == ["https://a.example", "https://b.example"]


def test_defaults():
    config = Settings(ENV="test")

    assert config.JWT_EXPIRES_DAYS == 7
    assert config.ORDER_STATUS_FORWARD_ONLY is False
    assert config.OTP_LENGTH == 4
