"""Data normalization utilities for consistent data quality."""

import re


_EMAIL_LIKE = re.compile(r"\S+@\S+\.\S+")
_NON_DIGITS = re.compile(r"\D")


def normalize_phone(value: str | None) -> str:
    """
    Strip everything but digits.

    "98765-43210", "(987) 654 3210" and "9876543210" all normalize to the
    same handle. Returns "" when no digits remain.
    """
    if not value:
        return ""
    return _NON_DIGITS.sub("", str(value))


def normalize_email(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = str(value).strip().lower()
    return cleaned or None


def looks_like_email(value: str) -> bool:
    return bool(_EMAIL_LIKE.search(value))


def collapse_whitespace(value: str) -> str:
    return " ".join(value.split())
