import pytest

from laundry_api.db.enums import OrderStatus
from laundry_api.services.order_status import Unrecognized, is_backward, normalize_order_status


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("delivered", OrderStatus.COMPLETED),
        ("Complete", OrderStatus.COMPLETED),
        ("COMPLETE", OrderStatus.COMPLETED),
        ("Delivered", OrderStatus.COMPLETED),
        ("  completed ", OrderStatus.COMPLETED),
        ("Delivering", OrderStatus.DELIVERING),
        ("out for delivery", OrderStatus.DELIVERING),
        ("OUT_FOR_DELIVERY", OrderStatus.DELIVERING),
        ("in progress", OrderStatus.IN_PROGRESS),
        ("in_progress", OrderStatus.IN_PROGRESS),
        ("In-Progress", OrderStatus.IN_PROGRESS),
        ("progress", OrderStatus.IN_PROGRESS),
        ("pending", OrderStatus.PENDING),
        ("Pending", OrderStatus.PENDING),
        ("In   Progress", OrderStatus.IN_PROGRESS),
    ],
)
def test_aliases_map_to_canonical(raw, expected):
    assert normalize_order_status(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "lost", "cancelled", 42])
def test_unknown_values_are_unrecognized(raw):
    result = normalize_order_status(raw)

    assert isinstance(result, Unrecognized)
    assert result.raw == raw


def test_normalization_is_idempotent():
    for status in OrderStatus:
        assert normalize_order_status(status.value) == status


def test_backward_follows_canonical_sequence():
    assert is_backward(OrderStatus.COMPLETED, OrderStatus.PENDING)
    assert is_backward(OrderStatus.DELIVERING, OrderStatus.IN_PROGRESS)
    assert not is_backward(OrderStatus.PENDING, OrderStatus.COMPLETED)
    assert not is_backward(OrderStatus.IN_PROGRESS, OrderStatus.IN_PROGRESS)
