"""Order status alias normalization and transition policy."""

from dataclasses import dataclass

from laundry_api.db.enums import OrderStatus
from laundry_api.utils.normalization import collapse_whitespace


CANONICAL_ORDER_STATUSES = [status.value for status in OrderStatus]

_COMPLETED_ALIASES = frozenset({"delivered", "complete", "completed"})
_IN_PROGRESS_ALIASES = frozenset({"in progress", "progress"})
_PENDING_ALIASES = frozenset({"pending"})
_BY_TITLE = {status.value: status for status in OrderStatus}


@dataclass(frozen=True)
class Unrecognized:
    """Input that does not map onto any canonical order status."""

    raw: object


def normalize_order_status(value: object) -> OrderStatus | Unrecognized:
    """
    Map a free-form status string onto a canonical ``OrderStatus``.

    Rules, applied in order to the trimmed, lowercased input with ``_``/``-``
    and whitespace runs collapsed to single spaces:

    - "delivered", "complete", "completed" -> Completed
    - anything containing "deliver" ("out for delivery") -> Delivering
    - "in progress", "progress" -> In Progress
    - "pending" -> Pending
    - a title-cased canonical value -> that value

    Everything else, including None and blank strings, is ``Unrecognized``.
    """
    if not isinstance(value, str):
        return Unrecognized(value)

    token = collapse_whitespace(value.replace("_", " ").replace("-", " ")).lower()
    if not token:
        return Unrecognized(value)

    if token in _COMPLETED_ALIASES:
        return OrderStatus.COMPLETED
    if "deliver" in token:
        return OrderStatus.DELIVERING
    if token in _IN_PROGRESS_ALIASES:
        return OrderStatus.IN_PROGRESS
    if token in _PENDING_ALIASES:
        return OrderStatus.PENDING

    titled = " ".join(word[:1].upper() + word[1:] for word in token.split(" "))
    return _BY_TITLE.get(titled, Unrecognized(value))


def is_backward(current: OrderStatus, target: OrderStatus) -> bool:
    return target.rank < current.rank
