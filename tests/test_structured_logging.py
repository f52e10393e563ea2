from laundry_api.core.structured_logging import build_log_context


def test_build_log_context_omits_empty_values():
    context = build_log_context(user_id="u1", role=None, request_id="r1", route=None, method="GET")

    assert context == {"user_id": "u1", "request_id": "r1", "method": "GET"}


def test_build_log_context_carries_role():
    context = build_log_context(role="admin", route="/admin/orders")

    assert context == {"role": "admin", "route": "/admin/orders"}
