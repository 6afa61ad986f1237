"""Tests for the invoice status cycle and display metadata."""
from freightdesk.services.status import (
    STATUS_COLORS,
    STATUS_ORDER,
    InvoiceStatus,
    is_canonical,
    next_status,
    status_label,
)


def test_next_status_cycles_and_wraps():
    """need_action -> escalated -> need_action."""
    assert next_status("need_action") == InvoiceStatus.escalated
    assert next_status("escalated") == InvoiceStatus.need_action


def test_next_status_applied_len_times_is_identity():
    """Advancing once per state returns to the starting state."""
    for start in STATUS_ORDER:
        s = start
        for _ in range(len(STATUS_ORDER)):
            s = next_status(s)
        assert s == start


def test_next_status_unknown_restarts_cycle():
    """A value outside the cycle advances to the first status."""
    assert next_status("archived") == STATUS_ORDER[0]


def test_is_canonical():
    assert is_canonical("need_action")
    assert is_canonical("escalated")
    assert not is_canonical("approved")
    assert not is_canonical("")


def test_status_label_and_colors():
    assert status_label("need_action") == "Need Action"
    assert status_label(InvoiceStatus.escalated) == "Escalated"
    assert STATUS_COLORS[InvoiceStatus.need_action] == "yellow"
    assert STATUS_COLORS[InvoiceStatus.escalated] == "purple"
