"""Invoice lifecycle statuses and their display metadata."""
import enum


class InvoiceStatus(str, enum.Enum):
    need_action = "need_action"
    escalated = "escalated"


# Cycle order for the status badge; advancing past the last wraps to the first.
STATUS_ORDER: tuple[InvoiceStatus, ...] = (
    InvoiceStatus.need_action,
    InvoiceStatus.escalated,
)

STATUS_COLORS: dict[InvoiceStatus, str] = {
    InvoiceStatus.need_action: "yellow",  # warning
    InvoiceStatus.escalated: "purple",    # alert
}

CANONICAL_STATUSES = frozenset(s.value for s in STATUS_ORDER)


def is_canonical(status: str) -> bool:
    return status in CANONICAL_STATUSES


def next_status(current: str) -> InvoiceStatus:
    """Return the status after `current` in STATUS_ORDER.

    An unrecognised value restarts the cycle at the first status.
    """
    values = [s.value for s in STATUS_ORDER]
    try:
        idx = values.index(InvoiceStatus(current).value)
    except ValueError:
        idx = -1
    return STATUS_ORDER[(idx + 1) % len(STATUS_ORDER)]


def status_label(status: str) -> str:
    """'need_action' -> 'Need Action'."""
    value = status.value if isinstance(status, InvoiceStatus) else str(status)
    return " ".join(word[:1].upper() + word[1:] for word in value.split("_"))
