"""Display formatting helpers."""
from freightdesk.core.config import settings

_CURRENCY_SYMBOLS = {"USD": "$"}


def format_currency(amount: float, currency: str | None = None) -> str:
    """1234.5 -> '$1,234.50'; negatives get a leading minus ('-$12.00')."""
    code = currency or settings.CURRENCY_CODE
    symbol = _CURRENCY_SYMBOLS.get(code, f"{code} ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(float(amount)):,.2f}"
