from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any


def format_ticket_number(value: Any) -> str:
    """
    Render a ticket number as a plain integer string ("2024010110000017").

    Znuny returns the number as a string, but some deployments hand back a number.
    Grouping separators and fractional parts are never emitted.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a ticket number: {value!r}")

    if isinstance(value, int):
        return str(value)

    text = str(value).strip()
    if text.isdigit():
        # Keep long numbers exact; no float round trip.
        return str(int(text))

    try:
        number = Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(f"Not a ticket number: {value!r}") from exc
    if not number.is_finite():
        raise ValueError(f"Not a ticket number: {value!r}")
    return str(number.quantize(Decimal(1), rounding=ROUND_HALF_UP))
