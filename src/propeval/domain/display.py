from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Literal

Format = Literal["money", "percent"]

CURRENCY_SYMBOL = "$"


def _non_finite(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    return "Infinity" if value > 0 else "-Infinity"


def format_money(
    value: float | None,
    *,
    decimal_places: int | None = None,
    hide_symbol: bool = False,
    no_trim_zero: bool = False,
) -> str:
    """
    USD with thousands separators and cents, e.g. -$1,234.50.

    Whole amounts drop their ".00" unless `no_trim_zero`;
    decimal_places=0 drops the cents entirely.
    """
    if value is None:
        return ""
    if not math.isfinite(value):
        return _non_finite(value)

    cents = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if cents < 0 else ""
    body = f"{abs(cents):,.2f}"

    if body.endswith(".00") and not no_trim_zero:
        body = body[:-3]
    if decimal_places == 0 and len(body) > 3 and body[-3] == ".":
        body = body[:-3]

    symbol = "" if hide_symbol else CURRENCY_SYMBOL
    return f"{sign}{symbol}{body}"


def format_percent(value: float | None, decimal_places: int = 0) -> str:
    """Ratio rendered as a percentage: 0.0812 -> "8.12%" with 2 places."""
    if value is None:
        return ""
    scaled = value * 100
    if not math.isfinite(scaled):
        return f"{_non_finite(scaled)}%"
    return f"{scaled:.{decimal_places}f}%"


# How each KPI is shown on the results card
KPI_FORMATS: dict[str, Format] = {
    "net_monthly_cash_flow": "money",
    "one_percent_rule": "percent",
    "cap_rate": "percent",
    "cash_flow": "money",
    "co_c_roi": "percent",
    "total_close": "money",
}


def format_kpi(name: str, value: float) -> str:
    if KPI_FORMATS.get(name, "money") == "percent":
        return format_percent(value, decimal_places=2)
    return format_money(value)
