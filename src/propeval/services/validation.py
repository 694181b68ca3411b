# src/propeval/services/validation.py

import math
from typing import Any

from pydantic.alias_generators import to_snake

# Financing fields a full record cannot do without
REQUIRED_CORE_FIELDS = [
    "purchase_price",
    "loan_rate",
    "ltv",
    "months",
]

MONEY_FIELDS = [
    "purchase_price",
    "insurance",
    "taxes_yearly",
    "closing",
    "total_rehab_cost",
    "post_rehab_value",
    "monthly_rent",
    "average_nightly_rent",
]

# percent-scaled, 0..100
RATE_FIELDS = [
    "loan_rate",
    "ltv",
    "occupancy_rate",
    "vacancy_rate",
    "management_rate",
    "capital_expenditures_rate",
    "repair_rate",
]

TEXT_FIELDS = ["name", "url", "notes"]

VALID_MODES = {"ltr", "str"}

# Numeric(11, 2) storage limit
MAX_MONEY = 10**9


def _to_num(val: Any, field_name: str) -> float:
    """
    Coerce values like:
      - 250000
      - "250000"
      - "$250,000"
      - "6.5"
      - "6.5%"
    into float. Percent signs are stripped, the number is NOT rescaled:
    rates stay on the 0..100 scale.
    """
    if val is None:
        raise ValueError(f"Missing required numeric field: {field_name}")
    if isinstance(val, bool):
        raise ValueError(f"Invalid type for {field_name}: {type(val)}")
    if isinstance(val, (int, float)):
        f = float(val)
    elif isinstance(val, str):
        s = val.strip().replace(",", "").replace("$", "")
        if s.endswith("%"):
            s = s[:-1]
        try:
            f = float(s)
        except ValueError:
            raise ValueError(f"Invalid number for {field_name}: {val!r}") from None
    else:
        try:
            f = float(val)  # Decimal and friends
        except (TypeError, ValueError):
            raise ValueError(f"Invalid type for {field_name}: {type(val)}") from None

    if not math.isfinite(f):
        raise ValueError(f"{field_name} must be a finite number")
    return f


def _normalize_keys(raw: dict[str, Any]) -> dict[str, Any]:
    """Accept both the camelCase wire names and snake_case."""
    return {to_snake(k): v for k, v in raw.items()}


def validate_and_prepare_payload(raw: dict[str, Any], *, partial: bool = False) -> dict[str, Any]:
    """
    Normalize an incoming property payload before it is stored or evaluated.

    Responsibilities:
      - Ensure the financing fields exist (unless partial=True, for updates).
      - Coerce numeric strings, "$" and "%" decorations.
      - Keep everything in range so the KPI engine only ever sees sane inputs.

    Unknown keys are dropped. Raises ValueError naming the offending field.
    """
    data = _normalize_keys(raw)

    # 1. Required core fields
    if not partial:
        for field in REQUIRED_CORE_FIELDS:
            if data.get(field) in (None, ""):
                raise ValueError(f"Missing required field: {field}")

    cleaned: dict[str, Any] = {}

    # 2. Money
    for field in MONEY_FIELDS:
        if data.get(field) in (None, ""):
            continue
        v = _to_num(data[field], field)
        if v < 0:
            raise ValueError(f"{field} must be >= 0")
        if v >= MAX_MONEY:
            raise ValueError(f"{field} is too large")
        cleaned[field] = v

    if "purchase_price" in cleaned and cleaned["purchase_price"] <= 0:
        raise ValueError("purchase_price must be > 0")

    # 3. Rates
    for field in RATE_FIELDS:
        if data.get(field) in (None, ""):
            continue
        v = _to_num(data[field], field)
        if not (0.0 <= v <= 100.0):
            raise ValueError(f"{field} must be between 0 and 100")
        cleaned[field] = v

    # 4. Loan term
    if data.get("months") not in (None, ""):
        m = _to_num(data["months"], "months")
        if not m.is_integer() or m <= 0:
            raise ValueError("months must be a positive whole number")
        cleaned["months"] = int(m)

    # 5. Mode
    if data.get("mode") not in (None, ""):
        mode = str(data["mode"]).strip().lower()
        if mode not in VALID_MODES:
            raise ValueError(f"mode must be one of {sorted(VALID_MODES)}")
        cleaned["mode"] = mode

    # 6. Free text passthrough
    for field in TEXT_FIELDS:
        if field in data:
            v = data[field]
            cleaned[field] = str(v).strip() if v is not None else None

    return cleaned
