# src/propeval/domain/ports.py
from __future__ import annotations

from typing import Any, Protocol, TypedDict


# ----------------------------
# Property storage
# ----------------------------

class PropertyRecord(TypedDict, total=False):
    id: str
    name: str | None
    url: str | None
    notes: str | None
    mode: str

    purchase_price: float
    loan_rate: float
    ltv: float
    months: int
    insurance: float
    taxes_yearly: float
    closing: float
    total_rehab_cost: float
    post_rehab_value: float

    monthly_rent: float
    average_nightly_rent: float
    occupancy_rate: float

    vacancy_rate: float
    management_rate: float
    capital_expenditures_rate: float
    repair_rate: float


class PropertyRepository(Protocol):
    def create(self, fields: PropertyRecord) -> str:
        ...

    def get(self, property_id: str) -> PropertyRecord | None:
        ...

    def update(self, property_id: str, fields: PropertyRecord) -> PropertyRecord | None:
        ...

    def list_recent(self, limit: int = 50) -> list[PropertyRecord]:
        ...


# ----------------------------
# URL metadata cache (keyed by normalized URL)
# ----------------------------

class OgCache(Protocol):
    def get(self, url_key: str, *, max_age_s: float) -> dict[str, Any] | None:
        ...

    def put(self, url_key: str, data: dict[str, Any]) -> None:
        ...
