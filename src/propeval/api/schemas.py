# src/propeval/api/schemas.py
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Level = Literal["good", "warning", "bad"]

# numbers arrive as JSON numbers or as "6.5%" / "$1,200" strings;
# services/validation.py does the coercion
NumberLike = float | str | None


def wire_name(field: str) -> str:
    """snake_case -> the camelCase names the frontend uses."""
    if field == "co_c_roi":
        return "coCROI"
    return to_camel(field)


class _Camel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# --------------------------------------------
# Property records
# --------------------------------------------

class PropertyFields(_Camel):
    """
    Body for POST /properties, PATCH /properties/{id} and POST /evaluate.

    Everything optional here; required-ness depends on the endpoint and is
    enforced by validate_and_prepare_payload (-> 400).
    """
    model_config = ConfigDict(extra="allow")

    name: str | None = None
    url: str | None = None
    notes: str | None = None
    mode: str | None = None

    purchase_price: NumberLike = None
    loan_rate: NumberLike = None
    ltv: NumberLike = None
    months: NumberLike = None
    insurance: NumberLike = None
    taxes_yearly: NumberLike = None
    closing: NumberLike = None
    total_rehab_cost: NumberLike = None
    post_rehab_value: NumberLike = None

    monthly_rent: NumberLike = None
    average_nightly_rent: NumberLike = None
    occupancy_rate: NumberLike = None

    vacancy_rate: NumberLike = None
    management_rate: NumberLike = None
    capital_expenditures_rate: NumberLike = None
    repair_rate: NumberLike = None


class PropertyOut(_Camel):
    id: str | None = None
    name: str | None = None
    url: str | None = None
    notes: str | None = None
    mode: str = "ltr"

    purchase_price: float = 0.0
    loan_rate: float = 0.0
    ltv: float = 0.0
    months: int = 0
    insurance: float = 0.0
    taxes_yearly: float = 0.0
    closing: float = 0.0
    total_rehab_cost: float = 0.0
    post_rehab_value: float = 0.0

    monthly_rent: float = 0.0
    average_nightly_rent: float = 0.0
    occupancy_rate: float = 0.0

    vacancy_rate: float = 0.0
    management_rate: float = 0.0
    capital_expenditures_rate: float = 0.0
    repair_rate: float = 0.0


class PropertyCreated(_Camel):
    id: str
    share_url: str


# --------------------------------------------
# Evaluation
# --------------------------------------------

class KpiOut(_Camel):
    """Non-finite values (NaN / Infinity) come back as null."""
    monthly_rev: float | None = None
    monthly_taxes: float | None = None
    monthly_insurance: float | None = None
    vacancy: float | None = None
    management: float | None = None
    capital_expenditures: float | None = None
    repairs: float | None = None
    monthly_mortgage_payment: float | None = None
    total_monthly_cost: float | None = None
    net_monthly_cash_flow: float | None = None
    one_percent_rule: float | None = None
    cap_rate: float | None = None
    cash_flow: float | None = None
    total_close: float | None = None
    co_c_roi: float | None = Field(default=None, alias="coCROI")


class EvaluationOut(_Camel):
    property: PropertyOut
    kpis: KpiOut
    levels: dict[str, Level]
    display: dict[str, str]
    share_url: str | None = None


# --------------------------------------------
# URL preview
# --------------------------------------------

class OgPreviewOut(_Camel):
    url: str
    title: str | None = None
    description: str | None = None
    image_url: str | None = None
    site_name: str | None = None
