from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Operating modes we support
Mode = Literal["ltr", "str"]


class PropertyInput(BaseModel):
    """
    One saved (or in-flight) property scenario, as read by the KPI engine.

    Every rate is percent-scaled (6.5 means 6.5%). Nothing here is range
    checked; sanity is the input layer's job (services/validation.py).
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    id: str | None = None
    name: str | None = None

    # Financing
    purchase_price: float = Field(..., description="Purchase price of the property")
    loan_rate: float = Field(..., description="Annual loan rate, percent")
    ltv: float = Field(..., description="Loan to value, percent of purchase price borrowed")
    months: int = Field(..., description="Loan term in months")

    # Fixed costs
    insurance: float = Field(0.0, description="Yearly insurance")
    taxes_yearly: float = Field(0.0, description="Yearly total taxes")
    closing: float = Field(0.0, description="Closing costs")

    # Kept on the record, not used by any KPI
    total_rehab_cost: float = 0.0
    post_rehab_value: float = 0.0

    mode: Mode = "ltr"

    # LTR revenue
    monthly_rent: float = 0.0

    # STR revenue
    average_nightly_rent: float = 0.0
    occupancy_rate: float = 0.0

    # Expense rates, percent of monthly revenue
    vacancy_rate: float = 0.0  # LTR only
    management_rate: float = 0.0
    capital_expenditures_rate: float = 0.0
    repair_rate: float = 0.0

    url: str | None = None
    notes: str | None = None
