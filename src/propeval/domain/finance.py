# src/propeval/domain/finance.py
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Literal

from propeval.domain.property import PropertyInput

PaymentTiming = Literal["end", "begin"]

DAYS_PER_YEAR = 365
MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class KpiResult:
    monthly_rev: float                 # gross monthly revenue

    # expense line items (monthly)
    monthly_taxes: float
    monthly_insurance: float
    vacancy: float
    management: float
    capital_expenditures: float
    repairs: float

    monthly_mortgage_payment: float    # negative = outflow
    total_monthly_cost: float
    net_monthly_cash_flow: float

    one_percent_rule: float            # ratio, not percent-scaled
    cap_rate: float
    cash_flow: float                   # "50% rule" figure
    total_close: float                 # cash required at purchase
    co_c_roi: float

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


# -------------------------------------------------------------------
# Float helpers
#
# Python raises on x / 0.0 and on pow overflow. Degenerate inputs must
# flow through as inf / nan instead, so every division and power in the
# engine goes through these.
# -------------------------------------------------------------------
def _div(num: float, den: float) -> float:
    if den == 0:
        if num == 0 or math.isnan(num):
            return math.nan
        return math.copysign(math.inf, num) * math.copysign(1.0, den)
    return num / den


def _pow(base: float, exp: float) -> float:
    try:
        return math.pow(base, exp)
    except OverflowError:
        if base < 0 and float(exp).is_integer() and int(exp) % 2 == 1:
            return -math.inf
        return math.inf
    except ValueError:
        # negative base with a fractional exponent
        return math.nan


def pmt(
    rate: float,
    nper: float,
    pv: float,
    fv: float = 0.0,
    when: PaymentTiming = "end",
) -> float:
    """
    Fixed periodic payment that amortizes `pv` down to `fv` over `nper` periods.

    rate - interest rate per period, as a fraction (annual % / 100 / 12 for monthly)
    nper - number of periods
    pv   - present value (loan principal)
    fv   - future value left at the end of the term
    when - "end": payment at the end of each period (default)
           "begin": payment at the start of each period

    The result follows the annuity sign convention: a positive principal gives
    a negative payment (cash out of the borrower's pocket). Degenerate inputs
    (nper == 0, ...) return inf / nan; nothing is raised.
    """
    if rate == 0:
        return _div(-(pv + fv), nper)

    growth = _pow(1 + rate, nper)
    payment = _div(-rate * (pv * growth + fv), growth - 1)

    if when == "begin":
        payment = _div(payment, 1 + rate)

    return payment


# alias matching the finance-literature name used by callers
compute_payment = pmt


def monthly_revenue(prop: PropertyInput) -> float:
    if prop.mode == "ltr":
        return prop.monthly_rent
    # annualized nightly revenue at the stated occupancy, averaged per month
    nightly_year = prop.average_nightly_rent * DAYS_PER_YEAR * (prop.occupancy_rate / 100)
    return nightly_year / MONTHS_PER_YEAR


def derive_kpis(prop: PropertyInput) -> KpiResult:
    """
    Turn one property record into the full set of investment metrics.

    Rates on `prop` are percent-scaled (0-100) and converted to fractions here,
    exactly once. Pure function: no I/O, no validation, no clamping.
    """
    is_ltr = prop.mode == "ltr"

    # --- revenue ---
    monthly_rev = monthly_revenue(prop)

    # --- fixed costs ---
    monthly_taxes = prop.taxes_yearly / MONTHS_PER_YEAR
    monthly_insurance = prop.insurance / MONTHS_PER_YEAR

    # --- rate-based expenses (percent of revenue) ---
    # STR occupancy is already baked into revenue, so no vacancy line there
    vacancy = monthly_rev * (prop.vacancy_rate / 100) if is_ltr else 0.0
    management = monthly_rev * (prop.management_rate / 100)
    capital_expenditures = monthly_rev * (prop.capital_expenditures_rate / 100)
    repairs = monthly_rev * (prop.repair_rate / 100)

    # --- debt service ---
    principal = prop.purchase_price * (prop.ltv / 100)
    monthly_mortgage_payment = pmt(
        prop.loan_rate / 100 / MONTHS_PER_YEAR,
        prop.months,
        principal,
        0.0,
    )

    # payment is negative, subtracting it adds the outflow
    total_monthly_cost = (
        monthly_taxes
        + monthly_insurance
        + vacancy
        + management
        + capital_expenditures
        + repairs
        - monthly_mortgage_payment
    )
    net_monthly_cash_flow = monthly_rev - total_monthly_cost

    # --- ratios ---
    one_percent_rule = _div(monthly_rev, prop.purchase_price)

    # NOI before reserves: capex and repairs stay out of the deduction
    noi_monthly = monthly_rev - monthly_taxes - monthly_insurance - vacancy - management
    cap_rate = _div(noi_monthly * MONTHS_PER_YEAR, prop.purchase_price)

    cash_flow = monthly_rev * 0.5 + monthly_mortgage_payment

    # rehab cost is not part of cash to close
    total_close = prop.purchase_price * (1 - prop.ltv / 100) + prop.closing
    co_c_roi = _div(net_monthly_cash_flow * MONTHS_PER_YEAR, total_close)

    return KpiResult(
        monthly_rev=monthly_rev,
        monthly_taxes=monthly_taxes,
        monthly_insurance=monthly_insurance,
        vacancy=vacancy,
        management=management,
        capital_expenditures=capital_expenditures,
        repairs=repairs,
        monthly_mortgage_payment=monthly_mortgage_payment,
        total_monthly_cost=total_monthly_cost,
        net_monthly_cash_flow=net_monthly_cash_flow,
        one_percent_rule=one_percent_rule,
        cap_rate=cap_rate,
        cash_flow=cash_flow,
        total_close=total_close,
        co_c_roi=co_c_roi,
    )
