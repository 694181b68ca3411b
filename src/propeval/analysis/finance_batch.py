# src/propeval/analysis/finance_batch.py

from __future__ import annotations

import numpy as np
import pandas as pd
from pydantic.alias_generators import to_snake

from propeval.domain.finance import DAYS_PER_YEAR, MONTHS_PER_YEAR, KpiResult

# Columns read from the input frame, with the value used when absent
INPUT_DEFAULTS: dict[str, object] = {
    "mode": "ltr",
    "purchase_price": np.nan,
    "loan_rate": np.nan,
    "ltv": np.nan,
    "months": np.nan,
    "insurance": 0.0,
    "taxes_yearly": 0.0,
    "closing": 0.0,
    "monthly_rent": 0.0,
    "average_nightly_rent": 0.0,
    "occupancy_rate": 0.0,
    "vacancy_rate": 0.0,
    "management_rate": 0.0,
    "capital_expenditures_rate": 0.0,
    "repair_rate": 0.0,
}

KPI_COLUMNS = list(KpiResult.__dataclass_fields__)


def _col(df: pd.DataFrame, name: str) -> np.ndarray:
    if name in df.columns:
        return pd.to_numeric(df[name], errors="coerce").to_numpy(dtype=float)
    return np.full(len(df), INPUT_DEFAULTS[name], dtype=float)


def pmt_vec(rate: np.ndarray, nper: np.ndarray, pv: np.ndarray, fv: np.ndarray | float = 0.0) -> np.ndarray:
    """
    Vectorized end-of-period payment, same sign convention as domain.finance.pmt.
    """
    rate = np.asarray(rate, dtype=float)
    nper = np.asarray(nper, dtype=float)
    pv = np.asarray(pv, dtype=float)
    fv = np.broadcast_to(np.asarray(fv, dtype=float), pv.shape)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        growth = (1 + rate) ** nper
        amortized = (-rate * (pv * growth + fv)) / (growth - 1)
        linear = -(pv + fv) / nper
    return np.where(rate == 0, linear, amortized)


def compute_kpis_df(df: pd.DataFrame) -> pd.DataFrame:
    """
    Vectorized KPI derivation over a DataFrame of property records.

    One output row per input row (same index), one column per KpiResult
    field. Column names may be snake_case or the camelCase wire names.
    Degenerate rows yield inf / nan exactly like the scalar engine.
    """
    df = df.rename(columns={c: to_snake(str(c)) for c in df.columns})

    if "mode" in df.columns:
        mode = df["mode"].fillna("ltr").astype(str).str.strip().str.lower().to_numpy()
    else:
        mode = np.full(len(df), "ltr", dtype=object)
    is_ltr = mode == "ltr"

    purchase_price = _col(df, "purchase_price")
    ltv = _col(df, "ltv")

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        # --- revenue ---
        str_rev = (
            _col(df, "average_nightly_rent") * DAYS_PER_YEAR * (_col(df, "occupancy_rate") / 100)
        ) / MONTHS_PER_YEAR
        monthly_rev = np.where(is_ltr, _col(df, "monthly_rent"), str_rev)

        # --- fixed costs ---
        monthly_taxes = _col(df, "taxes_yearly") / MONTHS_PER_YEAR
        monthly_insurance = _col(df, "insurance") / MONTHS_PER_YEAR

        # --- rate-based expenses ---
        vacancy = np.where(is_ltr, monthly_rev * (_col(df, "vacancy_rate") / 100), 0.0)
        management = monthly_rev * (_col(df, "management_rate") / 100)
        capital_expenditures = monthly_rev * (_col(df, "capital_expenditures_rate") / 100)
        repairs = monthly_rev * (_col(df, "repair_rate") / 100)

        # --- debt service ---
        principal = purchase_price * (ltv / 100)
        mortgage = pmt_vec(_col(df, "loan_rate") / 100 / MONTHS_PER_YEAR, _col(df, "months"), principal)

        total_monthly_cost = (
            monthly_taxes
            + monthly_insurance
            + vacancy
            + management
            + capital_expenditures
            + repairs
            - mortgage
        )
        net_monthly_cash_flow = monthly_rev - total_monthly_cost

        one_percent_rule = monthly_rev / purchase_price
        cap_rate = (
            (monthly_rev - monthly_taxes - monthly_insurance - vacancy - management) * MONTHS_PER_YEAR
        ) / purchase_price
        cash_flow = monthly_rev * 0.5 + mortgage
        total_close = purchase_price * (1 - ltv / 100) + _col(df, "closing")
        co_c_roi = (net_monthly_cash_flow * MONTHS_PER_YEAR) / total_close

    return pd.DataFrame(
        {
            "monthly_rev": monthly_rev,
            "monthly_taxes": monthly_taxes,
            "monthly_insurance": monthly_insurance,
            "vacancy": vacancy,
            "management": management,
            "capital_expenditures": capital_expenditures,
            "repairs": repairs,
            "monthly_mortgage_payment": mortgage,
            "total_monthly_cost": total_monthly_cost,
            "net_monthly_cash_flow": net_monthly_cash_flow,
            "one_percent_rule": one_percent_rule,
            "cap_rate": cap_rate,
            "cash_flow": cash_flow,
            "total_close": total_close,
            "co_c_roi": co_c_roi,
        },
        index=df.index,
        columns=KPI_COLUMNS,
    )
