from __future__ import annotations

from typing import Optional

import typer
from loguru import logger

from propeval.adapters.config import config
from propeval.adapters.sql_repo import SqlPropertyRepository
from propeval.adapters.storage import read_frame, write_frame
from propeval.analysis.finance_batch import compute_kpis_df
from propeval.domain.property import PropertyInput
from propeval.services.evaluator import PropertyEvaluator, PropertyNotFound, evaluate, rules_config_from
from propeval.services.validation import validate_and_prepare_payload

app = typer.Typer(help="Property Evaluator: cash flow, cap rate and CoC for rental scenarios.")

# order of the results card
_HEADLINE = [
    ("net_monthly_cash_flow", "Monthly Cash Flow"),
    ("one_percent_rule", "One Percent Rule"),
    ("cap_rate", "Cap Rate"),
    ("cash_flow", "50% Rule for Cash Flow"),
    ("co_c_roi", "CoCROI"),
    ("total_close", "Total Cash to Close"),
]


def _print_result(result: dict) -> None:
    levels = result["levels"]
    display = result["display"]
    for key, title in _HEADLINE:
        level = levels.get(key, "")
        typer.echo(f"{title:<24} {display[key]:>14}  {level}")


@app.command("evaluate")
def evaluate_cmd(
    purchase_price: float = typer.Option(config.DEFAULT_PURCHASE_PRICE, help="Purchase price"),
    mode: str = typer.Option("ltr", help="ltr | str"),
    monthly_rent: float = typer.Option(config.DEFAULT_MONTHLY_RENT, help="Monthly gross rent (ltr)"),
    average_nightly_rent: float = typer.Option(0.0, help="Average nightly rent (str)"),
    occupancy_rate: float = typer.Option(0.0, help="Occupancy, percent (str)"),
    loan_rate: float = typer.Option(config.DEFAULT_LOAN_RATE, help="Annual loan rate, percent"),
    ltv: float = typer.Option(config.DEFAULT_LTV, help="Loan to value, percent"),
    months: int = typer.Option(config.DEFAULT_MONTHS, help="Loan term in months"),
    insurance: float = typer.Option(config.DEFAULT_INSURANCE, help="Yearly insurance"),
    taxes_yearly: float = typer.Option(config.DEFAULT_TAXES_YEARLY, help="Yearly taxes"),
    closing: float = typer.Option(config.DEFAULT_CLOSING, help="Closing costs"),
    vacancy_rate: float = typer.Option(config.DEFAULT_VACANCY_RATE, help="Vacancy, percent of rent (ltr)"),
    management_rate: float = typer.Option(config.DEFAULT_MANAGEMENT_RATE, help="Management, percent"),
    capital_expenditures_rate: float = typer.Option(config.DEFAULT_CAPEX_RATE, help="CapEx, percent"),
    repair_rate: float = typer.Option(config.DEFAULT_REPAIR_RATE, help="Repairs, percent"),
) -> None:
    """
    Evaluate one scenario without saving it.
    """
    raw = dict(
        purchase_price=purchase_price,
        mode=mode,
        monthly_rent=monthly_rent,
        average_nightly_rent=average_nightly_rent,
        occupancy_rate=occupancy_rate,
        loan_rate=loan_rate,
        ltv=ltv,
        months=months,
        insurance=insurance,
        taxes_yearly=taxes_yearly,
        closing=closing,
        vacancy_rate=vacancy_rate,
        management_rate=management_rate,
        capital_expenditures_rate=capital_expenditures_rate,
        repair_rate=repair_rate,
    )
    try:
        cleaned = validate_and_prepare_payload(raw)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    prop = PropertyInput.model_validate(cleaned)
    _print_result(evaluate(prop, rules=rules_config_from(config)))


@app.command()
def batch(
    in_path: str = typer.Argument(..., help="CSV / Parquet / JSON of property records"),
    out_path: str = typer.Argument(..., help="Where to write inputs + KPI columns"),
) -> None:
    """
    Evaluate every row of a file of property records.
    """
    df = read_frame(in_path)
    logger.info("evaluating {} rows from {}", len(df), in_path)
    kpis = compute_kpis_df(df)
    out = df.join(kpis, rsuffix="_kpi")
    written = write_frame(out, out_path)
    logger.info("wrote {}", written)


@app.command()
def new(
    db_uri: Optional[str] = typer.Option(None, help="Database URI (default: PROPEVAL_DB_URI)"),
) -> None:
    """
    Save a new property with the default scenario and print its share link.
    """
    evaluator = PropertyEvaluator(SqlPropertyRepository(db_uri or config.DB_URI), config)
    pid = evaluator.create_property()
    logger.info("created property {}", pid)
    typer.echo(evaluator.share_url(pid))


@app.command()
def show(
    property_id: str = typer.Argument(..., help="Property id"),
    db_uri: Optional[str] = typer.Option(None, help="Database URI (default: PROPEVAL_DB_URI)"),
) -> None:
    """
    Evaluate a saved property.
    """
    evaluator = PropertyEvaluator(SqlPropertyRepository(db_uri or config.DB_URI), config)
    try:
        result = evaluator.evaluate_property(property_id)
    except PropertyNotFound:
        logger.error("property {} not found", property_id)
        raise typer.Exit(code=1)
    _print_result(result)


if __name__ == "__main__":
    app()
