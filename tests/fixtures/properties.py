# tests/fixtures/properties.py

from propeval.domain.property import PropertyInput


def scenario_a_fields() -> dict:
    """
    500k LTR house, 80% LTV at 6.5% over 30 years, 2500/mo rent.
    """
    return dict(
        purchase_price=500_000.0,
        monthly_rent=2_500.0,
        insurance=1_200.0,
        loan_rate=6.5,
        ltv=80.0,
        months=360,
        taxes_yearly=7_500.0,
        closing=10_000.0,
        vacancy_rate=5.0,
        capital_expenditures_rate=5.0,
        repair_rate=5.0,
        management_rate=0.0,
        mode="ltr",
    )


def scenario_a() -> PropertyInput:
    return PropertyInput(**scenario_a_fields())


def scenario_b() -> PropertyInput:
    """
    Same financing as scenario A, run as a short-term rental:
    250/night at 75% occupancy. vacancy_rate is set on purpose; STR ignores it.
    """
    return PropertyInput(
        **{
            **scenario_a_fields(),
            "mode": "str",
            "average_nightly_rent": 250.0,
            "occupancy_rate": 75.0,
            "vacancy_rate": 10.0,
            "management_rate": 20.0,
        }
    )


def cashflow_beast() -> PropertyInput:
    """
    Cheap house, big rent, all cash down: every headline KPI lands in "good".
    """
    return PropertyInput(
        purchase_price=100_000.0,
        monthly_rent=2_000.0,
        insurance=600.0,
        loan_rate=0.0,
        ltv=0.0,
        months=360,
        taxes_yearly=1_200.0,
        closing=0.0,
        mode="ltr",
    )
