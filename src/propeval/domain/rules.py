from dataclasses import dataclass
from typing import Literal

from propeval.domain.finance import KpiResult

Level = Literal["good", "warning", "bad"]


@dataclass(frozen=True)
class RulesConfig:
    cash_flow_good: float = 400.0        # net monthly cash flow, strictly above
    cash_flow_warning: float = 100.0
    one_percent_good: float = 0.01       # at or above
    one_percent_warning: float = 0.008   # strictly above
    cap_rate_good: float = 0.08
    cap_rate_warning: float = 0.05
    cocroi_good: float = 0.08
    cocroi_warning: float = 0.0


def _tier(value: float, good: float, warning: float, *, inclusive_good: bool = True) -> Level:
    hit_good = value >= good if inclusive_good else value > good
    if hit_good:
        return "good"
    if value > warning:
        return "warning"
    return "bad"


def classify_kpis(kpis: KpiResult, config: RulesConfig | None = None) -> dict[str, Level]:
    """
    Traffic-light tiers for the headline KPIs.

    NaN compares false everywhere, so a NaN metric lands in "bad"
    (or "warning" for the 50% rule, which has no lower band).
    """
    cfg = config or RulesConfig()

    if kpis.cash_flow > 0:
        fifty_pct: Level = "good"
    elif kpis.cash_flow < 0:
        fifty_pct = "bad"
    else:
        fifty_pct = "warning"

    return {
        "net_monthly_cash_flow": _tier(
            kpis.net_monthly_cash_flow,
            cfg.cash_flow_good,
            cfg.cash_flow_warning,
            inclusive_good=False,
        ),
        "one_percent_rule": _tier(kpis.one_percent_rule, cfg.one_percent_good, cfg.one_percent_warning),
        "cap_rate": _tier(kpis.cap_rate, cfg.cap_rate_good, cfg.cap_rate_warning),
        "cash_flow": fifty_pct,
        "co_c_roi": _tier(kpis.co_c_roi, cfg.cocroi_good, cfg.cocroi_warning),
    }
