from __future__ import annotations

import math
from typing import Any

from propeval.adapters.config import AppConfig, config
from propeval.adapters.logging_utils import get_logger
from propeval.domain.display import format_kpi
from propeval.domain.finance import KpiResult, derive_kpis
from propeval.domain.ports import PropertyRecord, PropertyRepository
from propeval.domain.property import PropertyInput
from propeval.domain.rules import RulesConfig, classify_kpis
from propeval.services.validation import validate_and_prepare_payload

logger = get_logger(__name__)


class PropertyNotFound(LookupError):
    pass


def rules_config_from(cfg: AppConfig) -> RulesConfig:
    return RulesConfig(cocroi_warning=cfg.COCROI_WARNING_MIN)


def finite_or_none(v: float) -> float | None:
    return v if math.isfinite(v) else None


def evaluate(prop: PropertyInput, *, rules: RulesConfig | None = None) -> dict[str, Any]:
    """
    KPIs + tiers + display strings for one scenario.

    "kpis" keeps raw floats (inf / nan included); callers that need JSON
    should pass them through finite_or_none first.
    """
    kpis: KpiResult = derive_kpis(prop)
    levels = classify_kpis(kpis, rules)

    values = kpis.as_dict()
    # line items fall through to money formatting
    display = {name: format_kpi(name, v) for name, v in values.items()}

    return {
        "kpis": values,
        "levels": levels,
        "display": display,
    }


class PropertyEvaluator:
    """
    Glue between storage, validation and the KPI engine.
    """

    def __init__(self, repo: PropertyRepository, cfg: AppConfig | None = None):
        self.repo = repo
        self.cfg = cfg or config
        self.rules = rules_config_from(self.cfg)

    def create_property(self, overrides: dict[str, Any] | None = None) -> str:
        fields = dict(self.cfg.default_property_fields())
        if overrides:
            fields.update(validate_and_prepare_payload(overrides, partial=True))
        pid = self.repo.create(fields)  # type: ignore[arg-type]
        logger.info("property created", extra={"context": {"property_id": pid, "mode": fields["mode"]}})
        return pid

    def get_property(self, property_id: str) -> PropertyRecord:
        rec = self.repo.get(property_id)
        if rec is None:
            raise PropertyNotFound(property_id)
        return rec

    def update_property(self, property_id: str, changes: dict[str, Any]) -> PropertyRecord:
        # unknown id wins over a bad payload: 404 before 400
        self.get_property(property_id)
        cleaned = validate_and_prepare_payload(changes, partial=True)
        rec = self.repo.update(property_id, cleaned)  # type: ignore[arg-type]
        if rec is None:
            raise PropertyNotFound(property_id)
        logger.info(
            "property updated",
            extra={"context": {"property_id": property_id, "fields": sorted(cleaned)}},
        )
        return rec

    def list_recent(self, limit: int = 50) -> list[PropertyRecord]:
        return self.repo.list_recent(limit=limit)

    def evaluate_property(self, property_id: str) -> dict[str, Any]:
        rec = self.get_property(property_id)
        prop = PropertyInput.model_validate(rec)
        return {"property": rec, **evaluate(prop, rules=self.rules)}

    def evaluate_payload(self, raw: dict[str, Any]) -> dict[str, Any]:
        """Transient form state: validated and evaluated, never stored."""
        cleaned = validate_and_prepare_payload(raw)
        prop = PropertyInput.model_validate(cleaned)
        return {"property": cleaned, **evaluate(prop, rules=self.rules)}

    def share_url(self, property_id: str) -> str:
        return f"{self.cfg.PUBLIC_BASE_URL.rstrip('/')}/property/{property_id}"
