# src/propeval/api/http.py
from __future__ import annotations

from typing import Any

from fastapi import Body, FastAPI, HTTPException, Query

from propeval.adapters.config import config
from propeval.adapters.logging_utils import get_logger
from propeval.adapters.og_scraper import ScrapeError, make_og_scraper
from propeval.adapters.sql_repo import SqlOgCache, SqlPropertyRepository, make_engine
from propeval.services.evaluator import PropertyEvaluator, PropertyNotFound, finite_or_none
from .schemas import (
    EvaluationOut,
    KpiOut,
    OgPreviewOut,
    PropertyCreated,
    PropertyFields,
    PropertyOut,
    wire_name,
)

logger = get_logger(__name__)

app = FastAPI(title="Property Evaluator")

# single engine so properties and the preview cache share one database
_engine = make_engine(config.DB_URI)
_property_repo = SqlPropertyRepository(config.DB_URI, engine=_engine)
_og_cache = SqlOgCache(config.DB_URI, engine=_engine)

_evaluator = PropertyEvaluator(_property_repo, config)
_scraper = make_og_scraper(_og_cache)


def _evaluation_out(result: dict[str, Any], *, share_url: str | None = None) -> EvaluationOut:
    kpis = {k: finite_or_none(v) for k, v in result["kpis"].items()}
    return EvaluationOut(
        property=PropertyOut.model_validate(result["property"]),
        kpis=KpiOut.model_validate(kpis),
        levels={wire_name(k): v for k, v in result["levels"].items()},
        display={wire_name(k): v for k, v in result["display"].items()},
        share_url=share_url,
    )


# -----------------------------
# Properties
# -----------------------------
@app.post("/properties", response_model=PropertyCreated)
def create_property(payload: PropertyFields | None = Body(default=None)) -> PropertyCreated:
    """
    "New Property": store the default scenario (plus any overrides) and
    hand back the id used in share links.
    """
    overrides = payload.model_dump(exclude_unset=True) if payload else None
    try:
        pid = _evaluator.create_property(overrides)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return PropertyCreated(id=pid, share_url=_evaluator.share_url(pid))


@app.get("/properties", response_model=list[PropertyOut])
def list_properties(limit: int = Query(50, ge=1, le=500)) -> list[PropertyOut]:
    return [PropertyOut.model_validate(r) for r in _evaluator.list_recent(limit=limit)]


@app.get("/properties/{property_id}", response_model=PropertyOut)
def get_property(property_id: str) -> PropertyOut:
    try:
        rec = _evaluator.get_property(property_id)
    except PropertyNotFound as e:
        raise HTTPException(status_code=404, detail="Not Found") from e
    return PropertyOut.model_validate(rec)


@app.patch("/properties/{property_id}", response_model=PropertyOut)
def update_property(property_id: str, payload: PropertyFields) -> PropertyOut:
    try:
        rec = _evaluator.update_property(property_id, payload.model_dump(exclude_unset=True))
    except PropertyNotFound as e:
        raise HTTPException(status_code=404, detail="Not Found") from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return PropertyOut.model_validate(rec)


@app.get("/properties/{property_id}/evaluation", response_model=EvaluationOut)
def evaluate_property(property_id: str) -> EvaluationOut:
    try:
        result = _evaluator.evaluate_property(property_id)
    except PropertyNotFound as e:
        raise HTTPException(status_code=404, detail="Not Found") from e
    return _evaluation_out(result, share_url=_evaluator.share_url(property_id))


@app.post("/evaluate", response_model=EvaluationOut)
def evaluate_form(payload: PropertyFields) -> EvaluationOut:
    """
    Evaluate unsaved form state. Nothing is written.
    """
    try:
        result = _evaluator.evaluate_payload(payload.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _evaluation_out(result)


# -----------------------------
# URL preview
# -----------------------------
@app.get("/scrape", response_model=OgPreviewOut)
def scrape_url(url: str = Query(..., description="Listing URL to preview")) -> OgPreviewOut:
    try:
        meta = _scraper.scrape(url)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ScrapeError as e:
        logger.warning("url preview failed", extra={"context": {"url": url, "error": str(e)}})
        raise HTTPException(status_code=502, detail=str(e)) from e
    return OgPreviewOut(**meta.as_dict())
