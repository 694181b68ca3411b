# src/propeval/adapters/sql_repo.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import JSON, Column, Field, Session, SQLModel, create_engine, select

from propeval.adapters.ids import new_property_id
from propeval.domain.ports import PropertyRecord

TABLE_PREFIX = "propertyEvaluator_"

# Money columns: 11 digits, 2 fractional. Rate columns: 6 digits, 2 fractional.
MONEY_FIELDS = (
    "purchase_price",
    "insurance",
    "taxes_yearly",
    "closing",
    "total_rehab_cost",
    "post_rehab_value",
    "monthly_rent",
    "average_nightly_rent",
)
RATE_FIELDS = (
    "loan_rate",
    "ltv",
    "occupancy_rate",
    "vacancy_rate",
    "management_rate",
    "capital_expenditures_rate",
    "repair_rate",
)
TEXT_FIELDS = ("name", "url", "notes", "mode")

_CENTS = Decimal("0.01")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _to_decimal(v: Any) -> Decimal:
    return Decimal(str(v)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def make_engine(uri: str) -> Engine:
    if uri in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every session sees an empty db
        return create_engine(
            uri,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if uri.startswith("sqlite"):
        return create_engine(uri, echo=False, connect_args={"check_same_thread": False})
    return create_engine(uri, echo=False)


# ---------- Properties ----------

class PropertyRow(SQLModel, table=True):
    __tablename__ = f"{TABLE_PREFIX}property"

    id: str = Field(primary_key=True, max_length=32)
    created_at: datetime = Field(default_factory=_utcnow, index=True)
    updated_at: datetime = Field(default_factory=_utcnow, index=True)

    name: str | None = None
    url: str | None = None
    notes: str | None = None
    mode: str = Field(default="ltr")

    purchase_price: Decimal = Field(default=Decimal("0"), max_digits=11, decimal_places=2)
    insurance: Decimal = Field(default=Decimal("0"), max_digits=11, decimal_places=2)
    taxes_yearly: Decimal = Field(default=Decimal("0"), max_digits=11, decimal_places=2)
    closing: Decimal = Field(default=Decimal("0"), max_digits=11, decimal_places=2)
    total_rehab_cost: Decimal = Field(default=Decimal("0"), max_digits=11, decimal_places=2)
    post_rehab_value: Decimal = Field(default=Decimal("0"), max_digits=11, decimal_places=2)
    monthly_rent: Decimal = Field(default=Decimal("0"), max_digits=11, decimal_places=2)
    average_nightly_rent: Decimal = Field(default=Decimal("0"), max_digits=11, decimal_places=2)

    loan_rate: Decimal = Field(default=Decimal("0"), max_digits=6, decimal_places=2)
    ltv: Decimal = Field(default=Decimal("0"), max_digits=6, decimal_places=2)
    occupancy_rate: Decimal = Field(default=Decimal("0"), max_digits=6, decimal_places=2)
    vacancy_rate: Decimal = Field(default=Decimal("0"), max_digits=6, decimal_places=2)
    management_rate: Decimal = Field(default=Decimal("0"), max_digits=6, decimal_places=2)
    capital_expenditures_rate: Decimal = Field(default=Decimal("0"), max_digits=6, decimal_places=2)
    repair_rate: Decimal = Field(default=Decimal("0"), max_digits=6, decimal_places=2)

    months: int = Field(default=360)

    def to_record(self) -> PropertyRecord:
        rec: dict[str, Any] = {"id": self.id, "months": int(self.months)}
        for f in TEXT_FIELDS:
            rec[f] = getattr(self, f)
        for f in MONEY_FIELDS + RATE_FIELDS:
            v = getattr(self, f)
            rec[f] = float(v) if v is not None else 0.0
        return rec  # type: ignore[return-value]


def _apply_fields(row: PropertyRow, fields: dict[str, Any]) -> None:
    for f in MONEY_FIELDS + RATE_FIELDS:
        if f in fields and fields[f] is not None:
            setattr(row, f, _to_decimal(fields[f]))
    for f in TEXT_FIELDS:
        if f in fields:
            setattr(row, f, fields[f])
    if fields.get("months") is not None:
        row.months = int(fields["months"])


class SqlPropertyRepository:
    def __init__(self, uri: str = "sqlite:///propeval.db", engine: Engine | None = None):
        self.engine = engine or make_engine(uri)
        SQLModel.metadata.create_all(self.engine)

    def create(self, fields: PropertyRecord) -> str:
        row = PropertyRow(id=new_property_id())
        _apply_fields(row, dict(fields))
        with Session(self.engine) as session:
            session.add(row)
            session.commit()
            return row.id

    def get(self, property_id: str) -> PropertyRecord | None:
        with Session(self.engine) as session:
            row = session.get(PropertyRow, property_id)
            return row.to_record() if row else None

    def update(self, property_id: str, fields: PropertyRecord) -> PropertyRecord | None:
        with Session(self.engine) as session:
            row = session.get(PropertyRow, property_id)
            if not row:
                return None
            _apply_fields(row, dict(fields))
            row.updated_at = _utcnow()
            session.add(row)
            session.commit()
            session.refresh(row)
            return row.to_record()

    def list_recent(self, limit: int = 50) -> list[PropertyRecord]:
        with Session(self.engine) as session:
            stmt = select(PropertyRow).order_by(PropertyRow.updated_at.desc()).limit(limit)
            return [r.to_record() for r in session.exec(stmt)]


# ---------- URL preview cache ----------

class OgCacheRow(SQLModel, table=True):
    __tablename__ = f"{TABLE_PREFIX}og_cache"

    url_key: str = Field(primary_key=True)
    fetched_at: datetime = Field(default_factory=_utcnow, index=True)

    data: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))


class SqlOgCache:
    def __init__(self, uri: str = "sqlite:///propeval.db", engine: Engine | None = None):
        self.engine = engine or make_engine(uri)
        SQLModel.metadata.create_all(self.engine)

    def get(self, url_key: str, *, max_age_s: float) -> dict[str, Any] | None:
        with Session(self.engine) as session:
            row = session.get(OgCacheRow, url_key)
            if not row:
                return None
            if _utcnow() - row.fetched_at > timedelta(seconds=max_age_s):
                return None
            return dict(row.data or {})

    def put(self, url_key: str, data: dict[str, Any]) -> None:
        with Session(self.engine) as session:
            row = session.get(OgCacheRow, url_key)
            if row:
                row.data = data
                row.fetched_at = _utcnow()
            else:
                row = OgCacheRow(url_key=url_key, data=data)
            session.add(row)
            session.commit()
