import time
from typing import Any

from propeval.adapters.ids import new_property_id
from propeval.domain.ports import OgCache, PropertyRecord, PropertyRepository


class InMemoryPropertyRepository(PropertyRepository):
    def __init__(self) -> None:
        self._items: dict[str, dict[str, Any]] = {}

    def create(self, fields: PropertyRecord) -> str:
        pid = new_property_id()
        self._items[pid] = {**fields, "id": pid}
        return pid

    def get(self, property_id: str) -> PropertyRecord | None:
        rec = self._items.get(property_id)
        return dict(rec) if rec is not None else None  # type: ignore[return-value]

    def update(self, property_id: str, fields: PropertyRecord) -> PropertyRecord | None:
        if property_id not in self._items:
            return None
        rec = {**self._items.pop(property_id), **fields, "id": property_id}
        # re-insert so the dict order doubles as recency
        self._items[property_id] = rec
        return dict(rec)  # type: ignore[return-value]

    def list_recent(self, limit: int = 50) -> list[PropertyRecord]:
        return [dict(r) for r in reversed(list(self._items.values()))][:limit]  # type: ignore[misc]


class InMemoryOgCache(OgCache):
    def __init__(self) -> None:
        self._items: dict[str, tuple[float, dict[str, Any]]] = {}

    def get(self, url_key: str, *, max_age_s: float) -> dict[str, Any] | None:
        hit = self._items.get(url_key)
        if hit is None:
            return None
        ts, data = hit
        if time.time() - ts > max_age_s:
            return None
        return dict(data)

    def put(self, url_key: str, data: dict[str, Any]) -> None:
        self._items[url_key] = (time.time(), dict(data))
