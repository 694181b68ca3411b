import pytest

from propeval.adapters.memory_repo import InMemoryOgCache, InMemoryPropertyRepository
from propeval.adapters.sql_repo import SqlOgCache, SqlPropertyRepository, make_engine
from propeval.domain.finance import derive_kpis
from propeval.domain.property import PropertyInput
from fixtures.properties import scenario_a, scenario_a_fields


@pytest.fixture
def sql_repo():
    return SqlPropertyRepository(engine=make_engine("sqlite://"))


@pytest.fixture(params=["sql", "memory"])
def repo(request):
    if request.param == "sql":
        return SqlPropertyRepository(engine=make_engine("sqlite://"))
    return InMemoryPropertyRepository()


def test_create_then_get_round_trips_fields(repo):
    pid = repo.create(scenario_a_fields())
    rec = repo.get(pid)

    assert rec is not None
    assert rec["id"] == pid
    assert rec["purchase_price"] == pytest.approx(500_000.0)
    assert rec["loan_rate"] == pytest.approx(6.5)
    assert rec["months"] == 360
    assert rec["mode"] == "ltr"


def test_stored_record_evaluates_like_the_input(repo):
    pid = repo.create(scenario_a_fields())
    prop = PropertyInput.model_validate(repo.get(pid))
    assert derive_kpis(prop).as_dict() == pytest.approx(derive_kpis(scenario_a()).as_dict())


def test_get_unknown_is_none(repo):
    assert repo.get("does-not-exist") is None
    assert repo.update("does-not-exist", {"notes": "x"}) is None


def test_update_is_partial(repo):
    pid = repo.create(scenario_a_fields())
    rec = repo.update(pid, {"monthly_rent": 3000.0, "notes": "raised rent"})

    assert rec["monthly_rent"] == pytest.approx(3000.0)
    assert rec["notes"] == "raised rent"
    assert rec["purchase_price"] == pytest.approx(500_000.0)


def test_list_recent_puts_latest_update_first(repo):
    first = repo.create(scenario_a_fields())
    second = repo.create(scenario_a_fields())
    repo.update(first, {"notes": "touched"})

    ids = [r["id"] for r in repo.list_recent(limit=10)]
    assert ids[0] == first
    assert set(ids) == {first, second}
    assert len(repo.list_recent(limit=1)) == 1


def test_ids_are_unique_and_url_safe(sql_repo):
    ids = {sql_repo.create(scenario_a_fields()) for _ in range(20)}
    assert len(ids) == 20
    assert all(len(i) == 12 and "/" not in i and "+" not in i for i in ids)


def test_money_and_rates_stored_at_two_decimals(sql_repo):
    pid = sql_repo.create({**scenario_a_fields(), "monthly_rent": 2500.005, "loan_rate": 6.125})
    rec = sql_repo.get(pid)
    assert rec["monthly_rent"] == pytest.approx(2500.01)
    assert rec["loan_rate"] == pytest.approx(6.13)


@pytest.mark.parametrize("cache_factory", [lambda: SqlOgCache(engine=make_engine("sqlite://")), InMemoryOgCache])
def test_og_cache_put_get_and_expiry(cache_factory):
    cache = cache_factory()
    key = "https://example.com/listing"

    assert cache.get(key, max_age_s=60) is None

    cache.put(key, {"url": key, "title": "Nice house"})
    assert cache.get(key, max_age_s=60) == {"url": key, "title": "Nice house"}

    # anything older than -1s counts as stale
    assert cache.get(key, max_age_s=-1) is None

    cache.put(key, {"url": key, "title": "Nicer house"})
    assert cache.get(key, max_age_s=60)["title"] == "Nicer house"
