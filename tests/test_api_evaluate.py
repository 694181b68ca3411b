# tests/test_api_evaluate.py


def _form(**overrides):
    payload = {
        "purchasePrice": 500000,
        "monthlyRent": 2500,
        "insurance": 1200,
        "loanRate": 6.5,
        "ltv": 80,
        "months": 360,
        "taxesYearly": 7500,
        "closing": 10000,
        "vacancyRate": 5,
        "capitalExpendituresRate": 5,
        "repairRate": 5,
        "managementRate": 0,
        "mode": "ltr",
    }
    payload.update(overrides)
    return payload


def test_evaluate_ltr_form(client):
    r = client.post("/evaluate", json=_form())
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["kpis"]["totalClose"] == 110000
    assert data["levels"]["capRate"] == "bad"
    assert data["shareUrl"] is None


def test_evaluate_str_form_ignores_vacancy(client):
    r = client.post("/evaluate", json=_form(mode="str", averageNightlyRent=250, occupancyRate=75, vacancyRate=50))
    assert r.status_code == 200, r.text
    kpis = r.json()["kpis"]
    assert abs(kpis["monthlyRev"] - 5703.125) < 1e-9
    assert kpis["vacancy"] == 0


def test_percent_and_string_inputs_are_normalized(client):
    r = client.post(
        "/evaluate",
        json=_form(purchasePrice="$500,000", loanRate="6.5%", ltv="80%", monthlyRent="2500"),
    )
    assert r.status_code == 200, r.text
    assert abs(r.json()["kpis"]["monthlyMortgagePayment"] + 2528.27) < 0.01


def test_missing_required_field_returns_400(client):
    payload = _form()
    del payload["purchasePrice"]
    r = client.post("/evaluate", json=payload)
    assert r.status_code == 400
    assert "Missing required field" in r.text


def test_non_finite_kpis_serialize_as_null(client):
    # 100% financed with no closing costs: nothing invested, CoC is undefined
    r = client.post("/evaluate", json=_form(ltv=100, closing=0))
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["kpis"]["totalClose"] == 0
    assert data["kpis"]["coCROI"] is None
    assert data["display"]["coCROI"] in {"Infinity%", "-Infinity%", "NaN%"}


def test_evaluate_does_not_persist(client):
    before = len(client.get("/properties", params={"limit": 500}).json())
    client.post("/evaluate", json=_form())
    after = len(client.get("/properties", params={"limit": 500}).json())
    assert before == after
