# tests/test_api_properties.py


def test_new_property_uses_default_scenario(client):
    r = client.post("/properties")
    assert r.status_code == 200, r.text
    body = r.json()
    pid = body["id"]
    assert body["shareUrl"].endswith(f"/property/{pid}")

    r = client.get(f"/properties/{pid}")
    assert r.status_code == 200, r.text
    prop = r.json()
    assert prop["purchasePrice"] == 500000
    assert prop["monthlyRent"] == 1000
    assert prop["loanRate"] == 6.5
    assert prop["ltv"] == 80
    assert prop["months"] == 360
    assert prop["totalRehabCost"] == 15000
    assert prop["mode"] == "ltr"


def test_new_property_with_overrides(client):
    r = client.post("/properties", json={"name": "Lake cabin", "mode": "str", "averageNightlyRent": 250})
    assert r.status_code == 200, r.text
    prop = client.get(f"/properties/{r.json()['id']}").json()
    assert prop["name"] == "Lake cabin"
    assert prop["mode"] == "str"
    assert prop["averageNightlyRent"] == 250
    # untouched fields keep their defaults
    assert prop["purchasePrice"] == 500000


def test_unknown_property_is_404(client):
    assert client.get("/properties/nope").status_code == 404
    assert client.get("/properties/nope/evaluation").status_code == 404
    assert client.patch("/properties/nope", json={"notes": "x"}).status_code == 404
    assert client.patch("/properties/nope", json={"ltv": 150}).status_code == 404


def test_update_then_evaluate(client):
    pid = client.post("/properties").json()["id"]

    r = client.patch(
        f"/properties/{pid}",
        json={"monthlyRent": "2500", "vacancyRate": "5%", "url": "https://example.com/house"},
    )
    assert r.status_code == 200, r.text
    assert r.json()["monthlyRent"] == 2500
    assert r.json()["url"] == "https://example.com/house"

    r = client.get(f"/properties/{pid}/evaluation")
    assert r.status_code == 200, r.text
    data = r.json()

    assert data["property"]["id"] == pid
    assert data["shareUrl"].endswith(pid)

    kpis = data["kpis"]
    assert kpis["monthlyRev"] == 2500
    assert kpis["monthlyTaxes"] == 625
    assert kpis["vacancy"] == 125
    assert abs(kpis["monthlyMortgagePayment"] + 2528.27) < 0.01
    assert kpis["totalClose"] == 110000
    assert "coCROI" in kpis

    assert set(data["levels"]) == {"netMonthlyCashFlow", "onePercentRule", "capRate", "cashFlow", "coCROI"}
    assert data["display"]["totalClose"] == "$110,000"
    assert data["display"]["capRate"].endswith("%")


def test_update_validation_error_is_400(client):
    pid = client.post("/properties").json()["id"]
    r = client.patch(f"/properties/{pid}", json={"ltv": 150})
    assert r.status_code == 400
    assert "ltv" in r.text


def test_list_properties(client):
    pid = client.post("/properties", json={"name": "listed"}).json()["id"]
    r = client.get("/properties", params={"limit": 500})
    assert r.status_code == 200
    assert pid in [p["id"] for p in r.json()]
