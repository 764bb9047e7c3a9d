from conftest import API_KEY


def test_health_endpoint_returns_ok(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["service"] == "Hook Relay"
    assert "version" in body
    assert "environment" in body
    assert body["providers"] == ["mux", "stripe"]


def test_health_reports_registered_endpoint_count(client):
    assert client.get("/health").json()["endpoints"] == 0

    client.post("/endpoints", params={"url": "https://a.example.com", "api_key": API_KEY})
    client.post("/endpoints", params={"url": "https://b.example.com", "api_key": API_KEY})

    assert client.get("/health").json()["endpoints"] == 2
