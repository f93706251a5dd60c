"""
Tests for the health check endpoint.
"""


def test_health_check_returns_200(client):
    response = client.get("/health")
    assert response.status_code == 200


def test_health_check_reports_service_and_store(client):
    """
    Monitoring parses these fields, so their names and values are
    part of the contract.
    """
    data = client.get("/health").json()
    assert data["service"] == "finance-ledger"
    assert data["status"] == "healthy"
    assert data["database"] == "healthy"


def test_health_check_names_the_backend(client):
    assert client.get("/health").json()["backend"] == "sqlite"
