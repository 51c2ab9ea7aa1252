from unittest.mock import AsyncMock, patch

from starlette.testclient import TestClient

from employee_directory.core.config import settings
from employee_directory.main import app
from employee_directory.repositories.cosmos_repository import CosmosEmployeeRepository
from employee_directory.services.exceptions import ExternalApiError
from employee_directory.services.random_user_client import RandomUserClient


def test_root_returns_message(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Employee Directory API"


def test_health_returns_status(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] in ("healthy", "degraded")
    assert "version" in data
    assert data["version"] == "0.1.0"
    assert "services" in data


def test_test_environment_does_not_seed(client):
    assert client.get("/api/v1/employees").json()["total_items"] == 0


def test_startup_seeds_empty_store(make_raw_user):
    settings.ENVIRONMENT = "development"
    raw = [make_raw_user("u1", "a@example.com"), make_raw_user("u2", "b@example.com")]

    with patch.object(RandomUserClient, "fetch_raw_employees", AsyncMock(return_value=raw)) as fetch:
        with TestClient(app) as c:
            body = c.get("/api/v1/employees").json()

    fetch.assert_awaited_once()
    assert body["total_items"] == 2


def test_startup_survives_upstream_failure(caplog):
    settings.ENVIRONMENT = "development"

    with patch.object(
        RandomUserClient,
        "fetch_raw_employees",
        AsyncMock(side_effect=ExternalApiError("unreachable", url=settings.RANDOM_USER_API_URL)),
    ):
        with TestClient(app) as c:
            response = c.get("/api/v1/employees")

    assert response.status_code == 200
    assert response.json()["total_items"] == 0
    assert "Failed to seed employee database" in caplog.text


def test_startup_survives_unreachable_record_store(caplog):
    settings.ENVIRONMENT = "development"
    settings.COSMOS_DB_ENDPOINT = "https://unreachable.documents.azure.com:443/"
    settings.COSMOS_DB_KEY = "a2V5"

    with (
        patch.object(CosmosEmployeeRepository, "connect", AsyncMock(side_effect=OSError("dns failure"))),
        patch.object(RandomUserClient, "fetch_raw_employees", AsyncMock()) as fetch,
    ):
        with TestClient(app) as c:
            health = c.get("/api/v1/health")
            employees = c.get("/api/v1/employees")

    assert health.status_code == 200
    assert health.json()["services"]["record_store"] == "not_configured"
    assert employees.status_code == 503
    fetch.assert_not_awaited()
    assert "Failed to initialize EmployeeService" in caplog.text
    assert app.state.employee_service is None
