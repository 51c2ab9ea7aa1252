from __future__ import annotations

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from employee_directory.core.cache import MemoryCache
from employee_directory.main import app
from employee_directory.models.employee import Employee
from employee_directory.repositories.employee_repository import InMemoryEmployeeRepository
from employee_directory.services.employee_service import EmployeeService


@pytest.fixture(autouse=True)
def _test_settings():
    from employee_directory.core.config import settings

    original = (settings.ENVIRONMENT, settings.COSMOS_DB_ENDPOINT, settings.COSMOS_DB_KEY)
    settings.ENVIRONMENT = "test"
    settings.COSMOS_DB_ENDPOINT = ""
    settings.COSMOS_DB_KEY = ""
    yield
    settings.ENVIRONMENT, settings.COSMOS_DB_ENDPOINT, settings.COSMOS_DB_KEY = original


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def _raw_user(
    uuid: str,
    email: str,
    *,
    first: str = "John",
    last: str = "Doe",
    city: str = "Austin",
    state: str = "Texas",
    phone: str = "(555) 010-0000",
) -> dict[str, Any]:
    return {
        "login": {"uuid": uuid},
        "name": {"title": "Mr", "first": first, "last": last},
        "email": email,
        "phone": phone,
        "picture": {"large": f"https://randomuser.me/api/portraits/men/{len(uuid)}.jpg"},
        "location": {"city": city, "state": state, "country": "United States"},
    }


@pytest.fixture
def make_raw_user():
    return _raw_user


@pytest.fixture
def make_employee():
    def _make(employee_id: str, email: str, **overrides: Any) -> Employee:
        data: dict[str, Any] = {
            "id": employee_id,
            "first_name": "John",
            "last_name": "Doe",
            "email": email,
            "job_title": "Software Engineer",
            "department": "Engineering",
            "location": "Austin, Texas",
        }
        data.update(overrides)
        return Employee(**data)

    return _make


@pytest.fixture
def repository():
    return InMemoryEmployeeRepository()


@pytest.fixture
def cache():
    return MemoryCache(ttl_seconds=0)


@pytest.fixture
def service(repository, cache):
    return EmployeeService(repository=repository, cache=cache)
