from __future__ import annotations

import uuid

import pytest

from employee_directory.main import app

NEW_EMPLOYEE = {
    "first_name": "E2E",
    "last_name": "Test",
    "email": "e2e.test@example.com",
    "job_title": "QA Engineer",
    "department": "Engineering",
    "location": "Austin, TX",
}


def _create(client, **overrides):
    response = client.post("/api/v1/employees", json={**NEW_EMPLOYEE, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


def test_employee_lifecycle(client):
    created = _create(client)
    employee_id = created["id"]
    assert uuid.UUID(employee_id)
    assert created["phone"] == ""
    assert created["created_at"] is not None

    listing = client.get("/api/v1/employees").json()
    assert employee_id in [e["id"] for e in listing["data"]]

    response = client.patch(f"/api/v1/employees/{employee_id}", json={"first_name": "Updated"})
    assert response.status_code == 200
    assert response.json()["first_name"] == "Updated"
    assert response.json()["last_name"] == "Test"

    response = client.delete(f"/api/v1/employees/{employee_id}")
    assert response.status_code == 204
    assert response.content == b""

    response = client.get(f"/api/v1/employees/{employee_id}")
    assert response.status_code == 404


def test_list_shape_on_empty_store(client):
    response = client.get("/api/v1/employees")

    assert response.status_code == 200
    assert response.json() == {"total_items": 0, "data": [], "current_page": 1, "total_pages": 0}


def test_pagination(client):
    for i in range(3):
        _create(client, email=f"user{i}@example.com", last_name=f"Last{i}")

    response = client.get("/api/v1/employees", params={"page": 2, "limit": 2})
    body = response.json()

    assert body["total_items"] == 3
    assert body["total_pages"] == 2
    assert body["current_page"] == 2
    assert len(body["data"]) == 1


@pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"page": "x"}])
def test_invalid_pagination_is_rejected(client, params):
    assert client.get("/api/v1/employees", params=params).status_code == 422


def test_filters_and_sorting(client):
    _create(client, email="a@example.com", first_name="Zed", department="Design", job_title="Product Designer")
    _create(client, email="b@example.com", first_name="Amy", location="Leeds, West Yorkshire")
    _create(client, email="c@example.com", first_name="Bob")

    design = client.get("/api/v1/employees", params={"department": "Design"}).json()
    assert [e["email"] for e in design["data"]] == ["a@example.com"]

    leeds = client.get("/api/v1/employees", params={"location": "leeds"}).json()
    assert [e["email"] for e in leeds["data"]] == ["b@example.com"]

    search = client.get("/api/v1/employees", params={"search": "designer"}).json()
    assert [e["email"] for e in search["data"]] == ["a@example.com"]

    ordered = client.get("/api/v1/employees", params={"sort_by": "first_name", "sort_order": "DESC"}).json()
    assert [e["first_name"] for e in ordered["data"]] == ["Zed", "Bob", "Amy"]


def test_invalid_sort_is_rejected(client):
    assert client.get("/api/v1/employees", params={"sort_by": "salary"}).status_code == 422
    assert client.get("/api/v1/employees", params={"sort_order": "sideways"}).status_code == 422


def test_create_duplicate_email_returns_409(client):
    _create(client)

    response = client.post("/api/v1/employees", json={**NEW_EMPLOYEE, "first_name": "Other"})

    assert response.status_code == 409
    assert "e2e.test@example.com" in response.json()["detail"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"email": "not-an-email"},
        {"first_name": ""},
        {"first_name": "   "},
        {"picture_url": "not a url"},
    ],
)
def test_create_invalid_payload_returns_422(client, overrides):
    response = client.post("/api/v1/employees", json={**NEW_EMPLOYEE, **overrides})
    assert response.status_code == 422


def test_create_missing_field_returns_422(client):
    payload = dict(NEW_EMPLOYEE)
    del payload["department"]

    assert client.post("/api/v1/employees", json=payload).status_code == 422


def test_get_unknown_returns_404(client):
    assert client.get(f"/api/v1/employees/{uuid.uuid4()}").status_code == 404


def test_get_with_malformed_id_returns_422(client):
    assert client.get("/api/v1/employees/not-a-uuid").status_code == 422


def test_update_unknown_returns_404(client):
    response = client.patch(f"/api/v1/employees/{uuid.uuid4()}", json={"first_name": "X"})
    assert response.status_code == 404


def test_update_to_taken_email_returns_409(client):
    a = _create(client, email="a@example.com")
    _create(client, email="b@example.com")

    response = client.patch(f"/api/v1/employees/{a['id']}", json={"email": "b@example.com"})

    assert response.status_code == 409


def test_update_null_phone_clears_it(client):
    created = _create(client, phone="555-0100")

    response = client.patch(f"/api/v1/employees/{created['id']}", json={"phone": None})

    assert response.status_code == 200
    assert response.json()["phone"] == ""


def test_delete_unknown_returns_404(client):
    assert client.delete(f"/api/v1/employees/{uuid.uuid4()}").status_code == 404


def test_unexpected_error_returns_500(client):
    service = app.state.employee_service
    original = service.find

    async def broken(query):
        raise RuntimeError("store down")

    service.find = broken
    try:
        response = client.get("/api/v1/employees")
    finally:
        service.find = original

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to retrieve employees"


@pytest.mark.anyio
async def test_service_unavailable_without_lifespan(async_client):
    app.state.employee_service = None

    response = await async_client.get("/api/v1/employees")

    assert response.status_code == 503
