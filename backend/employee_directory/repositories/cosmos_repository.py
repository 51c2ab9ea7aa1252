"""Cosmos DB employee store."""

from __future__ import annotations

import logging
from typing import Any

from azure.cosmos import PartitionKey
from azure.cosmos.aio import CosmosClient
from azure.cosmos.exceptions import CosmosResourceExistsError, CosmosResourceNotFoundError

from employee_directory.core.config import Settings
from employee_directory.models.employee import Employee, EmployeeQuery
from employee_directory.repositories.employee_repository import utcnow
from employee_directory.services.exceptions import DuplicateEmailError

logger = logging.getLogger(__name__)

# All employees share one logical partition so the /email unique key is
# enforced across the whole directory (Cosmos scopes unique keys per partition).
PARTITION_KEY_PATH = "/directory"
PARTITION_VALUE = "employees"

# Python attribute names → Cosmos document keys
_FIELD_MAP: list[tuple[str, str]] = [
    ("id", "id"),
    ("first_name", "firstName"),
    ("last_name", "lastName"),
    ("email", "email"),
    ("phone", "phone"),
    ("picture_url", "pictureUrl"),
    ("job_title", "jobTitle"),
    ("department", "department"),
    ("location", "location"),
    ("created_at", "createdAt"),
    ("updated_at", "updatedAt"),
]
_TO_DOC = dict(_FIELD_MAP)


def to_document(employee: Employee) -> dict[str, Any]:
    doc: dict[str, Any] = {"directory": PARTITION_VALUE}
    for python_key, cosmos_key in _FIELD_MAP:
        value = getattr(employee, python_key)
        if python_key in ("created_at", "updated_at"):
            value = value.isoformat() if value is not None else None
        doc[cosmos_key] = value
    return doc


def from_document(doc: dict[str, Any]) -> Employee:
    data = {python_key: doc.get(cosmos_key) for python_key, cosmos_key in _FIELD_MAP}
    data["phone"] = data.get("phone") or ""
    data["picture_url"] = data.get("picture_url") or ""
    return Employee(**data)


def build_find_query(query: EmployeeQuery) -> tuple[str, list[dict[str, Any]]]:
    conditions: list[str] = []
    params: list[dict[str, Any]] = []

    if query.department:
        conditions.append("c.department = @department")
        params.append({"name": "@department", "value": query.department})
    if query.title:
        conditions.append("c.jobTitle = @title")
        params.append({"name": "@title", "value": query.title})
    if query.location:
        conditions.append("CONTAINS(c.location, @location, true)")
        params.append({"name": "@location", "value": query.location})
    if query.search:
        conditions.append(
            "(CONTAINS(c.firstName, @search, true)"
            " OR CONTAINS(c.lastName, @search, true)"
            " OR CONTAINS(c.jobTitle, @search, true))"
        )
        params.append({"name": "@search", "value": query.search})

    sql = "SELECT * FROM c"
    if conditions:
        sql += " WHERE " + " AND ".join(conditions)

    # sort_by is constrained to a Literal, so the field name is safe to inline
    if query.ordering:
        field, direction = query.ordering
        sql += f" ORDER BY c.{_TO_DOC[field]} {direction.upper()}"

    return sql, params


class CosmosEmployeeRepository:
    def __init__(self, container: Any, client: CosmosClient | None = None) -> None:
        self.container = container
        self.client = client

    @classmethod
    async def connect(cls, settings: Settings) -> CosmosEmployeeRepository:
        client = CosmosClient(settings.COSMOS_DB_ENDPOINT, settings.COSMOS_DB_KEY)
        try:
            database = await client.create_database_if_not_exists(id=settings.COSMOS_DB_DATABASE)
            container = await database.create_container_if_not_exists(
                id=settings.COSMOS_DB_EMPLOYEES_CONTAINER,
                partition_key=PartitionKey(path=PARTITION_KEY_PATH),
                unique_key_policy={"uniqueKeys": [{"paths": ["/email"]}]},
            )
        except Exception:
            await client.close()
            raise

        logger.info(
            "Cosmos employee store ready (database=%s, container=%s)",
            settings.COSMOS_DB_DATABASE,
            settings.COSMOS_DB_EMPLOYEES_CONTAINER,
        )
        return cls(container, client)

    async def close(self) -> None:
        if self.client:
            await self.client.close()
            self.client = None

    async def _query(self, sql: str, params: list[dict[str, Any]] | None = None) -> list[Any]:
        items: list[Any] = []
        async for item in self.container.query_items(
            query=sql,
            parameters=params or [],
            partition_key=PARTITION_VALUE,
        ):
            items.append(item)
        return items

    async def count(self) -> int:
        items = await self._query("SELECT VALUE COUNT(1) FROM c")
        return int(items[0]) if items else 0

    async def find_many(self, query: EmployeeQuery) -> list[Employee]:
        sql, params = build_find_query(query)
        return [from_document(doc) for doc in await self._query(sql, params)]

    async def get_by_id(self, employee_id: str) -> Employee | None:
        try:
            doc = await self.container.read_item(item=employee_id, partition_key=PARTITION_VALUE)
        except CosmosResourceNotFoundError:
            return None
        return from_document(doc)

    async def get_by_email(self, email: str) -> Employee | None:
        items = await self._query(
            "SELECT * FROM c WHERE c.email = @email",
            [{"name": "@email", "value": email}],
        )
        return from_document(items[0]) if items else None

    async def insert(self, employee: Employee) -> Employee:
        now = utcnow()
        stored = employee.model_copy(update={"created_at": now, "updated_at": now})
        try:
            doc = await self.container.create_item(body=to_document(stored))
        except CosmosResourceExistsError as e:
            raise DuplicateEmailError(employee.email) from e
        return from_document(doc)

    async def update(self, employee_id: str, changes: dict[str, Any]) -> Employee | None:
        current = await self.get_by_id(employee_id)
        if current is None:
            return None

        changes = {k: v for k, v in changes.items() if k not in ("id", "created_at", "updated_at")}
        stored = current.model_copy(update={**changes, "updated_at": utcnow()})
        try:
            doc = await self.container.replace_item(item=employee_id, body=to_document(stored))
        except CosmosResourceExistsError as e:
            raise DuplicateEmailError(stored.email) from e
        except CosmosResourceNotFoundError:
            # deleted between the read and the replace
            return None
        return from_document(doc)

    async def delete(self, employee_id: str) -> int:
        try:
            await self.container.delete_item(item=employee_id, partition_key=PARTITION_VALUE)
        except CosmosResourceNotFoundError:
            return 0
        return 1

    async def check_connection(self) -> bool:
        try:
            await self.count()
            return True
        except Exception:
            logger.exception("Cosmos DB connection check failed")
            return False
