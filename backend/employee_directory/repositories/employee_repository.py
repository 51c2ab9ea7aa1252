"""Record store interface and the in-memory implementation."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

from employee_directory.models.employee import Employee, EmployeeQuery
from employee_directory.services.exceptions import DuplicateEmailError


@runtime_checkable
class EmployeeRepository(Protocol):
    """Persistence operations the employee service relies on."""

    async def count(self) -> int: ...

    async def find_many(self, query: EmployeeQuery) -> list[Employee]: ...

    async def get_by_id(self, employee_id: str) -> Employee | None: ...

    async def get_by_email(self, email: str) -> Employee | None: ...

    async def insert(self, employee: Employee) -> Employee:
        """Persist a new record. Raises DuplicateEmailError on a taken email."""
        ...

    async def update(self, employee_id: str, changes: dict[str, Any]) -> Employee | None:
        """Apply ``changes``; None when the id is unknown."""
        ...

    async def delete(self, employee_id: str) -> int:
        """Delete by id and return the number of records removed."""
        ...

    async def check_connection(self) -> bool: ...

    async def close(self) -> None: ...


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _contains(haystack: str, needle: str) -> bool:
    return needle.casefold() in haystack.casefold()


def matches(employee: Employee, query: EmployeeQuery) -> bool:
    if query.department and employee.department != query.department:
        return False
    if query.title and employee.job_title != query.title:
        return False
    if query.location and not _contains(employee.location, query.location):
        return False
    if query.search and not (
        _contains(employee.first_name, query.search)
        or _contains(employee.last_name, query.search)
        or _contains(employee.job_title, query.search)
    ):
        return False
    return True


class InMemoryEmployeeRepository:
    """Dict-backed store used when Cosmos DB is not configured and in tests.

    Enforces the unique-email constraint at write time, like a database
    unique index would.
    """

    def __init__(self) -> None:
        self._records: dict[str, Employee] = {}
        self._ids_by_email: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def count(self) -> int:
        return len(self._records)

    async def find_many(self, query: EmployeeQuery) -> list[Employee]:
        results = [e.model_copy() for e in self._records.values() if matches(e, query)]
        if query.ordering:
            field, direction = query.ordering
            results.sort(key=lambda e: getattr(e, field), reverse=direction == "desc")
        return results

    async def get_by_id(self, employee_id: str) -> Employee | None:
        employee = self._records.get(employee_id)
        return employee.model_copy() if employee else None

    async def get_by_email(self, email: str) -> Employee | None:
        employee_id = self._ids_by_email.get(email)
        return await self.get_by_id(employee_id) if employee_id else None

    async def insert(self, employee: Employee) -> Employee:
        async with self._lock:
            if employee.email in self._ids_by_email or employee.id in self._records:
                raise DuplicateEmailError(employee.email)
            now = utcnow()
            stored = employee.model_copy(update={"created_at": now, "updated_at": now})
            self._records[stored.id] = stored
            self._ids_by_email[stored.email] = stored.id
            return stored.model_copy()

    async def update(self, employee_id: str, changes: dict[str, Any]) -> Employee | None:
        async with self._lock:
            current = self._records.get(employee_id)
            if current is None:
                return None

            changes = {k: v for k, v in changes.items() if k not in ("id", "created_at", "updated_at")}
            new_email = changes.get("email", current.email)
            owner = self._ids_by_email.get(new_email)
            if owner is not None and owner != employee_id:
                raise DuplicateEmailError(new_email)

            stored = current.model_copy(update={**changes, "updated_at": utcnow()})
            self._records[employee_id] = stored
            if stored.email != current.email:
                del self._ids_by_email[current.email]
                self._ids_by_email[stored.email] = employee_id
            return stored.model_copy()

    async def delete(self, employee_id: str) -> int:
        async with self._lock:
            employee = self._records.pop(employee_id, None)
            if employee is None:
                return 0
            self._ids_by_email.pop(employee.email, None)
            return 1

    async def check_connection(self) -> bool:
        return True

    async def close(self) -> None:
        return None
