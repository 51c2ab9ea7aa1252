"""Error kinds raised by the employee service layer."""

from __future__ import annotations

from typing import Any


class EmployeeDirectoryError(Exception):
    """Base class for directory errors."""


class EmployeeNotFoundError(EmployeeDirectoryError):
    def __init__(self, employee_id: str) -> None:
        self.employee_id = employee_id
        super().__init__(f'Employee with ID "{employee_id}" not found')


class EmployeeConflictError(EmployeeDirectoryError):
    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f'Employee with email "{email}" already exists.')


class DuplicateEmailError(EmployeeDirectoryError):
    """A record store rejected a write on its unique email constraint."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Unique constraint violated for email {email!r}")


class ExternalApiError(EmployeeDirectoryError):
    """The external directory source could not deliver a batch."""

    def __init__(self, message: str, *, url: str = "", params: dict[str, Any] | None = None) -> None:
        self.url = url
        self.params = params or {}
        super().__init__(f"Failed to fetch data from external API: {message}")
