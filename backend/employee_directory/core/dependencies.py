from __future__ import annotations

from fastapi import HTTPException, Request, status

from employee_directory.services.employee_service import EmployeeService


def get_employee_service(request: Request) -> EmployeeService:
    service: EmployeeService | None = getattr(request.app.state, "employee_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Employee service is not available",
        )
    return service
