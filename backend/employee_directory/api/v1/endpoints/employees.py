from __future__ import annotations

import logging
import math
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from employee_directory.core.dependencies import get_employee_service
from employee_directory.models.employee import (
    Employee,
    EmployeeCreate,
    EmployeePage,
    EmployeeQuery,
    EmployeeUpdate,
    SortField,
)
from employee_directory.services.employee_service import EmployeeService
from employee_directory.services.exceptions import EmployeeConflictError, EmployeeNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


def paginate(employees: list[Employee], page: int, limit: int) -> EmployeePage:
    start = (page - 1) * limit
    return EmployeePage(
        total_items=len(employees),
        data=employees[start : start + limit],
        current_page=page,
        total_pages=math.ceil(len(employees) / limit),
    )


@router.post(
    "",
    response_model=Employee,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Employee with that email already exists."}},
)
async def create_employee(
    payload: EmployeeCreate,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    try:
        return await service.create(payload.to_fields())
    except EmployeeConflictError as err:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(err)) from err
    except Exception as err:
        logger.exception("Failed to create employee")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create employee",
        ) from err


@router.get("", response_model=EmployeePage)
async def list_employees(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    department: str | None = None,
    title: str | None = None,
    location: str | None = None,
    search: str | None = None,
    sort_by: SortField | None = None,
    sort_order: str | None = Query(None, pattern="(?i)^(asc|desc)$"),
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    query = EmployeeQuery(
        department=department,
        title=title,
        location=location,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    try:
        employees = await service.find(query)
    except Exception as err:
        logger.exception("Failed to list employees")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve employees",
        ) from err

    return paginate(employees, page, limit)


@router.get("/{employee_id}", response_model=Employee, responses={404: {"description": "Employee not found."}})
async def get_employee(
    employee_id: uuid.UUID,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    try:
        return await service.find_one(str(employee_id))
    except EmployeeNotFoundError as err:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err)) from err
    except Exception as err:
        logger.exception("Failed to get employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve employee",
        ) from err


@router.patch(
    "/{employee_id}",
    response_model=Employee,
    responses={404: {"description": "Employee not found."}, 409: {"description": "Email already in use."}},
)
async def update_employee(
    employee_id: uuid.UUID,
    payload: EmployeeUpdate,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    try:
        return await service.update(str(employee_id), payload.to_changes())
    except EmployeeNotFoundError as err:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err)) from err
    except EmployeeConflictError as err:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(err)) from err
    except Exception as err:
        logger.exception("Failed to update employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update employee",
        ) from err


@router.delete(
    "/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"description": "Employee not found."}},
)
async def delete_employee(
    employee_id: uuid.UUID,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    try:
        await service.remove(str(employee_id))
    except EmployeeNotFoundError as err:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err)) from err
    except Exception as err:
        logger.exception("Failed to delete employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete employee",
        ) from err

    return Response(status_code=status.HTTP_204_NO_CONTENT)
