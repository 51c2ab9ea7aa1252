"""Employee models for the directory API."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, StringConstraints, field_validator

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

SortField = Literal[
    "first_name",
    "last_name",
    "email",
    "job_title",
    "department",
    "location",
    "created_at",
    "updated_at",
]
SortOrder = Literal["asc", "desc"]


class Employee(BaseModel):
    """Employee record as held by the record store."""

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str = ""
    picture_url: str = ""
    job_title: str
    department: str
    location: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class EmployeeCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: NonEmptyStr = Field(examples=["John"])
    last_name: NonEmptyStr = Field(examples=["Doe"])
    email: EmailStr = Field(examples=["john.doe@example.com"])
    phone: str | None = Field(default=None, examples=["123-456-7890"])
    picture_url: HttpUrl | None = Field(
        default=None, examples=["https://randomuser.me/api/portraits/men/1.jpg"]
    )
    job_title: NonEmptyStr = Field(examples=["Software Engineer"])
    department: NonEmptyStr = Field(examples=["Engineering"])
    location: NonEmptyStr = Field(examples=["Austin, TX"])

    def to_fields(self) -> dict[str, str]:
        """Plain field mapping handed to the service layer."""
        data = self.model_dump()
        data["picture_url"] = str(self.picture_url) if self.picture_url is not None else None
        return data


class EmployeeUpdate(BaseModel):
    """Partial update; only supplied fields are applied."""

    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: NonEmptyStr | None = None
    last_name: NonEmptyStr | None = None
    email: EmailStr | None = None
    phone: str | None = None
    picture_url: HttpUrl | None = None
    job_title: NonEmptyStr | None = None
    department: NonEmptyStr | None = None
    location: NonEmptyStr | None = None

    def to_changes(self) -> dict[str, str]:
        changes: dict[str, str] = {}
        for key, value in self.model_dump(exclude_unset=True).items():
            if value is None:
                # null clears the optional columns and is ignored for required ones
                if key in ("phone", "picture_url"):
                    changes[key] = ""
                continue
            changes[key] = str(value)
        return changes


class EmployeeQuery(BaseModel):
    """Filter/sort shape accepted by ``EmployeeService.find``."""

    department: str | None = None
    title: str | None = None
    location: str | None = None
    search: str | None = None
    sort_by: SortField | None = None
    sort_order: SortOrder | None = None

    @field_validator("department", "title", "location", "search", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("sort_order", mode="before")
    @classmethod
    def _normalise_order(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower() or None
        return value

    @property
    def ordering(self) -> tuple[str, str] | None:
        if self.sort_by and self.sort_order:
            return self.sort_by, self.sort_order
        return None

    def cache_fields(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)


class EmployeePage(BaseModel):
    total_items: int
    data: list[Employee]
    current_page: int
    total_pages: int
