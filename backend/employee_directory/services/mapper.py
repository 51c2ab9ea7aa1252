"""Maps randomuser.me person records onto employee records."""

from __future__ import annotations

from typing import Any

from employee_directory.models.employee import Employee

DEPARTMENTS: tuple[str, ...] = (
    "Engineering",
    "Marketing",
    "Sales",
    "Human Resources",
    "Design",
)

JOB_TITLES: dict[str, tuple[str, ...]] = {
    "Engineering": ("Software Engineer", "QA Engineer", "DevOps Engineer", "Tech Lead"),
    "Marketing": ("Marketing Specialist", "Content Creator", "SEO Analyst"),
    "Sales": ("Account Executive", "Sales Development Rep", "Sales Manager"),
    "Human Resources": ("Recruiter", "HR Generalist"),
    "Design": ("UI/UX Designer", "Graphic Designer", "Product Designer"),
}


def string_hash(value: str) -> int:
    """Polynomial (x31) string hash wrapped to signed 32 bits, made non-negative."""
    h = 0
    for char in value:
        h = (h * 31 + ord(char)) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 0x100000000
    return abs(h)


class EmployeeMapper:
    def __init__(
        self,
        departments: tuple[str, ...] = DEPARTMENTS,
        job_titles: dict[str, tuple[str, ...]] | None = None,
    ) -> None:
        self.departments = departments
        self.job_titles = job_titles or JOB_TITLES

    def assign_role(self, user_id: str) -> tuple[str, str]:
        h = string_hash(user_id)
        department = self.departments[h % len(self.departments)]
        titles = self.job_titles[department]
        return department, titles[h % len(titles)]

    def to_entity(self, raw_user: dict[str, Any]) -> Employee:
        user_id = raw_user["login"]["uuid"]
        department, job_title = self.assign_role(user_id)
        location = raw_user["location"]

        return Employee(
            id=user_id,
            first_name=raw_user["name"]["first"],
            last_name=raw_user["name"]["last"],
            email=raw_user["email"],
            phone=raw_user.get("phone") or "",
            picture_url=raw_user["picture"]["large"],
            job_title=job_title,
            department=department,
            location=f"{location['city']}, {location['state']}",
        )
