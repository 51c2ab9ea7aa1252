"""Employee service: cached queries, writes with whole-cache invalidation, seeding."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from typing import Any

from employee_directory.core.cache import CacheStore, MemoryCache
from employee_directory.core.config import Settings
from employee_directory.models.employee import Employee, EmployeeQuery
from employee_directory.repositories.cosmos_repository import CosmosEmployeeRepository
from employee_directory.repositories.employee_repository import EmployeeRepository, InMemoryEmployeeRepository
from employee_directory.services.exceptions import (
    DuplicateEmailError,
    EmployeeConflictError,
    EmployeeNotFoundError,
)
from employee_directory.services.mapper import EmployeeMapper
from employee_directory.services.random_user_client import RandomUserClient

logger = logging.getLogger(__name__)


def find_cache_key(query: EmployeeQuery) -> str:
    return "employees_find_" + json.dumps(query.cache_fields(), sort_keys=True, separators=(",", ":"))


def employee_cache_key(employee_id: str) -> str:
    return f"employee_{employee_id}"


def dedupe_by_email(employees: list[Employee]) -> list[Employee]:
    """Keep the first record seen for each email."""
    seen: set[str] = set()
    unique: list[Employee] = []
    for employee in employees:
        if employee.email in seen:
            continue
        seen.add(employee.email)
        unique.append(employee)
    return unique


class EmployeeService:
    def __init__(
        self,
        repository: EmployeeRepository,
        cache: CacheStore,
        source: RandomUserClient | None = None,
        mapper: EmployeeMapper | None = None,
        seed_batch_size: int = 100,
    ) -> None:
        self.repository = repository
        self.cache = cache
        self.source = source
        self.mapper = mapper or EmployeeMapper()
        self.seed_batch_size = seed_batch_size
        self._seed_lock = asyncio.Lock()
        # bumped on every invalidation; a read that spans a bump must not populate the cache
        self._generation = 0

    async def close(self) -> None:
        await self.repository.close()

    async def check_connection(self) -> bool:
        return await self.repository.check_connection()

    async def invalidate_cache(self) -> None:
        self._generation += 1
        reset = getattr(self.cache, "reset", None)
        if not callable(reset):
            logger.warning("Cache store does not have a reset method. Skipping cache invalidation.")
            return
        try:
            reset()
        except NotImplementedError:
            logger.warning("Cache store does not support reset. Skipping cache invalidation.")
            return
        logger.info("Employee cache invalidated.")

    async def seed_database(self, count: int | None = None) -> int:
        """Populate an empty store from the external source; returns records inserted."""
        async with self._seed_lock:
            existing = await self.repository.count()
            if existing > 0:
                logger.info("Database already seeded (%d employees). Skipping.", existing)
                return 0

            if self.source is None:
                logger.warning("No external directory source configured. Skipping seed.")
                return 0

            logger.info("Database is empty. Seeding with initial data...")
            raw_users = await self.source.fetch_raw_employees(count if count is not None else self.seed_batch_size)
            employees = [self.mapper.to_entity(user) for user in raw_users]
            unique_employees = dedupe_by_email(employees)
            logger.info(
                "Filtered %d employees to %d unique employees",
                len(employees),
                len(unique_employees),
            )

            inserted = 0
            for employee in unique_employees:
                try:
                    await self.repository.insert(employee)
                    inserted += 1
                except Exception as e:
                    logger.warning("Failed to insert employee %s: %s", employee.email, e)

            if inserted:
                await self.invalidate_cache()
            logger.info("Database seeded successfully with %d employees.", inserted)
            return inserted

    async def find(self, query: EmployeeQuery | None = None) -> list[Employee]:
        query = query or EmployeeQuery()
        cache_key = find_cache_key(query)

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Returning cached employees for %s", cache_key)
            return [employee.model_copy() for employee in cached]

        logger.debug("Finding employees with filters %s", query.cache_fields())
        generation = self._generation
        employees = await self.repository.find_many(query)
        if generation == self._generation:
            self.cache.set(cache_key, tuple(employees))
        else:
            logger.debug("Cache invalidated during lookup; not caching %s", cache_key)
        return [employee.model_copy() for employee in employees]

    async def find_one(self, employee_id: str) -> Employee:
        cache_key = employee_cache_key(employee_id)

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Returning cached employee %s", employee_id)
            return cached.model_copy()

        generation = self._generation
        employee = await self.repository.get_by_id(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)

        if generation == self._generation:
            self.cache.set(cache_key, employee)
        return employee.model_copy()

    async def create(self, data: dict[str, Any]) -> Employee:
        email = data["email"]
        if await self.repository.get_by_email(email) is not None:
            raise EmployeeConflictError(email)

        employee = Employee(
            **{
                **data,
                "phone": data.get("phone") or "",
                "picture_url": data.get("picture_url") or "",
                "id": str(uuid.uuid4()),
            }
        )

        try:
            saved = await self.repository.insert(employee)
        except DuplicateEmailError as e:
            # lost a race with a concurrent write; the store's verdict stands
            raise EmployeeConflictError(email) from e

        await self.invalidate_cache()
        logger.info("Created employee %s", saved.id)
        return saved

    async def update(self, employee_id: str, changes: dict[str, Any]) -> Employee:
        current = await self.repository.get_by_id(employee_id)
        if current is None:
            raise EmployeeNotFoundError(employee_id)

        new_email = changes.get("email")
        if new_email and new_email != current.email:
            owner = await self.repository.get_by_email(new_email)
            if owner is not None and owner.id != employee_id:
                raise EmployeeConflictError(new_email)

        try:
            saved = await self.repository.update(employee_id, changes)
        except DuplicateEmailError as e:
            raise EmployeeConflictError(e.email) from e
        if saved is None:
            raise EmployeeNotFoundError(employee_id)

        await self.invalidate_cache()
        logger.info("Updated employee %s (%s)", employee_id, ", ".join(sorted(changes)) or "no fields")
        return saved

    async def remove(self, employee_id: str) -> None:
        affected = await self.repository.delete(employee_id)
        if affected == 0:
            raise EmployeeNotFoundError(employee_id)

        await self.invalidate_cache()
        logger.info("Deleted employee %s", employee_id)


async def build_employee_service(settings: Settings) -> EmployeeService:
    repository: EmployeeRepository
    if settings.cosmos_configured:
        repository = await CosmosEmployeeRepository.connect(settings)
    else:
        logger.warning("Cosmos DB credentials missing — using in-memory employee store")
        repository = InMemoryEmployeeRepository()

    return EmployeeService(
        repository=repository,
        cache=MemoryCache(ttl_seconds=settings.CACHE_TTL_SECONDS),
        source=RandomUserClient.from_settings(settings),
        mapper=EmployeeMapper(),
        seed_batch_size=settings.SEED_BATCH_SIZE,
    )
