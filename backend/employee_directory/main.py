from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from employee_directory.api.v1.router import api_router
from employee_directory.core.config import settings
from employee_directory.core.logging_config import configure_logging
from employee_directory.services.employee_service import build_employee_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings)

    service = None
    try:
        service = await build_employee_service(settings)
    except Exception:
        logger.exception("Failed to initialize EmployeeService — continuing without DB")
    application.state.employee_service = service

    if service is None:
        logger.warning("Employee routes will return 503 for the lifetime of this process")
    elif settings.seeding_enabled:
        try:
            await service.seed_database()
        except Exception:
            logger.exception("Failed to seed employee database — continuing with existing data")
    else:
        logger.info("Seeding disabled (ENVIRONMENT=%s)", settings.ENVIRONMENT)

    yield

    if service is not None:
        await service.close()
    application.state.employee_service = None


app = FastAPI(
    title="Employee Directory API",
    description=(
        "API for managing the company's employee directory: create, read, update and "
        "delete employee records with filtering, search, sorting and pagination."
    ),
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Employee Directory API"}
