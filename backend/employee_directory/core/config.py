import sys
from typing import Literal

from pydantic_settings import BaseSettings

_ENV_FILE = None if "pytest" in sys.modules else ".env"


class Settings(BaseSettings):
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: Literal["development", "production", "test"] = "development"

    LOG_LEVEL: str | None = None
    LOG_DIR: str = "logs"

    RANDOM_USER_API_URL: str = "https://randomuser.me/api/"
    RANDOM_USER_API_SEED: str = "default-seed"
    RANDOM_USER_API_NATIONALITIES: str = "us,ca,gb,au"
    RANDOM_USER_API_TIMEOUT_SECONDS: float = 30

    SEED_BATCH_SIZE: int = 100
    CACHE_TTL_SECONDS: float = 300

    COSMOS_DB_ENDPOINT: str = ""
    COSMOS_DB_KEY: str = ""
    COSMOS_DB_DATABASE: str = "employee-directory"
    COSMOS_DB_EMPLOYEES_CONTAINER: str = "employees"

    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    model_config = {
        "env_file": _ENV_FILE,
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    @property
    def seeding_enabled(self) -> bool:
        return self.ENVIRONMENT != "test"

    @property
    def cosmos_configured(self) -> bool:
        return bool(self.COSMOS_DB_ENDPOINT and self.COSMOS_DB_KEY)


settings = Settings()
