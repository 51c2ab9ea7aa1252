"""Client for the randomuser.me API used to seed the directory."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from employee_directory.core.config import Settings
from employee_directory.services.exceptions import ExternalApiError

logger = logging.getLogger(__name__)


class RandomUserClient:
    def __init__(
        self,
        url: str,
        seed: str = "default-seed",
        nationalities: str = "us,ca,gb,au",
        timeout: float = 30,
    ) -> None:
        self.url = url
        self.seed = seed
        self.nationalities = nationalities
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> RandomUserClient:
        return cls(
            url=settings.RANDOM_USER_API_URL,
            seed=settings.RANDOM_USER_API_SEED,
            nationalities=settings.RANDOM_USER_API_NATIONALITIES,
            timeout=settings.RANDOM_USER_API_TIMEOUT_SECONDS,
        )

    async def fetch_raw_employees(self, count: int = 100) -> list[dict[str, Any]]:
        params: dict[str, Any] = {
            "results": count,
            "seed": self.seed,
            "nat": self.nationalities,
        }
        logger.info("Fetching raw employee records from %s (params=%s)", self.url, params)

        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.url, params=params) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise ExternalApiError(
                            f"{response.status} - {error_text[:200]}",
                            url=self.url,
                            params=params,
                        )
                    data = await response.json()
        except ExternalApiError as e:
            logger.error("External API returned an error (url=%s, params=%s): %s", self.url, params, e)
            raise
        except (aiohttp.ClientError, TimeoutError, ValueError) as e:
            logger.error("Failed to fetch data from external API (url=%s, params=%s): %s", self.url, params, e)
            raise ExternalApiError(str(e) or type(e).__name__, url=self.url, params=params) from e

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            logger.error("Unexpected payload from external API (url=%s): missing 'results'", self.url)
            raise ExternalApiError("response has no 'results' list", url=self.url, params=params)

        logger.info("Fetched %d raw employee records", len(results))
        return results
