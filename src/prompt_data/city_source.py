"""
CitySource: Collect unique city names from the random city API.

Best-effort collector: every failed attempt is logged and skipped, and a
partial pool is accepted as long as it holds at least one city.
"""

import logging
import time
from typing import Callable, List, Optional

import httpx
from pydantic import BaseModel, ValidationError

from .models import FetchResult, NoCitiesAvailable

logger = logging.getLogger(__name__)


class CityAPIResponse(BaseModel):
    """Body returned by the random city endpoint."""
    city: str
    country: str = ""


class CitySource:
    """
    Fetches city names one request at a time.

    A short delay follows every decoded response to rate-limit the remote
    service; transport and status failures wait twice as long.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        request_delay: float = 0.1,
        client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the source.

        Args:
            url: City API endpoint
            timeout: Per-request timeout in seconds
            request_delay: Pause after each attempt in seconds
            client: Optional preconfigured httpx client (not closed by us)
            sleep: Sleep function, replaceable in tests
        """
        self.url = url
        self.request_delay = request_delay
        self._sleep = sleep
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "CitySource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def fetch(self, max_attempts: int, target_unique: int) -> FetchResult:
        """Run the bounded fetch loop and report cities plus attempts used."""
        logger.info(
            "Fetching up to %d cities from API (aiming for %d unique)...",
            max_attempts,
            target_unique,
        )
        result = FetchResult()
        seen = set()

        while result.attempts < max_attempts and len(result.cities) < target_unique:
            result.attempts += 1
            attempt = result.attempts

            response = self._request(attempt)
            if response is None:
                self._sleep(self.request_delay * 2)
                continue

            try:
                body = CityAPIResponse.model_validate_json(response.content)
            except ValidationError as e:
                logger.warning("Error decoding API response (attempt %d): %s", attempt, e)
                continue

            city = body.city.strip()
            if not city:
                logger.warning("API returned empty city name (attempt %d)", attempt)
            elif city not in seen:
                seen.add(city)
                result.cities.append(city)
                logger.info("Fetched unique city %d: %s", len(result.cities), city)
            else:
                logger.debug("Duplicate city %s (attempt %d)", city, attempt)

            self._sleep(self.request_delay)

        logger.info(
            "Finished fetching cities. Got %d unique cities in %d attempts.",
            len(result.cities),
            result.attempts,
        )
        return result

    def fetch_cities(self, max_attempts: int, target_unique: int) -> List[str]:
        """
        Fetch unique city names.

        Raises:
            NoCitiesAvailable: If no city was obtained after max_attempts tries
        """
        result = self.fetch(max_attempts, target_unique)
        if not result.cities:
            raise NoCitiesAvailable(
                f"failed to fetch any valid cities after {result.attempts} attempts"
            )
        return result.cities

    def _request(self, attempt: int) -> Optional[httpx.Response]:
        """Issue one GET; return None on transport or status failure."""
        try:
            response = self.client.get(self.url)
        except httpx.HTTPError as e:
            logger.warning("Error fetching city (attempt %d): %s", attempt, e)
            return None

        if not response.is_success:
            logger.warning(
                "API non-OK status (attempt %d): %d %s",
                attempt,
                response.status_code,
                response.reason_phrase,
            )
            return None
        return response
