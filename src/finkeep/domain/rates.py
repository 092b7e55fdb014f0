"""Daily reference rate providers used by the yield accretion batch."""

import json
import os
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Optional

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from finkeep.domain.entities import DailyRate
from finkeep.domain.errors import UpstreamUnavailableError
from finkeep.log import get_logger
from finkeep.utils.clock import utc_now, utc_today

logger = get_logger(__name__)

# SGS series 12: CDI daily rate in percent per day
DEFAULT_RATE_URL = (
    "https://api.bcb.gov.br/dados/serie/bcdata.sgs.12/dados/ultimos/5?formato=json"
)
CACHE_TTL = timedelta(hours=1)


class RateProvider(ABC):
    """Source of the daily reference rate."""

    @abstractmethod
    def get_daily_rate(self) -> DailyRate:
        """Return the most recent daily rate.

        Raises:
            UpstreamUnavailableError: If no usable rate can be obtained
        """
        pass


class StaticRateProvider(RateProvider):
    """Fixed rate, for tests and manual runs."""

    def __init__(self, value, rate_date: Optional[date] = None):
        self.rate = DailyRate(date=rate_date or utc_today(), value=Decimal(str(value)))

    def get_daily_rate(self) -> DailyRate:
        return self.rate


class BCBRateProvider(RateProvider):
    """Daily CDI rate from the Brazilian Central Bank time-series API.

    The payload is a JSON list of ``{"data": "dd/mm/yyyy", "valor": "0.050788"}``
    observations; the last one is the most recent business day. Answers are
    cached for an hour and transient network failures are retried.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: float = 10.0,
        attempts: int = 3,
        backoff: float = 1.0,
    ):
        """Initialize the provider.

        Args:
            url: Endpoint; defaults to FINKEEP_RATE_URL, then the SGS series 12 URL
            timeout: Per-request timeout in seconds
            attempts: Number of tries for transient failures
            backoff: Multiplier of the exponential wait between tries
        """
        self.url = url or os.environ.get("FINKEEP_RATE_URL") or DEFAULT_RATE_URL
        self.timeout = timeout
        self.attempts = attempts
        self.backoff = backoff
        self._cached: Optional[DailyRate] = None
        self._cached_at: Optional[datetime] = None

    def _fetch(self) -> bytes:
        with urllib.request.urlopen(self.url, timeout=self.timeout) as response:
            return response.read()

    def _fetch_with_retry(self) -> bytes:
        retrying = Retrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=self.backoff, max=10 * self.backoff),
            retry=retry_if_exception_type((urllib.error.URLError, TimeoutError, ConnectionError)),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                return self._fetch()

    @staticmethod
    def parse_payload(payload: bytes) -> DailyRate:
        """Parse the SGS JSON payload into the most recent rate.

        Raises:
            UpstreamUnavailableError: If the payload is malformed or empty
        """
        try:
            observations = json.loads(payload)
        except (ValueError, UnicodeDecodeError) as e:
            raise UpstreamUnavailableError(f"Rate service returned invalid JSON: {e}")

        if not isinstance(observations, list) or not observations:
            raise UpstreamUnavailableError("Rate service returned no observations")

        last = observations[-1]
        try:
            rate_date = datetime.strptime(last["data"], "%d/%m/%Y").date()
            value = Decimal(str(last["valor"]))
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            raise UpstreamUnavailableError(f"Rate service returned a malformed observation: {e}")
        if not value.is_finite():
            raise UpstreamUnavailableError(f"Rate service returned a non-finite rate: {value}")
        return DailyRate(date=rate_date, value=value)

    def get_daily_rate(self) -> DailyRate:
        now = utc_now()
        if self._cached is not None and now - self._cached_at < CACHE_TTL:
            return self._cached

        try:
            payload = self._fetch_with_retry()
        except (urllib.error.URLError, TimeoutError, OSError) as e:
            logger.warning("rate.fetch_failed", url=self.url, error=str(e))
            raise UpstreamUnavailableError(f"Could not fetch daily rate: {e}") from e

        rate = self.parse_payload(payload)
        self._cached = rate
        self._cached_at = now
        logger.info("rate.fetched", date=rate.date.isoformat(), value=str(rate.value))
        return rate
