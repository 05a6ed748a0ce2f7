"""Currency conversion rates from an external rate API.

Rates are cached per currency pair for a fixed TTL. When a refresh fails,
the last known (stale) rate is used instead of failing the import.
"""

import logging
import re
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

import httpx

from spendbook.config import Settings, settings
from spendbook.core.exceptions import ExchangeRateError

logger = logging.getLogger(__name__)

CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")


@dataclass
class CachedRate:
    rate: float
    fetched_at: float


class ExchangeRateService:
    """Look up conversion rates, caching each pair for ``ttl_seconds``.

    Example:
        >>> async with httpx.AsyncClient() as client:
        ...     service = ExchangeRateService(client)
        ...     rate = await service.get_rate("EUR")  # EUR -> base currency
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        api_url: str | None = None,
        config: Settings | None = None,
    ):
        self.config = config or settings
        self.client = client
        self.ttl_seconds = (
            ttl_seconds if ttl_seconds is not None else self.config.exchange_rate_ttl_seconds
        )
        self.clock = clock
        self.api_url = (api_url or self.config.exchange_rate_api_url).rstrip("/")
        self._cache: dict[tuple[str, str], CachedRate] = {}

    @staticmethod
    def _normalize(code: str) -> str:
        normalized = (code or "").strip().upper()
        if not CURRENCY_CODE.match(normalized):
            raise ExchangeRateError(
                "FX_002",
                {"currency": code},
                f"Currency codes must be 3-letter ISO codes, got: {code!r}",
            )
        return normalized

    async def get_rate(self, from_currency: str, to_currency: str | None = None) -> float:
        """Rate to multiply an amount in ``from_currency`` by to get ``to_currency``.

        Raises:
            ExchangeRateError: Invalid code (FX_002), or lookup failed with no cached value (FX_001)
        """
        source = self._normalize(from_currency)
        target = self._normalize(to_currency or self.config.base_currency)

        if source == target:
            return 1.0

        key = (source, target)
        cached = self._cache.get(key)
        if cached is not None and self.clock() - cached.fetched_at < self.ttl_seconds:
            return cached.rate

        try:
            rate = await self._fetch_rate(source, target)
        except (httpx.HTTPError, ValueError, KeyError) as e:
            if cached is not None:
                logger.warning(
                    "Exchange rate lookup failed, using stale rate",
                    extra={"pair": f"{source}-{target}", "error_type": type(e).__name__},
                )
                return cached.rate
            raise ExchangeRateError(
                "FX_001",
                {"from": source, "to": target, "reason": str(e)},
            ) from e

        self._cache[key] = CachedRate(rate=rate, fetched_at=self.clock())
        return rate

    async def get_rates(
        self, currencies: Iterable[str], to_currency: str | None = None
    ) -> dict[str, float]:
        """Rates for several currencies into one target, keyed by upper-case code."""
        rates: dict[str, float] = {}
        for currency in currencies:
            code = self._normalize(currency)
            rates[code] = await self.get_rate(code, to_currency)
        return rates

    async def _fetch_rate(self, source: str, target: str) -> float:
        response = await self.client.get(
            f"{self.api_url}/{source}",
            timeout=self.config.exchange_rate_timeout_seconds,
        )
        response.raise_for_status()
        data = response.json()

        if data.get("result") != "success":
            raise ValueError(f"Exchange rate API returned result={data.get('result')!r}")

        rate = data["rates"][target]
        if not rate:
            raise ValueError(f"Could not find rate for {source} to {target}")

        logger.debug("Fetched exchange rate", extra={"pair": f"{source}-{target}"})
        return float(rate)
