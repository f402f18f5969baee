"""
Spot price client for the CoinGecko simple price API.

Every query carries a bounded timeout; any failure for an asset surfaces as
PriceUnavailableError so callers can degrade that asset alone.
"""

import math
from typing import Any, Protocol

import httpx
import structlog

from ..core.config import Settings
from ..core.exceptions import PriceUnavailableError
from ..database.redis import RedisCache

logger = structlog.get_logger()


class PriceOracle(Protocol):
    """Anything that can quote spot prices in a reference currency."""

    async def get_spot_price(self, asset_id: str, currency: str | None = None) -> float:
        ...

    async def get_spot_prices(
        self, asset_ids: list[str], currency: str | None = None
    ) -> dict[str, float]:
        ...


def _parse_price(value: Any) -> float | None:
    """Return a finite non-negative price, or None."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    price = float(value)
    if not math.isfinite(price) or price < 0:
        return None
    return price


class CoinGeckoPriceClient:
    """
    CoinGecko /simple/price client.

    Uses CoinGecko IDs as asset identifiers (e.g., "bitcoin", "ethereum").
    Spot prices are optionally cached in Redis for a short TTL.
    """

    SERVICE = "coingecko"

    def __init__(
        self,
        settings: Settings,
        redis_cache: RedisCache | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize client.

        Args:
            settings: Application settings (base URL, API key, timeout, currency)
            redis_cache: Optional cache for spot prices
            client: Optional httpx AsyncClient (owned by caller if given)
        """
        self.default_currency = settings.reference_currency.lower()
        self.cache_ttl = settings.price_cache_ttl_seconds
        self.redis_cache = redis_cache
        self._owns_client = client is None

        headers = {"Accept": "application/json"}
        if settings.coingecko_api_key:
            headers["x-cg-demo-api-key"] = settings.coingecko_api_key

        self.client = client or httpx.AsyncClient(
            base_url=settings.coingecko_base_url,
            headers=headers,
            timeout=httpx.Timeout(settings.price_timeout_seconds),
            limits=httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
                keepalive_expiry=30.0,
            ),
        )

        logger.info(
            "CoinGecko price client initialized",
            api_key_configured=bool(settings.coingecko_api_key),
            timeout_seconds=settings.price_timeout_seconds,
            cache_enabled=redis_cache is not None and self.cache_ttl > 0,
        )

    async def close(self) -> None:
        """Close HTTP client if we own it."""
        if self._owns_client:
            await self.client.aclose()
            logger.info("CoinGecko price client closed")

    def _cache_key(self, asset_id: str, currency: str) -> str:
        return f"price:spot:{currency}:{asset_id}"

    async def _cached(self, asset_id: str, currency: str) -> float | None:
        if self.redis_cache is None or self.cache_ttl <= 0:
            return None
        try:
            return _parse_price(await self.redis_cache.get(self._cache_key(asset_id, currency)))
        except Exception as e:
            logger.warning("Price cache read failed", asset_id=asset_id, error=str(e))
            return None

    async def _store(self, prices: dict[str, float], currency: str) -> None:
        if self.redis_cache is None or self.cache_ttl <= 0:
            return
        for asset_id, price in prices.items():
            try:
                await self.redis_cache.set(
                    self._cache_key(asset_id, currency), price, ttl_seconds=self.cache_ttl
                )
            except Exception as e:
                logger.warning(
                    "Price cache write failed", asset_id=asset_id, error=str(e)
                )

    async def _fetch(self, asset_ids: list[str], currency: str) -> dict[str, Any]:
        """Run one /simple/price query, mapping transport failures."""
        params = {"ids": ",".join(asset_ids), "vs_currencies": currency}
        try:
            response = await self.client.get("/simple/price", params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            logger.warning("CoinGecko request timed out", asset_ids=asset_ids)
            raise PriceUnavailableError(
                "Price request timed out", asset_ids=asset_ids
            ) from e
        except httpx.HTTPStatusError as e:
            logger.warning(
                "CoinGecko HTTP error",
                asset_ids=asset_ids,
                status_code=e.response.status_code,
            )
            raise PriceUnavailableError(
                f"Price service error: {e.response.status_code}",
                asset_ids=asset_ids,
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.warning(
                "CoinGecko request error", asset_ids=asset_ids, error=str(e)
            )
            raise PriceUnavailableError(
                "Price request failed", asset_ids=asset_ids
            ) from e
        except ValueError as e:
            # Body was not JSON
            raise PriceUnavailableError(
                "Malformed price response", asset_ids=asset_ids
            ) from e

        if not isinstance(data, dict):
            raise PriceUnavailableError("Malformed price response", asset_ids=asset_ids)
        return data

    async def get_spot_prices(
        self, asset_ids: list[str], currency: str | None = None
    ) -> dict[str, float]:
        """
        Fetch spot prices for several assets in one query.

        Args:
            asset_ids: CoinGecko IDs
            currency: Reference currency code (defaults to settings)

        Returns:
            Mapping of asset id to price; assets the service did not price are
            omitted

        Raises:
            PriceUnavailableError: If the query itself fails
        """
        currency = (currency or self.default_currency).lower()
        wanted = list(dict.fromkeys(a for a in asset_ids if a))
        prices: dict[str, float] = {}

        missing = []
        for asset_id in wanted:
            cached = await self._cached(asset_id, currency)
            if cached is None:
                missing.append(asset_id)
            else:
                prices[asset_id] = cached

        if missing:
            data = await self._fetch(missing, currency)
            fetched = {}
            for asset_id in missing:
                row = data.get(asset_id)
                price = _parse_price(row.get(currency)) if isinstance(row, dict) else None
                if price is not None:
                    fetched[asset_id] = price
            await self._store(fetched, currency)
            prices.update(fetched)

        logger.debug(
            "Spot prices fetched",
            requested=len(wanted),
            priced=len(prices),
            currency=currency,
        )

        return prices

    async def get_spot_price(self, asset_id: str, currency: str | None = None) -> float:
        """
        Fetch the spot price of one asset.

        Args:
            asset_id: CoinGecko ID (e.g., "bitcoin")
            currency: Reference currency code (defaults to settings)

        Returns:
            Price (>= 0)

        Raises:
            PriceUnavailableError: On timeout, transport/HTTP error, or if the
                asset is unknown to the service
        """
        prices = await self.get_spot_prices([asset_id], currency)
        if asset_id not in prices:
            raise PriceUnavailableError(
                f"No price for '{asset_id}'", asset_id=asset_id
            )
        return prices[asset_id]
