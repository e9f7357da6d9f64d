"""
Client-side market data state: fetches the top-100 ranking and the active-coins
list once, then answers symbol lookups synchronously.

Lookups fail open: while a list is unavailable every symbol passes the filter.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Optional

import httpx

from coin_filter.config.settings import get_settings
from coin_filter.schemas.market_data import ActiveCoinsSnapshot, MarketSnapshot

logger = logging.getLogger("coin_filter.market_data")


TOP100_PATH = "/api/coinmarketcap/top100"
ACTIVE_COINS_PATH = "/api/active-coins"

API_KEY_NOT_CONFIGURED = "API_KEY_NOT_CONFIGURED"

FETCH_FAILED_MESSAGE = "Failed to fetch market data"
LOAD_FAILED_MESSAGE = "Failed to load market data. Filter features may be limited."

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_DISABLED = "disabled"
STATUS_ERROR = "error"


class MarketDataError(Exception):
    """A failure whose message is shown to the user as-is."""


@dataclass
class MarketDataState:
    status: str = STATUS_IDLE
    loading: bool = True
    error: Optional[str] = None
    market_data: Optional[MarketSnapshot] = None
    active_coins_data: Optional[ActiveCoinsSnapshot] = None
    api_key_configured: bool = True

    @property
    def settled(self) -> bool:
        return self.status in (STATUS_READY, STATUS_DISABLED, STATUS_ERROR)


StateListener = Callable[[MarketDataState], None]


def normalize_symbol(symbol: str) -> str:
    return symbol.upper().strip()


def has_payload(value: Any) -> bool:
    """
    JSON truthiness of a `data` field: null, false, 0 and "" count as missing,
    while empty objects and arrays are still a payload.
    """
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0:
        return False
    return True


class MarketDataClient:
    """
    Holds the market data for one UI session.

    `load()` fetches at most once per instance; later calls return the settled
    state. Errors never propagate out of `load()`, they end up in `state.error`.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.MARKET_API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.MARKET_API_TIMEOUT_SECONDS
        self.state = MarketDataState()

        self._http_client = http_client
        self._load_task: Optional[asyncio.Task] = None
        self._listeners: list[StateListener] = []

    # ----------------------------
    # loading
    # ----------------------------
    async def load(self) -> MarketDataState:
        if self._load_task is None:
            self._load_task = asyncio.ensure_future(self._run())
        await asyncio.shield(self._load_task)
        return self.state

    async def _run(self) -> None:
        self.state.status = STATUS_LOADING
        self.state.loading = True
        try:
            await self._fetch_market_data()
        except MarketDataError as exc:
            logger.error("Failed to load market data | %s", exc)
            self.state.error = str(exc)
            self.state.status = STATUS_ERROR
        except Exception:
            logger.exception("Failed to load market data")
            self.state.error = LOAD_FAILED_MESSAGE
            self.state.status = STATUS_ERROR
        finally:
            self.state.loading = False
            self._notify()

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client

    async def _fetch_market_data(self) -> None:
        async with self._session() as client:
            top100_response, active_response = await asyncio.gather(
                client.get(self.base_url + TOP100_PATH),
                client.get(self.base_url + ACTIVE_COINS_PATH),
            )

        if not top100_response.is_success or not active_response.is_success:
            raise MarketDataError(
                f"HTTP error! status: {top100_response.status_code} / {active_response.status_code}"
            )

        top100_result: dict[str, Any] = top100_response.json()
        active_result: dict[str, Any] = active_response.json()

        if not top100_result.get("success") or not active_result.get("success"):
            if API_KEY_NOT_CONFIGURED in (top100_result.get("error"), active_result.get("error")):
                logger.info("market data api key not configured; coin filters disabled")
                self.state.api_key_configured = False
                self.state.error = None
                self.state.status = STATUS_DISABLED
                return

            raise MarketDataError(
                top100_result.get("error") or active_result.get("error") or FETCH_FAILED_MESSAGE
            )

        market_payload = top100_result.get("data")
        active_payload = active_result.get("data")

        market_data = MarketSnapshot.model_validate(market_payload) if has_payload(market_payload) else None
        active_coins_data = (
            ActiveCoinsSnapshot.from_payload(active_payload) if has_payload(active_payload) else None
        )

        self.state.market_data = market_data
        self.state.active_coins_data = active_coins_data
        self.state.api_key_configured = True
        self.state.error = None
        self.state.status = STATUS_READY

    # ----------------------------
    # subscribers
    # ----------------------------
    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call `listener` once the state settles (immediately if it already has)."""
        if self.state.settled:
            self._call(listener)
        else:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            self._call(listener)

    def _call(self, listener: StateListener) -> None:
        try:
            listener(self.state)
        except Exception:
            logger.exception("market data listener failed")

    # ----------------------------
    # lookups
    # ----------------------------
    def is_top100_coin(self, symbol: str) -> bool:
        market_data = self.state.market_data
        if market_data is None:
            return True

        normalized = normalize_symbol(symbol)
        return any(coin.symbol.upper() == normalized for coin in market_data.coins)

    def is_active_coin(self, symbol: str) -> bool:
        active = self.state.active_coins_data
        if active is None:
            return True

        # stored symbols are compared as published by the scanner job
        return normalize_symbol(symbol) in active.active_symbols

    @property
    def has_active_data(self) -> bool:
        active = self.state.active_coins_data
        return active is not None and len(active.active_symbols) > 0

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    @property
    def market_data(self) -> Optional[MarketSnapshot]:
        return self.state.market_data

    @property
    def api_key_configured(self) -> bool:
        return self.state.api_key_configured

    def snapshot(self) -> dict[str, Any]:
        return {
            "status": self.state.status,
            "loading": self.state.loading,
            "error": self.state.error,
            "market_data": self.state.market_data.model_dump() if self.state.market_data else None,
            "api_key_configured": self.state.api_key_configured,
            "has_active_data": self.has_active_data,
        }
