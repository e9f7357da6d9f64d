"""Pydantic models for the top-100 and active-coins contracts."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from coin_filter.utils.time import now_millis, parse_iso_millis


class CoinRecord(BaseModel):
    """One entry of the upstream top-100 ranking. Unknown fields are kept."""

    model_config = ConfigDict(extra="allow")

    id: Optional[Any] = None
    name: Optional[Any] = None
    symbol: str
    cmc_rank: Optional[Any] = None
    is_active: Optional[Any] = None


class MarketSnapshot(BaseModel):
    """Payload of GET /api/coinmarketcap/top100 `data`."""

    model_config = ConfigDict(extra="allow")

    coins: List[CoinRecord] = Field(default_factory=list)
    timestamp: Optional[Any] = None


class ActiveCoinsFile(BaseModel):
    """Shape of public/data/active-coins.json as written by the producer job."""

    timestamp: str
    total: int = 0
    symbols: List[str] = Field(default_factory=list)


class ActiveCoinsSnapshot(BaseModel):
    """Client-side view of the active-coins list."""

    active_symbols: List[str] = Field(default_factory=list)
    timestamp: int
    total_checked: int = 0
    # static file, the producer never reports live calls
    api_calls_made: int = 0

    @classmethod
    def from_payload(cls, payload: Any) -> "ActiveCoinsSnapshot":
        # a non-object payload carries no fields, so every default applies
        data = payload if isinstance(payload, dict) else {}
        return cls(
            active_symbols=list(data.get("symbols") or []),
            timestamp=parse_iso_millis(data.get("timestamp")) or now_millis(),
            total_checked=data.get("total") or 0,
            api_calls_made=0,
        )


class ActiveCoinsResponse(BaseModel):
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
