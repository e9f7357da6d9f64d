# coin_filter/scripts/check_symbols.py
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Any, Sequence

from coin_filter.config.settings import get_settings
from coin_filter.services.market_data import STATUS_ERROR, MarketDataClient


async def check_symbols(client: MarketDataClient, symbols: Sequence[str]) -> dict[str, Any]:
    state = await client.load()
    return {
        "status": state.status,
        "error": state.error,
        "api_key_configured": state.api_key_configured,
        "has_active_data": client.has_active_data,
        "symbols": {
            symbol: {
                "top100": client.is_top100_coin(symbol),
                "active": client.is_active_coin(symbol),
            }
            for symbol in symbols
        },
    }


def main(argv: Sequence[str] | None = None) -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Load market data once and report symbol filters")
    parser.add_argument("symbols", nargs="+")
    parser.add_argument("--base-url", default=settings.MARKET_API_BASE_URL)
    parser.add_argument("--timeout", type=float, default=settings.MARKET_API_TIMEOUT_SECONDS)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )

    client = MarketDataClient(args.base_url, timeout=args.timeout)
    report = asyncio.run(check_symbols(client, args.symbols))
    print(json.dumps(report))
    raise SystemExit(1 if report["status"] == STATUS_ERROR else 0)


if __name__ == "__main__":
    main()
