from __future__ import annotations

import json

import httpx
import pytest

from coin_filter.scripts import check_symbols as script
from coin_filter.services.market_data import MarketDataClient


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("top100"):
        return httpx.Response(
            200,
            json={"success": True, "data": {"coins": [{"symbol": "BTC"}], "timestamp": 0}},
        )
    return httpx.Response(
        200,
        json={"success": True, "data": {"timestamp": "2024-01-01T00:00:00Z", "total": 1, "symbols": ["ETH"]}},
    )


@pytest.mark.asyncio
async def test_check_symbols_report():
    async with httpx.AsyncClient(transport=httpx.MockTransport(_handler)) as http_client:
        client = MarketDataClient("http://testserver", http_client=http_client)
        report = await script.check_symbols(client, ["btc", "eth"])

    assert report["status"] == "ready"
    assert report["error"] is None
    assert report["has_active_data"] is True
    assert report["symbols"] == {
        "btc": {"top100": True, "active": False},
        "eth": {"top100": False, "active": True},
    }


def test_main_exits_nonzero_on_error(monkeypatch, capsys):
    def broken(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    class _MockedClient(MarketDataClient):
        def __init__(self, base_url, timeout=None):
            super().__init__(
                base_url,
                http_client=httpx.AsyncClient(transport=httpx.MockTransport(broken)),
                timeout=timeout,
            )

        async def load(self):
            try:
                return await super().load()
            finally:
                await self._http_client.aclose()

    monkeypatch.setattr(script, "MarketDataClient", _MockedClient)

    with pytest.raises(SystemExit) as exc:
        script.main(["--base-url", "http://testserver", "BTC"])

    assert exc.value.code == 1
    report = json.loads(capsys.readouterr().out)
    assert report["status"] == "error"
    assert "503" in report["error"]
    assert report["symbols"]["BTC"] == {"top100": True, "active": True}
