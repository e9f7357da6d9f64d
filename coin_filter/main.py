# coin_filter/main.py
from __future__ import annotations

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from coin_filter.api.active_coins import active_coins_http_exception_handler
from coin_filter.api.active_coins import router as active_coins_router
from coin_filter.api.health import router as health_router


app = FastAPI(title="Coin Filter API")

# Routers
app.include_router(health_router)
app.include_router(active_coins_router, prefix="/api")

# 405s on /api/active-coins carry the JSON error body
app.add_exception_handler(StarletteHTTPException, active_coins_http_exception_handler)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Coin filter data"}
