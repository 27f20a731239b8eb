"""FastAPI routes for the wattcast forecast service."""

import logging
import random
import sys
import time
from typing import Any, Literal

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Security
from fastapi.security import APIKeyHeader
from pydantic import BaseModel

from wattcast.engine.config import AppConfig
from wattcast.engine.forecast import generate_forecast, slice_window

logger = logging.getLogger(__name__)

_api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


# --- Pydantic request models ---
class ForecastRequest(BaseModel):
    readings: list[Any] | None = None
    devices: list[Any] | None = None
    window: Literal["6h", "12h", "24h"] = "24h"
    include_history: bool = False
    seed: int | None = None


def _make_api_key_check(api_key: str):
    async def verify_api_key(key: str = Security(_api_key_header)):
        """Verify API key if one is configured, otherwise allow all."""
        if api_key and key != api_key:
            raise HTTPException(status_code=403, detail="Invalid API key")

    return verify_api_key


def _register_forecast_routes(router: APIRouter, config: AppConfig) -> None:
    """Register forecast endpoints on the router."""

    @router.post("/api/forecast")
    def create_forecast(request: ForecastRequest):
        """Forecast the next 24 hours from the supplied readings."""
        seed = request.seed if request.seed is not None else config.forecast.seed
        forecast = generate_forecast(
            request.readings,
            rng=random.Random(seed),
            config=config.forecast,
            devices=request.devices,
            include_history=request.include_history,
        )
        result = forecast.to_dict()
        result["window"] = request.window
        result["hourly_predictions"] = slice_window(result["hourly_predictions"], request.window)
        logger.info(
            f"Forecast for {forecast.data_points} readings: "
            f"{forecast.daily_summary.total_kwh} kWh, real_data={forecast.is_based_on_real_data}"
        )
        return result


def _register_utility_routes(router: APIRouter) -> None:
    from wattcast import __version__

    @router.get("/api/version")
    async def get_version():
        """Return package version and runtime info."""
        return {
            "version": __version__,
            "package": "wattcast",
            "python": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        }


def create_api(config: AppConfig | None = None) -> FastAPI:
    """Create FastAPI application with forecast routes.

    Args:
        config: AppConfig; read from the environment when omitted.

    Returns:
        FastAPI application
    """
    from wattcast import __version__

    config = config or AppConfig.from_env()
    app = FastAPI(
        title="wattcast",
        description="REST API for smart-home energy usage forecasts",
        version=__version__,
    )

    @app.middleware("http")
    async def request_timing_middleware(request: Request, call_next):
        start = time.monotonic()
        response = await call_next(request)
        elapsed = time.monotonic() - start
        if elapsed > 1.0:
            logger.warning(f"{request.method} {request.url.path} took {elapsed:.2f}s")
        else:
            logger.debug(f"{request.method} {request.url.path} took {elapsed:.3f}s")
        return response

    # Health check is unauthenticated for uptime monitors
    @app.get("/")
    async def root():
        """API root - health check."""
        return {"status": "ok", "service": "wattcast"}

    router = APIRouter(dependencies=[Depends(_make_api_key_check(config.server.api_key))])
    _register_utility_routes(router)
    _register_forecast_routes(router, config)
    app.include_router(router)

    return app
