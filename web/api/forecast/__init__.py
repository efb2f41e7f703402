"""Forecast API."""

from web.api.forecast.views import (
    cancel_forecast,
    get_forecast,
    run_forecast,
    start_forecast,
)

__all__ = [
    "start_forecast",
    "run_forecast",
    "get_forecast",
    "cancel_forecast",
]
