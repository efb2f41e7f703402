"""Services package - service class exports."""

from app.services.apportionment import ApportionmentEngine, ApportionmentService
from app.services.forecast import ForecastService, ForecastWorker

__all__ = [
    "ApportionmentEngine",
    "ApportionmentService",
    "ForecastService",
    "ForecastWorker",
]
