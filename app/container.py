"""Dependency Injection container - initialized at app startup."""

import numpy as np
from loguru import logger

from app.repositories.history import HistoryRepository
from app.repositories.results import ResultRepository
from app.services.apportionment.service import ApportionmentService
from app.services.forecast.narrative import HttpNarrativeClient, NarrativePort
from app.services.forecast.service import ForecastService
from app.services.forecast.worker import ForecastWorker
from settings import FORECAST_SEED, NARRATIVE_API_KEY


class Container:
    """Application DI container - holds repositories, services and the worker.

    Engines themselves are created per call inside the services.
    """

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def init(self, narrative: NarrativePort | None = None) -> None:
        """Initialize all dependencies. Call once at app startup."""
        if self._initialized:
            return

        self._history_repo = HistoryRepository()
        self._result_repo = ResultRepository()

        if narrative is None and NARRATIVE_API_KEY:
            narrative = HttpNarrativeClient()
        if narrative is None:
            logger.info("No narrative collaborator configured; narratives will be empty")

        rng = np.random.default_rng(FORECAST_SEED) if FORECAST_SEED is not None else None

        self.apportionment = ApportionmentService(results=self._result_repo)
        self.forecast = ForecastService(
            history=self._history_repo,
            results=self._result_repo,
            narrative=narrative,
            rng=rng,
        )
        self.worker = ForecastWorker(self.forecast)
        self.results = self._result_repo

        self._initialized = True

    def shutdown(self) -> None:
        if self._initialized:
            self.worker.shutdown()
            self._initialized = False


# Global container instance
container = Container()
