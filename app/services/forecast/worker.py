"""Background execution of forecast runs with cooperative cancellation."""

import threading
from concurrent.futures import Future, ThreadPoolExecutor

from loguru import logger

from app.errors import ElectoralError
from app.models.forecast import ForecastRun, ScenarioAdjustment
from app.services.forecast.service import ForecastService
from settings import FORECAST_WORKERS


class ForecastWorker:
    """Runs forecasts off the request path.

    Cancellation is checked between party simulations, so it takes effect
    after at most one party's iterations. Only queued and running forecasts
    are tracked here; finished runs are read back from the result store.
    """

    def __init__(self, service: ForecastService, max_workers: int = FORECAST_WORKERS):
        self._service = service
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="forecast")
        self._runs: dict[str, ForecastRun] = {}
        self._cancel: dict[str, threading.Event] = {}
        self._lock = threading.Lock()
        logger.info("ForecastWorker: max_workers={}", max_workers)

    def submit(
        self,
        run: ForecastRun,
        historical_years: list[int] | None = None,
        scenario: ScenarioAdjustment | None = None,
        base_year: int | None = None,
    ) -> Future:
        """Queue `run`; the future resolves to the finished run."""
        event = threading.Event()
        with self._lock:
            self._runs[run.id] = run
            self._cancel[run.id] = event
            future = self._pool.submit(self._execute, run, historical_years, scenario, base_year, event)
        logger.info("Forecast {} queued (target {})", run.id, run.target_year)
        return future

    def _execute(self, run, historical_years, scenario, base_year, event) -> ForecastRun:
        try:
            return self._service.run(run, historical_years, scenario, base_year, cancel=event)
        except ElectoralError as e:
            # Status and error are already recorded on the run.
            logger.info("Forecast {} ended {}: {}", run.id, run.status.value, e.message)
            return run
        finally:
            self._forget(run.id)

    def _forget(self, run_id: str) -> None:
        with self._lock:
            self._runs.pop(run_id, None)
            self._cancel.pop(run_id, None)

    def cancel(self, run_id: str) -> bool:
        """Request cancellation; False if the run is unknown or already finished."""
        with self._lock:
            event = self._cancel.get(run_id)
            run = self._runs.get(run_id)
        if event is None or run is None or run.finished:
            return False
        event.set()
        logger.info("Cancellation requested for forecast {}", run_id)
        return True

    def get(self, run_id: str) -> ForecastRun | None:
        """Queued or running forecast, None once it has finished."""
        with self._lock:
            return self._runs.get(run_id)

    def active(self) -> list[str]:
        with self._lock:
            return [rid for rid, run in self._runs.items() if not run.finished]

    def shutdown(self, cancel_pending: bool = True) -> None:
        if cancel_pending:
            for run_id in self.active():
                self.cancel(run_id)
        self._pool.shutdown(wait=True)
        logger.info("ForecastWorker stopped")
