"""Forecast service - runs one forecast end to end."""

import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Protocol

import numpy as np
from loguru import logger

from app.errors import ForecastCancelledError, InsufficientHistoricalDataError
from app.models.forecast import (
    ForecastResult,
    ForecastRun,
    HistoricalVoteRecord,
    ModelParameters,
    RunStatus,
    ScenarioAdjustment,
)
from app.repositories import ResultRepository
from app.services.forecast.narrative import NarrativePort, fallback_summary
from app.services.forecast.scenario import ScenarioAdjuster
from app.services.forecast.simulator import (
    MonteCarloSimulator,
    forecast_party,
    forecast_scenario_party,
    normalize_shares,
)
from app.services.forecast.swing import SwingRegionDetector, rank_by_turnover
from app.services.forecast.trends import TrendAnalyzer
from settings import (
    CONFIDENCE_LEVEL,
    MIN_HISTORICAL_YEAR,
    MONTE_CARLO_ITERATIONS,
    TREND_WEIGHT,
    VOLATILITY_MULTIPLIER,
)


class HistorySource(Protocol):
    def get_records(
        self,
        years: list[int] | None = None,
        state: str | None = None,
        position: str | None = None,
    ) -> list[HistoricalVoteRecord]: ...


def default_parameters() -> ModelParameters:
    return ModelParameters(
        monte_carlo_iterations=MONTE_CARLO_ITERATIONS,
        confidence_level=CONFIDENCE_LEVEL,
        trend_weight=TREND_WEIGHT,
        volatility_multiplier=VOLATILITY_MULTIPLIER,
    )


def lookback_years(year: int, include_base: bool = False) -> list[int]:
    """Previous three elections (4-year cycle) not older than the feed starts."""
    offsets = (0, 4, 8) if include_base else (4, 8, 12)
    return [year - o for o in offsets if year - o >= MIN_HISTORICAL_YEAR]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ForecastService:
    """Trends, simulation, swing regions and narrative for one run."""

    def __init__(
        self,
        history: HistorySource,
        results: ResultRepository | None = None,
        narrative: NarrativePort | None = None,
        rng: np.random.Generator | None = None,
    ):
        self._history = history
        self._results = results
        self._narrative = narrative
        self._rng = rng
        logger.debug("ForecastService initialized (narrative={})", narrative is not None)

    @staticmethod
    def create_run(
        name: str,
        target_year: int,
        state: str | None = None,
        position: str | None = None,
        parameters: ModelParameters | None = None,
        scenario_name: str | None = None,
    ) -> ForecastRun:
        return ForecastRun(
            id=uuid.uuid4().hex,
            name=name,
            target_year=target_year,
            state=state,
            position=position,
            scenario_name=scenario_name,
            parameters=parameters or default_parameters(),
        )

    def run(
        self,
        run: ForecastRun,
        historical_years: list[int] | None = None,
        scenario: ScenarioAdjustment | None = None,
        base_year: int | None = None,
        cancel: threading.Event | None = None,
    ) -> ForecastRun:
        """Execute `run` and persist it once finished.

        With a non-empty `scenario` the lookback is anchored on `base_year`
        (default: target year - 4) and shares are normalized to 100.
        """
        log = logger.bind(run=run.id[:8])
        run.status = RunStatus.RUNNING
        run.started_at = _now()

        scenario_mode = scenario is not None and not scenario.is_empty
        if historical_years:
            years = historical_years
        elif scenario_mode:
            years = lookback_years(base_year or run.target_year - 4, include_base=True)
        else:
            years = lookback_years(run.target_year)
        run.historical_years = years

        try:
            records = self._history.get_records(years=years, state=run.state, position=run.position)
            if not records:
                raise InsufficientHistoricalDataError(
                    f"No historical records for years={years}, state={run.state}, position={run.position}"
                )
            self._compute(run, records, scenario if scenario_mode else None, cancel, log)
        except InsufficientHistoricalDataError as e:
            log.warning("Forecast failed: {}", e.message)
            self._finish(run, RunStatus.FAILED, error=e.message)
            raise
        except ForecastCancelledError as e:
            log.info("Forecast cancelled")
            self._finish(run, RunStatus.CANCELLED, error=e.message)
            raise
        except Exception as e:
            log.exception("Forecast crashed")
            self._finish(run, RunStatus.FAILED, error=str(e))
            raise

        run.narrative = self._summarize(run, log)
        self._finish(run, RunStatus.COMPLETED)
        log.info("Forecast completed: {} parties, {} swing regions", len(run.party_results), len(run.swing_regions))
        return run

    def _compute(
        self,
        run: ForecastRun,
        records: list[HistoricalVoteRecord],
        scenario: ScenarioAdjustment | None,
        cancel: threading.Event | None,
        log,
    ) -> None:
        params = run.parameters
        trends = TrendAnalyzer().analyze(records)

        if scenario is not None:
            trends, multiplier = ScenarioAdjuster(scenario).apply(trends, params.volatility_multiplier)
            params = replace(params, volatility_multiplier=multiplier)
            run.parameters = params

        simulator = MonteCarloSimulator(self._rng)
        results: list[ForecastResult] = []
        for party, trend in trends.items():
            if cancel is not None and cancel.is_set():
                raise ForecastCancelledError(run.id)
            if scenario is not None:
                result = forecast_scenario_party(simulator, trend, params, region=run.state)
            else:
                result = forecast_party(simulator, trend, run.target_year, params, region=run.state)
            if result is not None:
                results.append(result)
            log.debug("Simulated {} ({} iterations)", party, params.monte_carlo_iterations)

        if scenario is not None:
            normalize_shares(results)
        results.sort(key=lambda r: r.predicted_vote_share, reverse=True)
        run.party_results = results

        run.swing_regions = SwingRegionDetector(trends, params.volatility_multiplier).detect(records)

        run.summary = {
            "total_parties_analyzed": len(results),
            "top_party": results[0].entity_name if results else None,
            "confidence_level": params.confidence_level,
            "volatility_multiplier": params.volatility_multiplier,
            "total_simulations": params.monte_carlo_iterations,
            "scenario_name": run.scenario_name,
        }
        if scenario is not None and not run.state:
            run.summary["region_turnover"] = [t.to_dict() for t in rank_by_turnover(records)]

    def _summarize(self, run: ForecastRun, log) -> str:
        """Narrative never affects the numeric result; failures fall back."""
        if self._narrative is None:
            return ""
        try:
            return self._narrative.summarize(run)
        except Exception as e:
            log.warning("Narrative generation failed: {}", e)
            return fallback_summary(run)

    def _finish(self, run: ForecastRun, status: RunStatus, error: str | None = None) -> None:
        run.status = status
        run.error = error
        run.completed_at = _now()
        if self._results is not None:
            self._results.save_run(run)
