"""Forecast services - trends, scenarios, simulation, swing regions."""

from app.services.forecast.narrative import HttpNarrativeClient, NarrativePort, fallback_summary
from app.services.forecast.scenario import ScenarioAdjuster
from app.services.forecast.service import ForecastService, default_parameters, lookback_years
from app.services.forecast.simulator import MonteCarloSimulator
from app.services.forecast.swing import SwingRegionDetector, rank_by_turnover
from app.services.forecast.trends import TrendAnalyzer
from app.services.forecast.worker import ForecastWorker

__all__ = [
    "ForecastService",
    "ForecastWorker",
    "HttpNarrativeClient",
    "MonteCarloSimulator",
    "NarrativePort",
    "ScenarioAdjuster",
    "SwingRegionDetector",
    "TrendAnalyzer",
    "default_parameters",
    "fallback_summary",
    "lookback_years",
    "rank_by_turnover",
]
