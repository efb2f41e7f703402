"""Forecast domain models - historical records, trends, scenarios and runs."""

from app.models.forecast.entities import (
    ExternalFactor,
    FactorImpact,
    ForecastResult,
    ForecastRun,
    HistoricalVoteRecord,
    InfluenceFactor,
    KeyFactor,
    ModelParameters,
    MonteCarloResult,
    PartyAdjustment,
    PartyTrend,
    PollingPoint,
    RegionTurnover,
    RunStatus,
    ScenarioAdjustment,
    SharePoint,
    SwingRegion,
    TrendDirection,
)
from app.models.forecast.regions import REGION_NAMES, region_name
from app.models.forecast.tables import FORECAST_RUN_DDL, HISTORICAL_VOTE_DDL

__all__ = [
    "ExternalFactor",
    "FactorImpact",
    "FORECAST_RUN_DDL",
    "ForecastResult",
    "ForecastRun",
    "HISTORICAL_VOTE_DDL",
    "HistoricalVoteRecord",
    "InfluenceFactor",
    "KeyFactor",
    "ModelParameters",
    "MonteCarloResult",
    "PartyAdjustment",
    "PartyTrend",
    "PollingPoint",
    "REGION_NAMES",
    "RegionTurnover",
    "RunStatus",
    "ScenarioAdjustment",
    "SharePoint",
    "SwingRegion",
    "TrendDirection",
    "region_name",
]
