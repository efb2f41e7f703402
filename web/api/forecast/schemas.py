"""Forecast API request and response schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class PollingPointIn(BaseModel):
    party: str
    poll_percent: float = Field(ge=0, le=100)
    poll_date: str | None = None
    source: str | None = None
    sample_size: int | None = None


class PartyAdjustmentIn(BaseModel):
    vote_share_adjust: float = 0.0
    turnout_adjust: float = 0.0
    reason: str | None = None


class ExternalFactorIn(BaseModel):
    factor: str
    impact: Literal["positive", "negative"]
    magnitude: float = Field(ge=0)


class ModelParametersIn(BaseModel):
    monte_carlo_iterations: int = Field(default=10000, ge=1)
    confidence_level: float = Field(default=0.95, gt=0, lt=1)
    trend_weight: float = 0.4
    volatility_multiplier: float = Field(default=1.2, gt=0)


class ForecastRequest(BaseModel):
    """Forecast run request; any scenario field switches to the scenario variant."""

    name: str
    target_year: int
    state: str | None = None
    position: str | None = None
    historical_years: list[int] | None = None
    parameters: ModelParametersIn = Field(default_factory=ModelParametersIn)
    scenario_name: str | None = None
    base_year: int | None = None
    polling_data: list[PollingPointIn] = Field(default_factory=list)
    polling_weight: float | None = Field(default=None, ge=0, le=1)
    party_adjustments: dict[str, PartyAdjustmentIn] = Field(default_factory=dict)
    external_factors: list[ExternalFactorIn] = Field(default_factory=list)


class InfluenceFactorItem(BaseModel):
    factor: str
    weight: float
    impact: str


class ForecastItem(BaseModel):
    """Predicted vote share for a party."""

    entity_name: str
    predicted_vote_share: float
    vote_share_lower: float
    vote_share_upper: float
    trend_direction: str
    trend_strength: float
    confidence: float
    historical_average: float
    volatility_score: float
    historical_years: list[int]
    historical_shares: list[float]
    influence_factors: list[InfluenceFactorItem]
    region: str | None = None


class KeyFactorItem(BaseModel):
    factor: str
    impact: str


class SwingRegionItem(BaseModel):
    """Volatile region."""

    region: str
    region_name: str
    position: str | None
    margin_percent: float
    margin_votes: int
    volatility_score: float
    swing_magnitude: float
    leading_entity: str
    challenging_entity: str
    recent_trend_shift: float
    outcome_uncertainty: float
    key_factors: list[KeyFactorItem]


class ForecastRunResponse(BaseModel):
    """Forecast run status and, once completed, its results."""

    id: str
    name: str
    target_year: int
    status: str
    state: str | None
    position: str | None
    historical_years: list[int]
    party_results: list[ForecastItem]
    swing_regions: list[SwingRegionItem]
    narrative: str
    summary: dict
    error: str | None


class CancelResponse(BaseModel):
    id: str
    cancelled: bool
