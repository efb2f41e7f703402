"""Forecast domain entities - history inputs, scenarios and computed results."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from app.models.common import BaseEntity


@dataclass
class HistoricalVoteRecord(BaseEntity):
    """One party's totals for one year/state/position."""

    year: int
    party: str
    total_votes: int
    state: str | None = None
    position: str | None = None
    candidate_count: int = 0


@dataclass
class SharePoint(BaseEntity):
    year: int
    votes: int
    share: float


@dataclass
class PartyTrend(BaseEntity):
    """Derived historical statistics for one party."""

    party: str
    historical_votes: list[SharePoint]
    trend_slope: float
    volatility: float
    avg_growth_rate: float

    @property
    def shares(self) -> list[float]:
        return [p.share for p in self.historical_votes]

    @property
    def last(self) -> SharePoint | None:
        return self.historical_votes[-1] if self.historical_votes else None


@dataclass
class MonteCarloResult(BaseEntity):
    """One simulated distribution."""

    samples: list[float]
    mean: float
    median: float
    lower: float
    upper: float
    standard_deviation: float


class TrendDirection(str, Enum):
    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"


@dataclass
class InfluenceFactor(BaseEntity):
    factor: str
    weight: float
    impact: str


@dataclass
class ForecastResult(BaseEntity):
    """Predicted vote share for one party."""

    entity_name: str
    predicted_vote_share: float
    vote_share_lower: float
    vote_share_upper: float
    trend_direction: TrendDirection
    trend_strength: float
    confidence: float
    historical_average: float
    volatility_score: float
    historical_years: list[int] = field(default_factory=list)
    historical_shares: list[float] = field(default_factory=list)
    influence_factors: list[InfluenceFactor] = field(default_factory=list)
    region: str | None = None


@dataclass
class KeyFactor(BaseEntity):
    factor: str
    impact: str


@dataclass
class SwingRegion(BaseEntity):
    """A region with a narrow lead and volatile history."""

    region: str
    region_name: str
    margin_percent: float
    margin_votes: int
    volatility_score: float
    swing_magnitude: float
    leading_entity: str
    challenging_entity: str
    recent_trend_shift: float
    outcome_uncertainty: float
    is_swing: bool
    position: str | None = None
    key_factors: list[KeyFactor] = field(default_factory=list)


@dataclass
class RegionTurnover(BaseEntity):
    """Average relative vote change of a region's parties between elections."""

    region: str
    volatility: float
    swing: float
    top_parties: list[str]


@dataclass
class PollingPoint(BaseEntity):
    party: str
    poll_percent: float
    poll_date: str | None = None
    source: str | None = None
    sample_size: int | None = None


@dataclass
class PartyAdjustment(BaseEntity):
    vote_share_adjust: float = 0.0
    turnout_adjust: float = 0.0
    reason: str | None = None


class FactorImpact(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


@dataclass
class ExternalFactor(BaseEntity):
    factor: str
    impact: FactorImpact
    magnitude: float

    @property
    def signed(self) -> float:
        return self.magnitude if FactorImpact(self.impact) is FactorImpact.POSITIVE else -self.magnitude


@dataclass
class ScenarioAdjustment(BaseEntity):
    """Caller-supplied overrides for a forecast."""

    polling_data: list[PollingPoint] = field(default_factory=list)
    polling_weight: float | None = None
    party_adjustments: dict[str, PartyAdjustment] = field(default_factory=dict)
    external_factors: list[ExternalFactor] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.polling_data or self.party_adjustments or self.external_factors)


@dataclass
class ModelParameters(BaseEntity):
    monte_carlo_iterations: int = 10000
    confidence_level: float = 0.95
    trend_weight: float = 0.4
    volatility_multiplier: float = 1.2


class RunStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class ForecastRun(BaseEntity):
    """Aggregate of one forecast run, persisted once it finishes."""

    id: str
    name: str
    target_year: int
    state: str | None = None
    position: str | None = None
    scenario_name: str | None = None
    status: RunStatus = RunStatus.PENDING
    historical_years: list[int] = field(default_factory=list)
    parameters: ModelParameters = field(default_factory=ModelParameters)
    party_results: list[ForecastResult] = field(default_factory=list)
    swing_regions: list[SwingRegion] = field(default_factory=list)
    narrative: str = ""
    summary: dict = field(default_factory=dict)
    error: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def finished(self) -> bool:
        return self.status in (RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.CANCELLED)
