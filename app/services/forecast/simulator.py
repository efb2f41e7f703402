"""Monte Carlo vote-share simulation and per-party forecasts."""

from math import sqrt

import numpy as np
from loguru import logger

from app.models.forecast import (
    ForecastResult,
    InfluenceFactor,
    ModelParameters,
    MonteCarloResult,
    PartyTrend,
    TrendDirection,
)
from src import formulas

RISING_SLOPE = 0.5
MIN_CONFIDENCE = 0.3
HIGH_VOLATILITY = 5.0


class MonteCarloSimulator:
    """Box-Muller normal sampling over an injectable generator.

    Pass a seeded ``numpy.random.Generator`` for reproducible output; the
    default draws from OS entropy.
    """

    def __init__(self, rng: np.random.Generator | None = None):
        self._rng = rng if rng is not None else np.random.default_rng()

    def normal(self, n: int) -> np.ndarray:
        """Standard normal draws via Box-Muller."""
        u1 = 1.0 - self._rng.random(n)  # (0, 1], keeps log finite
        u2 = self._rng.random(n)
        return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)

    def simulate(
        self,
        base_value: float,
        volatility: float,
        trend_adjustment: float,
        iterations: int,
        confidence_level: float,
        max_share: float = 100.0,
    ) -> MonteCarloResult:
        if iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {iterations}")
        if not 0 < confidence_level < 1:
            raise ValueError(f"confidence_level must be in (0, 1), got {confidence_level}")

        samples = np.clip(base_value + trend_adjustment + volatility * self.normal(iterations), 0.0, max_share)
        samples.sort()

        n = len(samples)
        lower_idx, upper_idx = formulas.interval_indices(n, confidence_level)
        return MonteCarloResult(
            samples=samples.tolist(),
            mean=float(samples.mean()),
            median=float(samples[n // 2]),
            lower=float(samples[lower_idx]),
            upper=float(samples[upper_idx]),
            standard_deviation=float(samples.std(ddof=1)) if n > 1 else 0.0,
        )


def trend_direction(slope: float) -> TrendDirection:
    if slope > RISING_SLOPE:
        return TrendDirection.RISING
    if slope < -RISING_SLOPE:
        return TrendDirection.FALLING
    return TrendDirection.STABLE


def confidence_score(sim: MonteCarloResult) -> float:
    if sim.mean == 0:
        return MIN_CONFIDENCE
    return max(MIN_CONFIDENCE, 1 - (sim.standard_deviation / sim.mean) * 0.5)


def _result(trend: PartyTrend, sim: MonteCarloResult, params: ModelParameters, region: str | None) -> ForecastResult:
    direction = trend_direction(trend.trend_slope)
    shares = trend.shares
    return ForecastResult(
        entity_name=trend.party,
        predicted_vote_share=sim.mean,
        vote_share_lower=sim.lower,
        vote_share_upper=sim.upper,
        trend_direction=direction,
        trend_strength=abs(trend.trend_slope),
        confidence=confidence_score(sim),
        historical_average=sum(shares) / len(shares) if shares else 0.0,
        volatility_score=trend.volatility,
        historical_years=[p.year for p in trend.historical_votes],
        historical_shares=shares,
        influence_factors=[
            InfluenceFactor("historical trend", params.trend_weight, direction.value),
            InfluenceFactor("volatility", 0.2, "high" if trend.volatility > HIGH_VOLATILITY else "medium"),
            InfluenceFactor("growth rate", 0.2, "positive" if trend.avg_growth_rate > 0 else "negative"),
        ],
        region=region,
    )


def forecast_party(
    simulator: MonteCarloSimulator,
    trend: PartyTrend,
    target_year: int,
    params: ModelParameters,
    region: str | None = None,
) -> ForecastResult | None:
    """Project the last share along the slope, widening noise with the horizon."""
    last = trend.last
    if last is None:
        return None

    # Same-year or past targets would zero out (or break) the sqrt scaling.
    years_delta = max(1, target_year - last.year)
    projection = last.share + trend.trend_slope * years_delta
    volatility = trend.volatility * params.volatility_multiplier * sqrt(years_delta)

    sim = simulator.simulate(projection, volatility, 0.0, params.monte_carlo_iterations, params.confidence_level)
    return _result(trend, sim, params, region)


def forecast_scenario_party(
    simulator: MonteCarloSimulator,
    trend: PartyTrend,
    params: ModelParameters,
    region: str | None = None,
) -> ForecastResult | None:
    """Scenario variant: slope is a per-sample shift, not a pre-projection."""
    last = trend.last
    if last is None:
        return None

    sim = simulator.simulate(
        last.share,
        trend.volatility * params.volatility_multiplier,
        trend.trend_slope,
        params.monte_carlo_iterations,
        params.confidence_level,
    )
    return _result(trend, sim, params, region)


def normalize_shares(results: list[ForecastResult]) -> list[ForecastResult]:
    """Scale means (and bounds by the same factor) to sum to 100."""
    total = sum(r.predicted_vote_share for r in results)
    if total <= 0:
        logger.warning("Predicted shares sum to zero; normalization skipped")
        return results

    factor = 100 / total
    for r in results:
        r.predicted_vote_share *= factor
        r.vote_share_lower *= factor
        r.vote_share_upper *= factor
    return results
