"""Blend polling, manual adjustments and external factors into party trends."""

from dataclasses import replace

from loguru import logger

from app.models.forecast import PartyTrend, ScenarioAdjustment
from settings import POLLING_WEIGHT

MIN_VOLATILITY_MULTIPLIER = 0.1
EXTERNAL_FACTOR_SCALE = 0.1


def _with_last_share(trend: PartyTrend, share: float) -> PartyTrend:
    points = list(trend.historical_votes)
    points[-1] = replace(points[-1], share=share)
    return replace(trend, historical_votes=points)


class ScenarioAdjuster:
    """Pure transform: returns new trends and the adjusted volatility multiplier.

    Order is fixed: polls are blended into the latest share, then manual
    deltas are added, then external factors move the multiplier.
    """

    def __init__(self, adjustment: ScenarioAdjustment):
        self._adj = adjustment

    def apply(self, trends: dict[str, PartyTrend], multiplier: float) -> tuple[dict[str, PartyTrend], float]:
        adjusted = dict(trends)
        weight = self._adj.polling_weight if self._adj.polling_weight is not None else POLLING_WEIGHT

        for poll in self._adj.polling_data:
            trend = adjusted.get(poll.party)
            if trend is None or trend.last is None:
                logger.debug("Poll for unknown party {} ignored", poll.party)
                continue
            blended = trend.last.share * (1 - weight) + poll.poll_percent * weight
            adjusted[poll.party] = _with_last_share(trend, blended)

        for party, change in self._adj.party_adjustments.items():
            trend = adjusted.get(party)
            if trend is None or trend.last is None:
                logger.debug("Adjustment for unknown party {} ignored", party)
                continue
            if change.vote_share_adjust:
                adjusted[party] = _with_last_share(trend, trend.last.share + change.vote_share_adjust)

        if self._adj.external_factors:
            impact = sum(f.signed for f in self._adj.external_factors) / 100
            multiplier = max(MIN_VOLATILITY_MULTIPLIER, multiplier + impact * EXTERNAL_FACTOR_SCALE)

        logger.info(
            "Scenario applied: {} polls, {} adjustments, {} factors -> multiplier {:.3f}",
            len(self._adj.polling_data),
            len(self._adj.party_adjustments),
            len(self._adj.external_factors),
            multiplier,
        )
        return adjusted, multiplier
