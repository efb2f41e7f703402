"""Swing region detection from regional results and party trends."""

from collections import defaultdict

from loguru import logger

from app.models.forecast import (
    HistoricalVoteRecord,
    KeyFactor,
    PartyTrend,
    RegionTurnover,
    SwingRegion,
    region_name,
)
from src import formulas

SWING_MARGIN = 10.0
SWING_VOLATILITY = 2.0
HIGH_IMPACT_MARGIN = 5.0
HIGH_IMPACT_VOLATILITY = 5.0


def group_by_region(records: list[HistoricalVoteRecord]) -> dict[str, list[HistoricalVoteRecord]]:
    """Records without a state are not regional and are dropped."""
    regions: dict[str, list[HistoricalVoteRecord]] = defaultdict(list)
    for r in records:
        if r.state:
            regions[r.state].append(r)
    return dict(regions)


class SwingRegionDetector:
    """Flags regions with a narrow lead between historically volatile parties."""

    def __init__(self, trends: dict[str, PartyTrend], volatility_multiplier: float):
        self._trends = trends
        self._multiplier = volatility_multiplier

    def assess_region(self, region: str, records: list[HistoricalVoteRecord]) -> SwingRegion | None:
        """Evaluate one region on its most recent year; None if uncontested."""
        if not records:
            return None
        latest = max(r.year for r in records)
        recent = sorted((r for r in records if r.year == latest), key=lambda r: -r.total_votes)
        if len(recent) < 2:
            return None

        leader, challenger = recent[0], recent[1]
        total = sum(r.total_votes for r in recent)
        margin = (leader.total_votes - challenger.total_votes) / total * 100 if total > 0 else 0.0

        lead_trend = self._trends.get(leader.party)
        chal_trend = self._trends.get(challenger.party)
        lead_vol = lead_trend.volatility if lead_trend else 0.0
        chal_vol = chal_trend.volatility if chal_trend else 0.0
        avg_vol = (lead_vol + chal_vol) / 2

        shift = (chal_trend.trend_slope if chal_trend else 0.0) - (lead_trend.trend_slope if lead_trend else 0.0)

        factors = []
        if margin < SWING_MARGIN:
            factors.append(KeyFactor("tight margin", "high" if margin < HIGH_IMPACT_MARGIN else "medium"))
        if avg_vol > SWING_VOLATILITY:
            factors.append(
                KeyFactor("high historical volatility", "high" if avg_vol > HIGH_IMPACT_VOLATILITY else "medium")
            )
        if shift > 0:
            factors.append(KeyFactor("rising challenger", "high"))

        return SwingRegion(
            region=region,
            region_name=region_name(region),
            margin_percent=margin,
            margin_votes=leader.total_votes - challenger.total_votes,
            volatility_score=avg_vol,
            swing_magnitude=avg_vol * self._multiplier,
            leading_entity=leader.party,
            challenging_entity=challenger.party,
            recent_trend_shift=shift,
            outcome_uncertainty=formulas.clamp01((SWING_MARGIN - margin) / SWING_MARGIN * avg_vol / 5),
            is_swing=margin < SWING_MARGIN and avg_vol > SWING_VOLATILITY,
            position=leader.position,
            key_factors=factors,
        )

    def assess(self, records: list[HistoricalVoteRecord]) -> list[SwingRegion]:
        """Every contested region, swing or not."""
        result = []
        for region, rows in group_by_region(records).items():
            assessed = self.assess_region(region, rows)
            if assessed is not None:
                result.append(assessed)
        return result

    def detect(self, records: list[HistoricalVoteRecord]) -> list[SwingRegion]:
        """Swing regions sorted by volatility score, highest first."""
        swings = [r for r in self.assess(records) if r.is_swing]
        swings.sort(key=lambda r: r.volatility_score, reverse=True)
        logger.info("Detected {} swing regions", len(swings))
        return swings


def rank_by_turnover(records: list[HistoricalVoteRecord], top: int = 10) -> list[RegionTurnover]:
    """Regions ranked by mean relative vote change between their two latest years."""
    ranking = []
    for region, rows in group_by_region(records).items():
        years = sorted({r.year for r in rows}, reverse=True)[:2]
        votes: dict[str, dict[int, int]] = defaultdict(dict)
        for r in rows:
            if r.year in years:
                votes[r.party][r.year] = votes[r.party].get(r.year, 0) + r.total_votes

        changes = []
        for by_year in votes.values():
            if len(by_year) == 2:
                a, b = (by_year[y] for y in years)
                changes.append(abs(a - b) / max(a, b, 1))

        leaders = sorted(votes, key=lambda p: -votes[p].get(years[0], 0))
        ranking.append(
            RegionTurnover(
                region=region,
                volatility=sum(changes) / len(changes) if changes else 0.0,
                swing=sum(changes),
                top_parties=leaders[:3],
            )
        )

    ranking.sort(key=lambda r: r.volatility, reverse=True)
    return ranking[:top]
