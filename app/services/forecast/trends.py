"""Per-party vote-share trend and volatility from multi-year totals."""

from collections import defaultdict

from loguru import logger

from app.models.forecast import HistoricalVoteRecord, PartyTrend, SharePoint
from src import formulas


class TrendAnalyzer:
    """Historical share, OLS slope, sample volatility and growth per party."""

    def analyze(self, records: list[HistoricalVoteRecord]) -> dict[str, PartyTrend]:
        """Records must already be filtered by state/position.

        Regional rows of the same party and year are summed first, so a
        national feed yields one share point per party per year.
        """
        year_totals: dict[int, int] = defaultdict(int)
        by_party: dict[str, dict[int, int]] = defaultdict(lambda: defaultdict(int))
        for r in records:
            year_totals[r.year] += r.total_votes
            by_party[r.party][r.year] += r.total_votes

        trends = {}
        for party, votes_by_year in by_party.items():
            points = [
                SharePoint(
                    year=year,
                    votes=votes,
                    share=votes / year_totals[year] * 100 if year_totals[year] else 0.0,
                )
                for year, votes in sorted(votes_by_year.items())
            ]
            shares = [p.share for p in points]
            trends[party] = PartyTrend(
                party=party,
                historical_votes=points,
                trend_slope=formulas.ols_slope([(p.year, p.share) for p in points]),
                volatility=formulas.sample_stdev(shares),
                avg_growth_rate=formulas.avg_growth_rate(shares),
            )

        logger.info("Analyzed trends for {} parties over {} years", len(trends), len(year_totals))
        return trends
