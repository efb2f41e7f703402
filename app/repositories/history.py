"""Historical vote repository - read-only feed of past results."""

from loguru import logger

from app.models.forecast import HistoricalVoteRecord
from app.repositories.base import BaseRepository


class HistoryRepository(BaseRepository):
    """Party totals per year/state/position."""

    def get_records(
        self,
        years: list[int] | None = None,
        state: str | None = None,
        position: str | None = None,
    ) -> list[HistoricalVoteRecord]:
        """Records matching all given filters, ordered by year then party."""
        clauses, params = [], []
        if years:
            clauses.append(f"year IN ({', '.join('?' for _ in years)})")
            params.extend(years)
        if state:
            clauses.append("state = ?")
            params.append(state)
        if position:
            clauses.append("position = ?")
            params.append(position)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self.fetchall(
            f"""
            SELECT year, party, state, position, SUM(total_votes), SUM(candidate_count)
            FROM historical_vote
            {where}
            GROUP BY year, party, state, position
            ORDER BY year, party, state
            """,
            params,
        )
        records = [
            HistoricalVoteRecord(
                year=r[0],
                party=r[1],
                state=r[2],
                position=r[3],
                total_votes=int(r[4]),
                candidate_count=int(r[5] or 0),
            )
            for r in rows
        ]
        logger.debug("get_records(years={}, state={}, position={}): {} rows", years, state, position, len(records))
        return records

    def get_years(self, position: str | None = None) -> list[int]:
        """Election years available, newest first."""
        if position:
            rows = self.fetchall(
                "SELECT DISTINCT year FROM historical_vote WHERE position = ? ORDER BY year DESC", [position]
            )
        else:
            rows = self.fetchall("SELECT DISTINCT year FROM historical_vote ORDER BY year DESC")
        return [r[0] for r in rows]
