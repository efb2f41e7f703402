"""Apportionment service - runs the engine and stores the finished result."""

from loguru import logger

from app.models.apportionment import (
    ApportionmentResult,
    Candidate,
    ElectoralAlliance,
    Party,
    VoteTally,
)
from app.repositories import ResultRepository
from app.services.apportionment.engine import ApportionmentEngine


class ApportionmentService:
    """Seat calculation for one scenario; persistence is optional."""

    def __init__(self, results: ResultRepository | None = None):
        self._results = results

    def calculate(
        self,
        valid_votes: int,
        available_seats: int,
        tally: VoteTally,
        parties: list[Party],
        candidates: list[Candidate],
        alliances: list[ElectoralAlliance] | None = None,
        scenario_id: int | None = None,
    ) -> tuple[ApportionmentResult, str | None]:
        """Returns the result and its stored id (None when not persisted)."""
        engine = ApportionmentEngine(parties, candidates, alliances or [])
        result = engine.calculate(valid_votes, available_seats, tally)

        result_id = None
        if self._results is not None:
            result_id = self._results.save_apportionment(result, scenario_id)
            logger.info("Apportionment for scenario {} stored as {}", scenario_id, result_id)
        return result, result_id
