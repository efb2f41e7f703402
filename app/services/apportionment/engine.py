"""Proportional seat apportionment with quotient, barrier and minimum-vote rules.

Seats are first granted by the electoral quotient (EQ), then the remainder is
distributed by highest averages among entities that cleared the 80% barrier.
Federations compete as a single entity; their candidates are ranked together
and each elected candidate still counts for its own party.
"""

from collections.abc import Iterable

from loguru import logger

from app.errors import DegenerateQuotientError, InvalidScenarioError
from app.models.apportionment import (
    ApportionmentResult,
    CalculationLog,
    Candidate,
    CandidateResult,
    ElectoralAlliance,
    EntityResult,
    EntityType,
    FederationResult,
    Party,
    PartyResult,
    VoteTally,
)
from src import formulas

RULES_APPLIED = [
    "Electoral quotient (EQ) = floor(valid votes / available seats)",
    "Party quotient = entity votes / EQ; whole part grants seats when votes >= EQ",
    "Remainder seats distributed by highest averages (D'Hondt)",
    "Barrier clause: entities below 80% of EQ do not take part in remainder seats",
    "Minimum individual vote: candidates below 20% of EQ cannot be elected",
    "Party federations compete as a single entity",
]


def _fmt(n: int) -> str:
    return f"{n:,}"


class ApportionmentEngine:
    """Stateless seat allocator - create one per calculation."""

    def __init__(
        self,
        parties: Iterable[Party],
        candidates: Iterable[Candidate],
        alliances: Iterable[ElectoralAlliance] = (),
    ):
        self._parties = list(parties)
        self._party_by_id = {p.id: p for p in self._parties}
        self._candidates_by_party: dict[int, list[Candidate]] = {p.id: [] for p in self._parties}
        for c in candidates:
            self._candidates_by_party.setdefault(c.party_id, []).append(c)
        self._alliances = list(alliances)

    def calculate(self, valid_votes: int, available_seats: int, tally: VoteTally) -> ApportionmentResult:
        """Allocate `available_seats` and rank candidates."""
        if available_seats <= 0:
            raise InvalidScenarioError("Available seats must be greater than zero")
        if valid_votes < available_seats:
            raise InvalidScenarioError("Valid votes must be greater than or equal to available seats")

        eq = formulas.electoral_quotient(valid_votes, available_seats)
        if eq <= 0:
            raise DegenerateQuotientError("Electoral quotient must be greater than zero")

        barrier = formulas.barrier_threshold(eq)
        candidate_min = formulas.candidate_min_votes(eq)

        log = CalculationLog()
        log.step(f"EQ = floor({valid_votes} / {available_seats}) = {eq}")
        log.step(f"Barrier clause = 80% x EQ = {barrier} votes")
        log.step(f"Minimum individual vote = 20% x EQ = {candidate_min} votes")

        federations = [a for a in self._alliances if a.is_federation]
        for a in self._alliances:
            if not a.is_federation:
                log.decide(f"Coalition '{a.name}' does not pool votes; members compete individually")

        entities = self._build_entities(federations, tally.party_votes, eq, barrier)
        if not any(e.total_votes > 0 for e in entities):
            raise InvalidScenarioError("No entity received votes; no seat can be awarded")

        by_quotient, no_party_reached_qe, remaining = self._quotient_seats(entities, eq, available_seats, log)
        log.step(f"{by_quotient} seats distributed by party quotient")

        if no_party_reached_qe:
            pool = [e for e in entities if e.total_votes > 0]
            log.warn("No entity reached the EQ; all seats distributed by highest averages among entities with votes")
            logger.warning("No entity reached EQ {} - falling back to highest averages", eq)
        else:
            pool = [e for e in entities if e.meets_barrier]

        self._remainder_seats(pool, remaining)
        log.step(f"{remaining} seats distributed by remainder (D'Hondt)")
        log.step(
            f"{len(entities)} entities analysed ({len(federations)} federations + "
            f"{len(entities) - len(federations)} independent parties)"
        )
        log.step(f"{sum(e.meets_barrier for e in entities)} entities cleared the barrier for remainder seats")
        for e in entities:
            if e.total_seats:
                log.decide(
                    f"{e.name}: {e.seats_from_quotient} by quotient + {e.seats_from_remainder} by remainder"
                )

        party_results = self._party_results(entities, federations, tally, eq, candidate_min, log)
        party_results.sort(key=lambda r: (-r.total_seats, -r.total_votes))

        result = ApportionmentResult(
            electoral_quotient=eq,
            barrier_threshold=barrier,
            candidate_min_votes=candidate_min,
            total_valid_votes=valid_votes,
            available_seats=available_seats,
            seats_distributed_by_quotient=by_quotient,
            seats_distributed_by_remainder=remaining,
            no_party_reached_qe=no_party_reached_qe,
            entity_results=entities,
            party_results=party_results,
            federation_results=[
                FederationResult(
                    federation_id=int(e.entity_id.removeprefix("federation-")),
                    name=e.name,
                    total_votes=e.total_votes,
                    seats_from_quotient=e.seats_from_quotient,
                    seats_from_remainder=e.seats_from_remainder,
                    total_seats=e.total_seats,
                    member_party_ids=e.member_party_ids,
                    meets_barrier=e.meets_barrier,
                    barrier_detail=e.barrier_detail,
                )
                for e in entities
                if e.entity_type is EntityType.FEDERATION
            ],
            calculation_log=log,
            rules_applied=list(RULES_APPLIED),
        )

        logger.info(
            "Apportioned {} seats among {} entities (EQ={}, barrier={})",
            available_seats,
            sum(1 for e in entities if e.total_seats),
            eq,
            barrier,
        )
        return result

    def _build_entities(
        self,
        federations: list[ElectoralAlliance],
        party_votes: dict[int, int],
        eq: int,
        barrier: int,
    ) -> list[EntityResult]:
        """Federations first (alliance order), then independent parties (registry order)."""
        entities = []
        federated: set[int] = set()

        for fed in federations:
            federated.update(fed.member_party_ids)
            votes = sum(party_votes.get(pid, 0) for pid in fed.member_party_ids)
            entities.append(
                self._entity(f"federation-{fed.id}", EntityType.FEDERATION, fed.name, votes, eq, barrier, fed.member_party_ids)
            )

        for party in self._parties:
            if party.id in federated:
                continue
            votes = party_votes.get(party.id, 0)
            entities.append(self._entity(f"party-{party.id}", EntityType.PARTY, party.name, votes, eq, barrier))

        return entities

    @staticmethod
    def _entity(
        entity_id: str,
        entity_type: EntityType,
        name: str,
        votes: int,
        eq: int,
        barrier: int,
        members: list[int] | None = None,
    ) -> EntityResult:
        quotient = votes / eq
        meets = votes >= barrier
        if meets:
            detail = f"Cleared barrier: {_fmt(votes)} votes >= {_fmt(barrier)} (80% EQ)"
        else:
            detail = f"Below barrier: {_fmt(votes)} votes < {_fmt(barrier)} (80% EQ)"
        return EntityResult(
            entity_id=entity_id,
            entity_type=entity_type,
            name=name,
            total_votes=votes,
            quotient=quotient,
            seats_from_quotient=int(quotient) if votes >= eq else 0,
            meets_barrier=meets,
            barrier_detail=detail,
            member_party_ids=list(members or []),
        )

    @staticmethod
    def _quotient_seats(
        entities: list[EntityResult],
        eq: int,
        seats: int,
        log: CalculationLog,
    ) -> tuple[int, bool, int]:
        """Returns (seats by quotient, no entity reached EQ, seats left for remainder)."""
        reaching = [e for e in entities if e.total_votes >= eq]
        if not reaching:
            return 0, True, seats

        granted = sum(e.seats_from_quotient for e in reaching)
        if granted > seats:
            # Only possible with very small quotients; keep the seat total exact.
            log.warn(f"Quotient seats ({granted}) exceed available seats ({seats}); re-awarded by highest averages")
            logger.warning("Quotient seats {} exceed available {}", granted, seats)
            won = formulas.highest_averages(
                {e.entity_id: e.total_votes for e in reaching},
                seats,
                caps={e.entity_id: e.seats_from_quotient for e in reaching},
            )
            for e in reaching:
                e.seats_from_quotient = won[e.entity_id]
            granted = seats

        return granted, False, seats - granted

    @staticmethod
    def _remainder_seats(pool: list[EntityResult], seats: int) -> None:
        if not seats:
            return
        won = formulas.highest_averages(
            {e.entity_id: e.total_votes for e in pool},
            seats,
            start={e.entity_id: e.seats_from_quotient for e in pool},
        )
        for e in pool:
            e.seats_from_remainder += won[e.entity_id]

    def _rank(self, party_ids: list[int], tally: VoteTally, candidate_min: int) -> list[CandidateResult]:
        results = []
        for pid in party_ids:
            for c in self._candidates_by_party.get(pid, []):
                votes = tally.candidate_votes.get(c.id, 0)
                below = votes < candidate_min
                if below:
                    detail = f"Below minimum: {_fmt(votes)} < {_fmt(candidate_min)} (20% EQ)"
                else:
                    detail = f"Above minimum: {_fmt(votes)} >= {_fmt(candidate_min)} (20% EQ)"
                results.append(
                    CandidateResult(
                        candidate_id=c.id,
                        party_id=pid,
                        name=c.display_name,
                        votes=votes,
                        below_min_threshold=below,
                        threshold_detail=detail,
                    )
                )
        results.sort(key=lambda r: (-r.votes, r.candidate_id))
        return results

    @staticmethod
    def _elect(ranked: list[CandidateResult], seats: int) -> int:
        """Mark the top eligible candidates elected; returns seats filled."""
        filled = 0
        for c in ranked:
            if filled >= seats:
                break
            if c.below_min_threshold:
                continue
            filled += 1
            c.elected = True
            c.position = filled
        return filled

    def _party_results(
        self,
        entities: list[EntityResult],
        federations: list[ElectoralAlliance],
        tally: VoteTally,
        eq: int,
        candidate_min: int,
        log: CalculationLog,
    ) -> list[PartyResult]:
        fed_by_id = {f"federation-{f.id}": f for f in federations}
        results = []

        for e in entities:
            if e.total_seats == 0 and e.total_votes == 0:
                continue

            if e.entity_type is EntityType.PARTY:
                party = self._party_by_id[int(e.entity_id.removeprefix("party-"))]
                ranked = self._rank([party.id], tally, candidate_min)
                filled = self._elect(ranked, e.total_seats)
                results.append(
                    PartyResult(
                        party_id=party.id,
                        party_name=party.name,
                        abbreviation=party.abbreviation,
                        total_votes=e.total_votes,
                        party_quotient=e.quotient,
                        seats_from_quotient=e.seats_from_quotient,
                        seats_from_remainder=e.seats_from_remainder,
                        total_seats=e.total_seats,
                        meets_barrier=e.meets_barrier,
                        barrier_detail=e.barrier_detail,
                        candidates=ranked,
                    )
                )
            else:
                fed = fed_by_id[e.entity_id]
                ranked = self._rank(e.member_party_ids, tally, candidate_min)
                filled = self._elect(ranked, e.total_seats)
                for pid in e.member_party_ids:
                    party = self._party_by_id.get(pid)
                    if party is None:
                        logger.warning("Federation {} references unknown party {}", fed.name, pid)
                        continue
                    own = [c for c in ranked if c.party_id == pid]
                    votes = tally.party_votes.get(pid, 0)
                    results.append(
                        PartyResult(
                            party_id=pid,
                            party_name=party.name,
                            abbreviation=party.abbreviation,
                            total_votes=votes,
                            party_quotient=votes / eq,
                            seats_from_quotient=0,
                            seats_from_remainder=0,
                            total_seats=sum(c.elected for c in own),
                            meets_barrier=e.meets_barrier,
                            barrier_detail=e.barrier_detail,
                            candidates=own,
                            federation_id=fed.id,
                            federation_name=fed.name,
                        )
                    )

            if filled < e.total_seats:
                log.warn(f"{e.name}: {e.total_seats - filled} seat(s) without an eligible candidate")

        return results
