"""Apportionment results - computed seat allocation entities."""

from dataclasses import dataclass, field
from enum import Enum

from app.models.common import BaseEntity


class EntityType(str, Enum):
    PARTY = "party"
    FEDERATION = "federation"


@dataclass
class EntityResult(BaseEntity):
    """Seat allocation for one competing entity (party or federation)."""

    entity_id: str
    entity_type: EntityType
    name: str
    total_votes: int
    quotient: float
    seats_from_quotient: int
    meets_barrier: bool
    barrier_detail: str
    seats_from_remainder: int = 0
    member_party_ids: list[int] = field(default_factory=list)

    @property
    def total_seats(self) -> int:
        return self.seats_from_quotient + self.seats_from_remainder


@dataclass
class CandidateResult(BaseEntity):
    """Ranking outcome for one candidate."""

    candidate_id: int
    party_id: int
    name: str
    votes: int
    below_min_threshold: bool
    threshold_detail: str
    elected: bool = False
    position: int = 0


@dataclass
class PartyResult(BaseEntity):
    """Per-party outcome; federation members keep their own seat count."""

    party_id: int
    party_name: str
    abbreviation: str
    total_votes: int
    party_quotient: float
    seats_from_quotient: int
    seats_from_remainder: int
    total_seats: int
    meets_barrier: bool
    barrier_detail: str
    candidates: list[CandidateResult] = field(default_factory=list)
    federation_id: int | None = None
    federation_name: str | None = None

    @property
    def elected(self) -> list[CandidateResult]:
        return [c for c in self.candidates if c.elected]


@dataclass
class FederationResult(BaseEntity):
    """Pooled outcome for a federation."""

    federation_id: int
    name: str
    total_votes: int
    seats_from_quotient: int
    seats_from_remainder: int
    total_seats: int
    member_party_ids: list[int]
    meets_barrier: bool
    barrier_detail: str


@dataclass
class CalculationLog(BaseEntity):
    """Audit trail of every derived threshold and decision."""

    steps: list[str] = field(default_factory=list)
    decisions: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def step(self, text: str) -> None:
        self.steps.append(text)

    def decide(self, text: str) -> None:
        self.decisions.append(text)

    def warn(self, text: str) -> None:
        self.warnings.append(text)


@dataclass
class ApportionmentResult(BaseEntity):
    """Output of one seat allocation."""

    electoral_quotient: int
    barrier_threshold: int
    candidate_min_votes: int
    total_valid_votes: int
    available_seats: int
    seats_distributed_by_quotient: int
    seats_distributed_by_remainder: int
    no_party_reached_qe: bool
    entity_results: list[EntityResult]
    party_results: list[PartyResult]
    federation_results: list[FederationResult]
    calculation_log: CalculationLog
    rules_applied: list[str] = field(default_factory=list)

    @property
    def warnings(self) -> list[str]:
        return self.calculation_log.warnings

    @property
    def elected_candidates(self) -> list[CandidateResult]:
        return sorted(
            (c for p in self.party_results for c in p.elected),
            key=lambda c: -c.votes,
        )
