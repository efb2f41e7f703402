"""Apportionment API request and response schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class PartyIn(BaseModel):
    id: int
    name: str
    abbreviation: str = ""
    number: int | None = None


class CandidateIn(BaseModel):
    id: int
    name: str
    party_id: int
    number: int | None = None
    nickname: str | None = None


class AllianceIn(BaseModel):
    id: int
    name: str
    type: Literal["coalition", "federation"]
    member_party_ids: list[int] = Field(default_factory=list)


class ApportionmentRequest(BaseModel):
    """Seat calculation request."""

    scenario_id: int | None = None
    valid_votes: int
    available_seats: int
    party_votes: dict[int, int] = Field(default_factory=dict)
    candidate_votes: dict[int, int] = Field(default_factory=dict)
    parties: list[PartyIn]
    candidates: list[CandidateIn] = Field(default_factory=list)
    alliances: list[AllianceIn] = Field(default_factory=list)


class CandidateItem(BaseModel):
    """Ranked candidate."""

    candidate_id: int
    name: str
    votes: int
    elected: bool
    position: int
    below_min_threshold: bool
    threshold_detail: str


class PartyItem(BaseModel):
    """Per-party seat result."""

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
    candidates: list[CandidateItem]
    federation_id: int | None = None
    federation_name: str | None = None


class FederationItem(BaseModel):
    """Pooled federation seat result."""

    federation_id: int
    name: str
    total_votes: int
    seats_from_quotient: int
    seats_from_remainder: int
    total_seats: int
    member_party_ids: list[int]
    meets_barrier: bool
    barrier_detail: str


class CalculationLogItem(BaseModel):
    steps: list[str]
    decisions: list[str]
    warnings: list[str]


class ApportionmentResponse(BaseModel):
    """Seat calculation response."""

    result_id: str | None
    electoral_quotient: int
    barrier_threshold: int
    candidate_min_votes: int
    total_valid_votes: int
    available_seats: int
    seats_distributed_by_quotient: int
    seats_distributed_by_remainder: int
    no_party_reached_qe: bool
    party_results: list[PartyItem]
    federation_results: list[FederationItem]
    has_federations: bool
    calculation_log: CalculationLogItem
    warnings: list[str]
    rules_applied: list[str]
