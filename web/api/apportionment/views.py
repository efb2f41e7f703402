"""Apportionment API views - thin layer over services."""

from app.container import container
from app.errors import InputValidationError
from app.models.apportionment import (
    AllianceType,
    Candidate,
    ElectoralAlliance,
    Party,
    VoteTally,
)
from web.api.errors import NotFoundError, as_validation_error

from .schemas import (
    ApportionmentRequest,
    ApportionmentResponse,
    CalculationLogItem,
    CandidateItem,
    FederationItem,
    PartyItem,
)


def calculate_seats(request: ApportionmentRequest) -> ApportionmentResponse:
    """Allocate seats and rank candidates for a scenario."""
    try:
        result, result_id = container.apportionment.calculate(
            valid_votes=request.valid_votes,
            available_seats=request.available_seats,
            tally=VoteTally(party_votes=request.party_votes, candidate_votes=request.candidate_votes),
            parties=[Party(**p.model_dump()) for p in request.parties],
            candidates=[Candidate(**c.model_dump()) for c in request.candidates],
            alliances=[
                ElectoralAlliance(
                    id=a.id,
                    name=a.name,
                    type=AllianceType(a.type),
                    member_party_ids=a.member_party_ids,
                )
                for a in request.alliances
            ],
            scenario_id=request.scenario_id,
        )
    except InputValidationError as e:
        raise as_validation_error(e) from e

    log = result.calculation_log
    return ApportionmentResponse(
        result_id=result_id,
        electoral_quotient=result.electoral_quotient,
        barrier_threshold=result.barrier_threshold,
        candidate_min_votes=result.candidate_min_votes,
        total_valid_votes=result.total_valid_votes,
        available_seats=result.available_seats,
        seats_distributed_by_quotient=result.seats_distributed_by_quotient,
        seats_distributed_by_remainder=result.seats_distributed_by_remainder,
        no_party_reached_qe=result.no_party_reached_qe,
        party_results=[
            PartyItem(
                **p.to_dict(exclude={"candidates"}),
                candidates=[CandidateItem(**c.to_dict(exclude={"party_id"})) for c in p.candidates],
            )
            for p in result.party_results
        ],
        federation_results=[FederationItem(**f.to_dict()) for f in result.federation_results],
        has_federations=bool(result.federation_results),
        calculation_log=CalculationLogItem(**log.to_dict()),
        warnings=result.warnings,
        rules_applied=result.rules_applied,
    )


def get_apportionment(result_id: str) -> dict:
    """Stored apportionment document."""
    data = container.results.get_apportionment(result_id)
    if data is None:
        raise NotFoundError(f"Apportionment {result_id} not found")
    return data
