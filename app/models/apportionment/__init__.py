"""Apportionment domain models - registries, tallies and seat results."""

from app.models.apportionment.entities import (
    ApportionmentResult,
    CalculationLog,
    CandidateResult,
    EntityResult,
    EntityType,
    FederationResult,
    PartyResult,
)
from app.models.apportionment.registry import (
    AllianceType,
    Candidate,
    ElectoralAlliance,
    Party,
    VoteTally,
)
from app.models.apportionment.tables import APPORTIONMENT_RESULT_DDL

__all__ = [
    "APPORTIONMENT_RESULT_DDL",
    "AllianceType",
    "ApportionmentResult",
    "CalculationLog",
    "Candidate",
    "CandidateResult",
    "ElectoralAlliance",
    "EntityResult",
    "EntityType",
    "FederationResult",
    "Party",
    "PartyResult",
    "VoteTally",
]
