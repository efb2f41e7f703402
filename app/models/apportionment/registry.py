"""Party, candidate and alliance registry entities (read-only inputs)."""

from dataclasses import dataclass, field
from enum import Enum

from app.models.common import BaseEntity


class AllianceType(str, Enum):
    COALITION = "coalition"
    FEDERATION = "federation"


@dataclass
class Party(BaseEntity):
    """Registered party."""

    id: int
    name: str
    abbreviation: str = ""
    number: int | None = None


@dataclass
class Candidate(BaseEntity):
    """Registered candidate attributed to one party."""

    id: int
    name: str
    party_id: int
    number: int | None = None
    nickname: str | None = None

    @property
    def display_name(self) -> str:
        return self.nickname or self.name


@dataclass
class ElectoralAlliance(BaseEntity):
    """Coalition or federation of parties."""

    id: int
    name: str
    type: AllianceType
    member_party_ids: list[int] = field(default_factory=list)

    @property
    def is_federation(self) -> bool:
        return AllianceType(self.type) is AllianceType.FEDERATION


@dataclass
class VoteTally(BaseEntity):
    """Votes of a single calculation request."""

    party_votes: dict[int, int] = field(default_factory=dict)
    candidate_votes: dict[int, int] = field(default_factory=dict)
