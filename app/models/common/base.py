"""Base entity class for all domain entities."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class BaseEntity:
    """Base class for all entities."""

    def to_dict(self, exclude: set[str] | None = None) -> dict[str, Any]:
        """Convert entity to dictionary, dropping top-level `exclude` keys."""
        data = asdict(self)
        for key in exclude or ():
            data.pop(key, None)
        return data
