"""Apportionment services - seat allocation and candidate ranking."""

from app.services.apportionment.engine import RULES_APPLIED, ApportionmentEngine
from app.services.apportionment.service import ApportionmentService

__all__ = [
    "ApportionmentEngine",
    "ApportionmentService",
    "RULES_APPLIED",
]
