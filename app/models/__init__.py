"""Models package - DDL and entities for all domains."""

from app.models.apportionment import APPORTIONMENT_RESULT_DDL
from app.models.common import BaseEntity
from app.models.forecast import FORECAST_RUN_DDL, HISTORICAL_VOTE_DDL

ALL_DDL = [
    # Forecast
    HISTORICAL_VOTE_DDL,
    FORECAST_RUN_DDL,
    # Apportionment
    APPORTIONMENT_RESULT_DDL,
]

__all__ = [
    "BaseEntity",
    "HISTORICAL_VOTE_DDL",
    "FORECAST_RUN_DDL",
    "APPORTIONMENT_RESULT_DDL",
    "ALL_DDL",
]
