"""Apportionment API."""

from web.api.apportionment.views import calculate_seats, get_apportionment

__all__ = [
    "calculate_seats",
    "get_apportionment",
]
