"""Repositories package - data access layer for our database."""

from app.repositories.base import BaseRepository
from app.repositories.db import (
    close_db,
    connect,
    get_db,
    init_tables,
)
from app.repositories.history import HistoryRepository
from app.repositories.results import ResultRepository

__all__ = [
    # DB
    "get_db",
    "close_db",
    "connect",
    "init_tables",
    # Base
    "BaseRepository",
    # Data
    "HistoryRepository",
    "ResultRepository",
]
