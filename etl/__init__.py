"""ETL package - load historical results into the database."""

from etl.history import load_history, read_history_file, records_frame
from etl.validation import validate_history

__all__ = [
    "load_history",
    "read_history_file",
    "records_frame",
    "validate_history",
]
