"""Finished apportionment results table."""

APPORTIONMENT_RESULT_DDL = """
CREATE TABLE IF NOT EXISTS apportionment_result (
    id VARCHAR PRIMARY KEY,
    scenario_id INTEGER,
    available_seats INTEGER NOT NULL,
    electoral_quotient INTEGER NOT NULL,
    data JSON NOT NULL,
    computed_at TIMESTAMP NOT NULL
)
"""
