"""Historical vote and forecast run tables."""

HISTORICAL_VOTE_DDL = """
CREATE TABLE IF NOT EXISTS historical_vote (
    year INTEGER NOT NULL,
    party VARCHAR NOT NULL,
    state VARCHAR,
    position VARCHAR,
    total_votes BIGINT NOT NULL,
    candidate_count INTEGER DEFAULT 0
)
"""

FORECAST_RUN_DDL = """
CREATE TABLE IF NOT EXISTS forecast_run (
    id VARCHAR PRIMARY KEY,
    name VARCHAR,
    target_year INTEGER NOT NULL,
    status VARCHAR NOT NULL,
    data JSON NOT NULL,
    completed_at TIMESTAMP
)
"""
