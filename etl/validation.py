"""Data validation functions."""

import duckdb


def validate_history(conn: duckdb.DuckDBPyConnection, position: str | None = None) -> dict:
    """Check the historical feed is usable for trends and swing detection."""
    issues = []
    stats = {}
    where, params = ("WHERE position = ?", [position]) if position else ("", [])

    row = conn.execute(
        f"""
        SELECT COUNT(*), COUNT(DISTINCT year), COUNT(DISTINCT party), COUNT(DISTINCT state),
               SUM(CASE WHEN total_votes <= 0 THEN 1 ELSE 0 END)
        FROM historical_vote {where}
        """,
        params,
    ).fetchone()
    stats["rows"] = row[0]
    stats["years"] = row[1]
    stats["parties"] = row[2]
    stats["regions"] = row[3]
    zero_rows = row[4] or 0

    if stats["rows"] == 0:
        issues.append("No historical records found")
    if stats["years"] == 1:
        issues.append("Only one election year; trends and volatility will be zero")
    if zero_rows:
        issues.append(f"{zero_rows} rows have zero or negative votes")

    thin = conn.execute(
        f"""
        SELECT year, state FROM historical_vote {where}
        GROUP BY year, state HAVING COUNT(DISTINCT party) < 2 AND state IS NOT NULL
        """,
        params,
    ).fetchall()
    stats["uncontested_regions"] = len(thin)
    if thin:
        issues.append(f"{len(thin)} region-years have fewer than two parties")

    return {
        "position": position,
        "valid": not issues,
        "stats": stats,
        "issues": issues,
    }
