"""Historical vote ETL - bulk load party totals into the database."""

from pathlib import Path

import duckdb
import polars as pl
from loguru import logger

from app.models.forecast import HistoricalVoteRecord

HISTORY_SCHEMA = {
    "year": pl.Int32,
    "party": pl.Utf8,
    "state": pl.Utf8,
    "position": pl.Utf8,
    "total_votes": pl.Int64,
    "candidate_count": pl.Int32,
}


def records_frame(records: list[HistoricalVoteRecord] | list[dict]) -> pl.DataFrame:
    """Frame in `historical_vote` column order."""
    rows = [r.to_dict() if isinstance(r, HistoricalVoteRecord) else r for r in records]
    return pl.DataFrame(
        [{col: row.get(col) for col in HISTORY_SCHEMA} for row in rows],
        schema=HISTORY_SCHEMA,
    ).with_columns(pl.col("candidate_count").fill_null(0))


def read_history_file(path: str | Path) -> pl.DataFrame:
    """CSV or Parquet export with the `historical_vote` columns."""
    path = Path(path)
    if path.suffix == ".parquet":
        df = pl.read_parquet(path)
    else:
        df = pl.read_csv(path)

    missing = {"year", "party", "total_votes"} - set(df.columns)
    if missing:
        raise ValueError(f"{path.name} is missing columns: {sorted(missing)}")

    for col in HISTORY_SCHEMA:
        if col not in df.columns:
            df = df.with_columns(pl.lit(None).alias(col))
    return df.select([pl.col(c).cast(t) for c, t in HISTORY_SCHEMA.items()]).with_columns(
        pl.col("candidate_count").fill_null(0)
    )


def load_history(conn: duckdb.DuckDBPyConnection, df: pl.DataFrame, replace: bool = True) -> int:
    """Insert rows; with `replace`, rows for the same years are deleted first."""
    if df.is_empty():
        logger.warning("No historical rows to load")
        return 0

    years = df["year"].unique().sort().to_list()
    conn.execute("BEGIN TRANSACTION")
    try:
        if replace:
            conn.execute(f"DELETE FROM historical_vote WHERE year IN ({', '.join('?' for _ in years)})", years)
        conn.register("history_df", df)
        conn.execute("INSERT INTO historical_vote SELECT * FROM history_df")
        conn.unregister("history_df")
        conn.execute("COMMIT")
    except Exception:
        conn.execute("ROLLBACK")
        raise

    logger.info("Historical votes: {} rows for years {}", df.height, years)
    return df.height
