"""Result repository - finished forecast runs and apportionments, written once."""

import json
import uuid
from datetime import datetime, timezone

from loguru import logger

from app.models.apportionment import ApportionmentResult
from app.models.forecast import ForecastRun
from app.repositories.base import BaseRepository


def _dumps(data: dict) -> str:
    return json.dumps(data, default=str)


def _naive_utc(ts: datetime | None) -> datetime | None:
    """TIMESTAMP columns hold naive UTC."""
    if ts is None:
        return None
    return ts.astimezone(timezone.utc).replace(tzinfo=None) if ts.tzinfo else ts


class ResultRepository(BaseRepository):
    """Stores terminal results as JSON documents."""

    def save_run(self, run: ForecastRun) -> None:
        """Persist a finished run; unfinished runs are rejected."""
        self._require_writable()
        if not run.finished:
            raise ValueError(f"Run {run.id} is {run.status.value}; only finished runs are stored")

        self.execute(
            """
            INSERT OR REPLACE INTO forecast_run (id, name, target_year, status, data, completed_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [run.id, run.name, run.target_year, run.status.value, _dumps(run.to_dict()), _naive_utc(run.completed_at)],
        )
        logger.debug("Run saved: id={}, status={}", run.id, run.status.value)

    def get_run(self, run_id: str) -> dict | None:
        row = self.fetchone("SELECT data FROM forecast_run WHERE id = ?", [run_id])
        return json.loads(row[0]) if row else None

    def list_runs(self, status: str | None = None) -> list[dict]:
        """Run headers, newest first."""
        query = "SELECT id, name, target_year, status, completed_at FROM forecast_run"
        params = None
        if status:
            query += " WHERE status = ?"
            params = [status]
        rows = self.fetchall(query + " ORDER BY completed_at DESC", params)
        return [
            {"id": r[0], "name": r[1], "target_year": r[2], "status": r[3], "completed_at": r[4]}
            for r in rows
        ]

    def save_apportionment(self, result: ApportionmentResult, scenario_id: int | None = None) -> str:
        """Persist an apportionment and return its id."""
        self._require_writable()
        result_id = uuid.uuid4().hex
        self.execute(
            """
            INSERT INTO apportionment_result (id, scenario_id, available_seats, electoral_quotient, data, computed_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                result_id,
                scenario_id,
                result.available_seats,
                result.electoral_quotient,
                _dumps(result.to_dict()),
                _naive_utc(datetime.now(timezone.utc)),
            ],
        )
        logger.debug("Apportionment saved: id={}, scenario={}", result_id, scenario_id)
        return result_id

    def get_apportionment(self, result_id: str) -> dict | None:
        row = self.fetchone("SELECT data FROM apportionment_result WHERE id = ?", [result_id])
        return json.loads(row[0]) if row else None
