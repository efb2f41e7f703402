"""Tests for DuckDB repositories and the historical ETL."""

import threading

import polars as pl
import pytest

from app.models.apportionment import Party, VoteTally
from app.models.forecast import HistoricalVoteRecord, RunStatus
from app.repositories import HistoryRepository, ResultRepository, connect
from app.services.apportionment import ApportionmentEngine
from app.services.forecast import ForecastService
from etl import load_history, read_history_file, records_frame, validate_history


@pytest.fixture
def conn(tmp_path):
    conn = connect(str(tmp_path / "test.duckdb"))
    yield conn
    conn.close()


def rows(*specs):
    return records_frame(
        [
            HistoricalVoteRecord(year=y, party=p, total_votes=v, state=s, position="Deputado Federal")
            for y, p, v, s in specs
        ]
    )


@pytest.fixture
def loaded(conn):
    load_history(
        conn,
        rows(
            (2018, "A", 100, "SP"), (2018, "B", 80, "SP"), (2018, "A", 40, "RJ"),
            (2022, "A", 120, "SP"), (2022, "B", 90, "SP"), (2022, "B", 10, "SP"),
        ),
    )
    return conn


class TestHistoryLoad:
    def test_records_roundtrip(self, loaded):
        records = HistoryRepository(loaded).get_records(years=[2022])
        assert [(r.party, r.total_votes) for r in records] == [("A", 120), ("B", 100)]

    def test_filters(self, loaded):
        repo = HistoryRepository(loaded)
        assert {r.state for r in repo.get_records(state="RJ")} == {"RJ"}
        assert repo.get_records(position="Senador") == []
        assert len(repo.get_records(years=[2018], state="SP", position="Deputado Federal")) == 2

    def test_years_newest_first(self, loaded):
        assert HistoryRepository(loaded).get_years() == [2022, 2018]

    def test_replace_drops_same_years(self, loaded):
        load_history(loaded, rows((2022, "C", 5, "SP")))
        repo = HistoryRepository(loaded)
        assert [r.party for r in repo.get_records(years=[2022])] == ["C"]
        assert repo.get_records(years=[2018])

    def test_append_keeps_rows(self, loaded):
        load_history(loaded, rows((2022, "C", 5, "SP")), replace=False)
        assert len(HistoryRepository(loaded).get_records(years=[2022])) == 3

    def test_empty_frame(self, conn):
        assert load_history(conn, records_frame([])) == 0

    def test_read_csv(self, tmp_path):
        path = tmp_path / "history.csv"
        path.write_text("year,party,total_votes,state\n2022,A,10,SP\n2022,B,20,SP\n")
        df = read_history_file(path)
        assert df.columns == ["year", "party", "state", "position", "total_votes", "candidate_count"]
        assert df["candidate_count"].to_list() == [0, 0]

    def test_read_parquet(self, tmp_path):
        path = tmp_path / "history.parquet"
        pl.DataFrame({"year": [2022], "party": ["A"], "total_votes": [10]}).write_parquet(path)
        assert read_history_file(path).height == 1

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("year,party\n2022,A\n")
        with pytest.raises(ValueError, match="total_votes"):
            read_history_file(path)


class TestValidation:
    def test_valid_feed(self, loaded):
        result = validate_history(loaded)
        assert result["stats"]["years"] == 2
        assert result["stats"]["regions"] == 2
        # RJ 2018 has a single party
        assert result["issues"] == ["1 region-years have fewer than two parties"]

    def test_empty_feed(self, conn):
        result = validate_history(conn, "Senador")
        assert not result["valid"]
        assert "No historical records found" in result["issues"]


class TestResultRepository:
    def test_run_roundtrip(self, conn):
        repo = ResultRepository(conn)
        run = ForecastService.create_run("stored", 2026)
        run.status = RunStatus.COMPLETED
        repo.save_run(run)

        data = repo.get_run(run.id)
        assert data["status"] == "completed"
        assert data["target_year"] == 2026
        assert repo.list_runs(status="completed")[0]["id"] == run.id
        assert repo.list_runs(status="failed") == []

    def test_unfinished_run_rejected(self, conn):
        with pytest.raises(ValueError):
            ResultRepository(conn).save_run(ForecastService.create_run("pending", 2026))

    def test_read_only(self, conn):
        run = ForecastService.create_run("stored", 2026)
        run.status = RunStatus.FAILED
        with pytest.raises(RuntimeError):
            ResultRepository(conn, read_only=True).save_run(run)

    def test_unknown_ids(self, conn):
        repo = ResultRepository(conn)
        assert repo.get_run("missing") is None
        assert repo.get_apportionment("missing") is None

    def test_apportionment_roundtrip(self, conn):
        repo = ResultRepository(conn)
        result = ApportionmentEngine([Party(1, "Party 1")], []).calculate(1000, 10, VoteTally(party_votes={1: 1000}))
        result_id = repo.save_apportionment(result, scenario_id=4)

        data = repo.get_apportionment(result_id)
        assert data["electoral_quotient"] == 100
        assert data["entity_results"][0]["seats_from_quotient"] == 10


class TestSharedConnection:
    def test_repositories_across_threads(self, conn):
        load_history(
            conn,
            rows(*[(year, f"P{i}", 100 + i, "SP") for year in (2018, 2022) for i in range(100)]),
        )
        history = HistoryRepository(conn)
        results = ResultRepository(conn)
        run = ForecastService.create_run("shared", 2026)
        run.status = RunStatus.COMPLETED
        results.save_run(run)

        errors = []

        def read_history():
            try:
                for _ in range(100):
                    count = len(history.get_records(years=[2018, 2022]))
                    if count != 200:
                        errors.append(f"history got {count} rows")
            except Exception as e:
                errors.append(repr(e))

        def read_results():
            try:
                for _ in range(100):
                    if results.get_run(run.id)["id"] != run.id:
                        errors.append("wrong run")
                    results.list_runs()
            except Exception as e:
                errors.append(repr(e))

        threads = [threading.Thread(target=read_history), threading.Thread(target=read_results)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=60)

        assert errors == []
