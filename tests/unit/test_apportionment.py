"""Tests for the apportionment engine."""

import random

import pytest

from app.errors import DegenerateQuotientError, InvalidScenarioError
from app.models.apportionment import (
    AllianceType,
    Candidate,
    ElectoralAlliance,
    Party,
    VoteTally,
)
from app.services.apportionment import ApportionmentEngine, ApportionmentService
from src import formulas


def parties(*ids: int) -> list[Party]:
    return [Party(id=i, name=f"Party {i}", abbreviation=f"P{i}") for i in ids]


def seats_of(result) -> dict[str, int]:
    return {e.name: e.total_seats for e in result.entity_results}


class TestThresholds:
    def test_reference_scenario(self):
        engine = ApportionmentEngine(parties(1), [])
        result = engine.calculate(1000, 10, VoteTally(party_votes={1: 1000}))
        assert result.electoral_quotient == 100
        assert result.barrier_threshold == 80
        assert result.candidate_min_votes == 20

    def test_log_records_thresholds(self):
        engine = ApportionmentEngine(parties(1), [])
        log = engine.calculate(1000, 10, VoteTally(party_votes={1: 1000})).calculation_log
        assert log.steps[0] == "EQ = floor(1000 / 10) = 100"
        assert "80 votes" in log.steps[1]
        assert "20 votes" in log.steps[2]


class TestValidation:
    def test_zero_seats(self):
        with pytest.raises(InvalidScenarioError):
            ApportionmentEngine(parties(1), []).calculate(1000, 0, VoteTally())

    def test_votes_below_seats(self):
        with pytest.raises(InvalidScenarioError):
            ApportionmentEngine(parties(1), []).calculate(5, 10, VoteTally(party_votes={1: 5}))

    def test_no_votes_at_all(self):
        with pytest.raises(InvalidScenarioError):
            ApportionmentEngine(parties(1, 2), []).calculate(1000, 10, VoteTally())

    def test_degenerate_quotient(self, monkeypatch):
        monkeypatch.setattr(formulas, "electoral_quotient", lambda votes, seats: 0)
        with pytest.raises(DegenerateQuotientError):
            ApportionmentEngine(parties(1), []).calculate(1000, 10, VoteTally(party_votes={1: 1000}))


class TestSeatDistribution:
    def test_quotient_and_remainder(self):
        engine = ApportionmentEngine(parties(1, 2, 3, 4), [])
        result = engine.calculate(1000, 10, VoteTally(party_votes={1: 450, 2: 300, 3: 170, 4: 80}))

        assert result.seats_distributed_by_quotient == 8
        assert result.seats_distributed_by_remainder == 2
        assert seats_of(result) == {"Party 1": 5, "Party 2": 3, "Party 3": 2, "Party 4": 0}
        assert not result.no_party_reached_qe

    def test_barrier_excludes_from_remainder(self):
        ids = list(range(1, 11))
        votes = {i: 100 for i in ids[:9]} | {10: 79}
        engine = ApportionmentEngine(parties(*ids), [])
        # Party 10 averages 79 against 50 for the others, but is below the 80-vote barrier
        result = engine.calculate(1000, 10, VoteTally(party_votes=votes))

        assert seats_of(result)["Party 10"] == 0
        assert seats_of(result)["Party 1"] == 2
        party10 = next(e for e in result.entity_results if e.name == "Party 10")
        assert not party10.meets_barrier
        assert party10.barrier_detail.startswith("Below barrier")

    def test_tie_goes_to_more_raw_votes(self):
        # Party 2: 300/(3+1) = 75, Party 1: 150/(1+1) = 75
        engine = ApportionmentEngine(parties(1, 2, 3, 4, 5, 6, 7), [])
        votes = {1: 150, 2: 300, 3: 100, 4: 100, 5: 100, 6: 100, 7: 100}
        result = engine.calculate(1000, 10, VoteTally(party_votes=votes))

        assert result.seats_distributed_by_remainder == 1
        assert seats_of(result)["Party 2"] == 4
        assert seats_of(result)["Party 1"] == 1

    def test_full_tie_uses_registration_order(self):
        engine = ApportionmentEngine(parties(7, 3), [])
        result = engine.calculate(100, 3, VoteTally(party_votes={3: 50, 7: 50}))

        # EQ 33: one quotient seat each, remainder tied on average and votes
        assert seats_of(result) == {"Party 7": 2, "Party 3": 1}

    def test_no_party_reached_quotient(self):
        engine = ApportionmentEngine(parties(1, 2, 3), [])
        result = engine.calculate(1000, 10, VoteTally(party_votes={1: 90, 2: 60, 3: 40}))

        assert result.no_party_reached_qe
        assert result.seats_distributed_by_quotient == 0
        assert result.seats_distributed_by_remainder == 10
        assert seats_of(result) == {"Party 1": 5, "Party 2": 3, "Party 3": 2}
        assert result.warnings

    def test_quotient_overflow_is_capped(self):
        engine = ApportionmentEngine(parties(1, 2), [])
        result = engine.calculate(19, 10, VoteTally(party_votes={1: 12, 2: 7}))

        assert sum(seats_of(result).values()) == 10
        assert seats_of(result) == {"Party 1": 6, "Party 2": 4}
        assert any("exceed" in w for w in result.warnings)

    def test_seat_total_is_exact(self):
        rng = random.Random(2024)
        for _ in range(300):
            n = rng.randint(1, 8)
            ids = list(range(1, n + 1))
            votes = {i: rng.choice([0, rng.randint(1, 50), rng.randint(1, 5000)]) for i in ids}
            if not any(votes.values()):
                votes[1] = 1
            seats = rng.randint(1, 40)
            valid = max(sum(votes.values()) + rng.randint(0, 200), seats)

            alliances = []
            if n >= 3 and rng.random() < 0.5:
                alliances.append(ElectoralAlliance(99, "Fed", AllianceType.FEDERATION, ids[:2]))

            result = ApportionmentEngine(parties(*ids), [], alliances).calculate(
                valid, seats, VoteTally(party_votes=votes)
            )
            assert sum(e.total_seats for e in result.entity_results) == seats


class TestFederations:
    @pytest.fixture
    def result(self):
        candidates = [
            Candidate(101, "Ana", 1),
            Candidate(102, "Bruno", 1),
            Candidate(103, "Carla", 1),
            Candidate(201, "Davi", 2),
            Candidate(202, "Elisa", 2),
            Candidate(203, "Fabio", 2),
            Candidate(204, "Gabi", 2),
            Candidate(205, "Hugo", 2),
            Candidate(301, "Iris", 3),
            Candidate(302, "Joao", 3),
            Candidate(303, "Katia", 3, nickname="Kati"),
        ]
        candidate_votes = {
            101: 200, 102: 50, 103: 10,
            201: 180, 202: 150, 203: 100, 204: 90, 205: 15,
            301: 400, 302: 19, 303: 30,
        }
        alliances = [
            ElectoralAlliance(10, "Federation F", AllianceType.FEDERATION, [1, 2]),
            ElectoralAlliance(20, "Coalition C", AllianceType.COALITION, [3]),
        ]
        engine = ApportionmentEngine(parties(1, 2, 3), candidates, alliances)
        tally = VoteTally(party_votes={1: 300, 2: 250, 3: 450}, candidate_votes=candidate_votes)
        return engine.calculate(1000, 10, tally)

    def test_federation_pools_votes(self, result):
        fed = result.federation_results[0]
        assert fed.total_votes == 550
        assert fed.seats_from_quotient == 5
        assert fed.seats_from_remainder == 1
        assert fed.total_seats == 6
        assert seats_of(result)["Party 3"] == 4

    def test_member_seats_tracked_per_party(self, result):
        by_party = {p.party_id: p for p in result.party_results}
        assert by_party[1].total_seats == 2
        assert by_party[2].total_seats == 4
        assert by_party[1].federation_name == "Federation F"
        assert {c.candidate_id for c in by_party[1].elected} == {101, 102}

    def test_pooled_ranking_order(self, result):
        elected = [c for p in result.party_results if p.federation_id == 10 for c in p.elected]
        by_position = sorted(elected, key=lambda c: c.position)
        assert [c.candidate_id for c in by_position] == [101, 201, 202, 203, 204, 102]

    def test_no_candidate_below_minimum_elected(self, result):
        for p in result.party_results:
            for c in p.candidates:
                if c.votes < result.candidate_min_votes:
                    assert not c.elected
                    assert c.below_min_threshold

    def test_unfilled_seats_reported(self, result):
        party3 = next(p for p in result.party_results if p.party_id == 3)
        assert [c.candidate_id for c in party3.elected] == [301, 303]
        assert party3.elected[1].name == "Kati"
        assert any("2 seat(s) without an eligible candidate" in w for w in result.warnings)

    def test_coalition_does_not_pool(self, result):
        assert len(result.federation_results) == 1
        assert any("Coalition C" in d for d in result.calculation_log.decisions)

    def test_party_results_sorted_by_seats(self, result):
        seats = [p.total_seats for p in result.party_results]
        assert seats == sorted(seats, reverse=True)


class TestCandidateRanking:
    def test_ties_broken_by_id(self):
        candidates = [Candidate(5, "E", 1), Candidate(2, "B", 1), Candidate(9, "I", 1)]
        engine = ApportionmentEngine(parties(1), candidates)
        tally = VoteTally(party_votes={1: 1000}, candidate_votes={5: 300, 2: 300, 9: 300})
        result = engine.calculate(1000, 2, tally)

        elected = sorted(result.party_results[0].elected, key=lambda c: c.position)
        assert [c.candidate_id for c in elected] == [2, 5]


class FakeResults:
    def __init__(self):
        self.saved = []

    def save_apportionment(self, result, scenario_id=None):
        self.saved.append((result, scenario_id))
        return "abc"


class TestService:
    def test_persists_result(self):
        repo = FakeResults()
        result, result_id = ApportionmentService(results=repo).calculate(
            1000, 10, VoteTally(party_votes={1: 1000}), parties(1), [], scenario_id=3
        )
        assert result_id == "abc"
        assert repo.saved == [(result, 3)]

    def test_without_repository(self):
        _, result_id = ApportionmentService().calculate(1000, 10, VoteTally(party_votes={1: 1000}), parties(1), [])
        assert result_id is None
