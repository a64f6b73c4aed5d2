"""Tests for the selection run orchestrator."""

import json
import logging

import pytest
from tests.conftest import ALICE, BOB, CAROL, DAVE, make_snapshot

from selection.config import SelectionConfig
from selection.engine import run_selection, select_and_publish
from selection.errors import (
    AmbiguousOutcomeError,
    BallotValidationError,
    DataIntegrityError,
    NoBallotsError,
    NoDecisiveContestsError,
    StoreError,
    StrategyDivergenceError,
)
from selection.models import Ballot, BallotSnapshot, Candidate, Publication, RankingEntry
from selection.stores.json_file import JsonFileBallotStore

FOUR_WAY_CYCLE = [
    [ALICE, BOB, CAROL, DAVE],
    [BOB, CAROL, DAVE, ALICE],
    [CAROL, DAVE, ALICE, BOB],
    [DAVE, ALICE, BOB, CAROL],
]

CONDORCET = [[ALICE, BOB, CAROL], [ALICE, CAROL, BOB], [ALICE, BOB, CAROL]]


class TestRunSelection:
    def test_four_way_cycle_produces_one_winner(self):
        result = run_selection(make_snapshot(4, FOUR_WAY_CYCLE))
        assert result.winner == ALICE
        assert [(r.rank, r.candidate_id) for r in result.final_ranking] == [
            (1, ALICE), (2, BOB), (3, CAROL), (4, DAVE),
        ]
        assert result.tally[(ALICE, BOB)] == 3
        assert result.tally[(BOB, ALICE)] == 1

    def test_four_way_cycle_records_divergence(self):
        result = run_selection(make_snapshot(4, FOUR_WAY_CYCLE))
        assert result.divergence is not None
        assert result.divergence.alternate_winner is None
        assert result.alternate.survivors == (ALICE, CAROL)

    def test_divergence_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="selection"):
            run_selection(make_snapshot(4, FOUR_WAY_CYCLE))
        assert "Strategy divergence" in caplog.text

    def test_strict_cross_check_raises_on_divergent_winner(self):
        config = SelectionConfig(cross_check="strict")
        with pytest.raises(StrategyDivergenceError) as exc_info:
            run_selection(make_snapshot(4, FOUR_WAY_CYCLE), config)
        assert exc_info.value.divergence.canonical_winner == ALICE

    def test_strict_cross_check_allows_ranking_only_difference(self):
        config = SelectionConfig(cross_check="strict")
        result = run_selection(make_snapshot(3, CONDORCET), config)
        assert result.winner == ALICE
        assert result.divergence is not None
        assert not result.divergence.winners_differ

    def test_cross_check_off(self):
        config = SelectionConfig(cross_check="off")
        result = run_selection(make_snapshot(4, FOUR_WAY_CYCLE), config)
        assert result.divergence is None
        assert result.alternate is None

    def test_elimination_strategy_ambiguous(self):
        config = SelectionConfig(strategy="elimination")
        with pytest.raises(AmbiguousOutcomeError) as exc_info:
            run_selection(make_snapshot(4, FOUR_WAY_CYCLE), config)
        assert exc_info.value.survivors == (ALICE, CAROL)

    def test_elimination_strategy_with_lock_graph_cross_check(self):
        config = SelectionConfig(strategy="elimination")
        result = run_selection(make_snapshot(3, CONDORCET), config)
        assert result.resolution.strategy == "elimination"
        assert result.alternate.strategy == "lock_graph"
        assert result.winner == ALICE

    def test_no_ballots(self):
        """Zero ballots is a failure, never a placeholder winner."""
        with pytest.raises(NoBallotsError, match="No votes"):
            run_selection(make_snapshot(3, []))

    def test_all_pairs_tied(self):
        with pytest.raises(NoDecisiveContestsError):
            run_selection(make_snapshot(3, [[[ALICE, BOB, CAROL]], [ALICE]]))

    def test_inactive_candidate_aborts_run(self):
        snapshot = make_snapshot(3, [[ALICE, BOB], [CAROL, ALICE]], inactive=(CAROL,))
        with pytest.raises(DataIntegrityError):
            run_selection(snapshot)

    def test_malformed_ballot_aborts_run(self):
        snapshot = BallotSnapshot(
            reference_point="1",
            candidates=make_snapshot(2, []).candidates,
            ballots=(Ballot("7001", (RankingEntry(ALICE, True), RankingEntry(BOB))),),
        )
        with pytest.raises(BallotValidationError):
            run_selection(snapshot)

    def test_partial_ranking_only_ranks_compared_candidates(self):
        result = run_selection(make_snapshot(4, [[CAROL, ALICE]]))
        assert [r.candidate_id for r in result.final_ranking] == [CAROL, ALICE]
        assert result.get_rank(BOB) is None

    def test_idempotent(self):
        snapshot = make_snapshot(4, FOUR_WAY_CYCLE + [[[DAVE, BOB], ALICE], [CAROL]])
        first = run_selection(snapshot)
        second = run_selection(snapshot)
        assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())

    def test_parallel_workers_same_result(self):
        snapshot = make_snapshot(4, FOUR_WAY_CYCLE * 3)
        sequential = run_selection(snapshot)
        parallel = run_selection(snapshot, SelectionConfig(workers=2))
        assert parallel.to_dict() == sequential.to_dict()

    def test_result_mappings_are_read_only(self):
        result = run_selection(make_snapshot(3, CONDORCET))
        with pytest.raises(TypeError):
            result.tally[(ALICE, BOB)] = 0
        with pytest.raises(TypeError):
            result.candidate_names[ALICE] = "Mallory"
        assert result.tally[(ALICE, BOB)] == 3
        assert result.candidate_names[ALICE] == "Alice"

    def test_to_dict(self):
        data = run_selection(make_snapshot(3, CONDORCET)).to_dict()
        assert data["winner"] == ALICE
        assert data["winnerName"] == "Alice"
        assert data["numBallots"] == 3
        assert data["pairwiseTallies"]["1-2"] == 3
        assert data["rankedPairs"][0] == {
            "winner": ALICE, "loser": BOB, "margin": 3, "winnerVotes": 3, "loserVotes": 0,
        }
        assert data["resolution"]["lockedPairs"] == [[1, 2], [1, 3], [2, 3]]


class TestSelectAndPublish:
    def setup_method(self):
        self.clock = lambda: 1700000000.5

    def make_store(self, tmp_path, snapshot):
        store = JsonFileBallotStore(tmp_path)
        store.write_snapshot(snapshot)
        return store

    def test_publishes_winner(self, tmp_path):
        store = self.make_store(tmp_path, make_snapshot(3, CONDORCET, reference_point="42"))
        result, publication = select_and_publish(store, "42", clock=self.clock)
        assert publication == Publication((ALICE,), "42", 1700000000)
        assert store.get_selection("42") == publication
        assert result.winner == ALICE

    def test_publishes_full_ranking(self, tmp_path):
        store = self.make_store(tmp_path, make_snapshot(4, FOUR_WAY_CYCLE, reference_point="42"))
        config = SelectionConfig(publish_full_ranking=True)
        _, publication = select_and_publish(store, "42", config, clock=self.clock)
        assert publication.selected_candidates == (ALICE, BOB, CAROL, DAVE)

    def test_rerun_is_idempotent(self, tmp_path):
        store = self.make_store(tmp_path, make_snapshot(3, CONDORCET, reference_point="42"))
        _, first = select_and_publish(store, "42", clock=self.clock)
        _, second = select_and_publish(store, "42", clock=lambda: 1800000000)
        assert second == first

    def test_conflicting_publication_rejected(self, tmp_path):
        store = self.make_store(tmp_path, make_snapshot(3, CONDORCET, reference_point="42"))
        store.record_selection(Publication((BOB,), "42", 1))
        with pytest.raises(StoreError, match="already recorded"):
            select_and_publish(store, "42", clock=self.clock)

    def test_failed_run_does_not_publish(self, tmp_path):
        store = self.make_store(tmp_path, make_snapshot(3, [], reference_point="42"))
        with pytest.raises(NoBallotsError):
            select_and_publish(store, "42", clock=self.clock)
        assert store.get_selection("42") is None

    def test_candidate_zero_in_store_does_not_publish(self, tmp_path):
        snapshot = BallotSnapshot(
            reference_point="42",
            candidates=(Candidate(0, "Nobody"), Candidate(ALICE, "Alice")),
            ballots=(Ballot.from_groups("7001", [0, ALICE]),),
        )
        store = self.make_store(tmp_path, snapshot)
        with pytest.raises(DataIntegrityError, match="candidate id 0"):
            select_and_publish(store, "42", clock=self.clock)
        assert store.get_selection("42") is None

    def test_strict_divergence_does_not_publish(self, tmp_path):
        store = self.make_store(tmp_path, make_snapshot(4, FOUR_WAY_CYCLE, reference_point="42"))
        with pytest.raises(StrategyDivergenceError):
            select_and_publish(store, "42", SelectionConfig(cross_check="strict"), clock=self.clock)
        assert store.get_selection("42") is None
