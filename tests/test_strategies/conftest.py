"""Shared fixtures for resolution strategy tests."""

import pytest
from tests.conftest import ALICE, BOB, CAROL, DAVE, make_snapshot


@pytest.fixture
def four_way_cycle():
    """Four ballots, 4 candidates, cyclic majority.

        Ballot 1: Alice > Bob > Carol > Dave
        Ballot 2: Bob > Carol > Dave > Alice
        Ballot 3: Carol > Dave > Alice > Bob
        Ballot 4: Dave > Alice > Bob > Carol

    Alice>Bob, Bob>Carol, Carol>Dave and Dave>Alice are each 3-1.
    Alice/Carol and Bob/Dave are 2-2 and produce no contest.
    """
    return make_snapshot(4, [
        [ALICE, BOB, CAROL, DAVE],
        [BOB, CAROL, DAVE, ALICE],
        [CAROL, DAVE, ALICE, BOB],
        [DAVE, ALICE, BOB, CAROL],
    ])


@pytest.fixture
def clear_winner():
    """Three ballots, 4 candidates, no cycle.

        Ballot 1: Alice > Bob > Carol > Dave
        Ballot 2: Alice > Carol > Bob > Dave
        Ballot 3: Bob > Alice > Carol > Dave

    Margins: A>C, A>D, B>D, C>D are 3-0; A>B and B>C are 2-1.
    """
    return make_snapshot(4, [
        [ALICE, BOB, CAROL, DAVE],
        [ALICE, CAROL, BOB, DAVE],
        [BOB, ALICE, CAROL, DAVE],
    ])


@pytest.fixture
def condorcet_winner():
    """Alice beats everyone 3-0; Bob beats Carol 2-1."""
    return make_snapshot(3, [
        [ALICE, BOB, CAROL],
        [ALICE, CAROL, BOB],
        [ALICE, BOB, CAROL],
    ])


@pytest.fixture
def perfect_cycle():
    """Three ballots, 3 candidates: Alice>Bob, Bob>Carol, Carol>Alice, all 2-1."""
    return make_snapshot(3, [
        [ALICE, BOB, CAROL],
        [BOB, CAROL, ALICE],
        [CAROL, ALICE, BOB],
    ])


@pytest.fixture
def weighted_cycle():
    """Nine ballots, 3 candidates, cycle with unequal margins.

        2x Alice > Bob > Carol
        1x Bob > Alice > Carol
        3x Bob > Carol > Alice
        3x Carol > Alice > Bob

    Alice>Bob 5-4 (margin 1), Bob>Carol 6-3 (margin 3), Carol>Alice 6-3 (margin 3).
    """
    return make_snapshot(3, (
        [[ALICE, BOB, CAROL]] * 2
        + [[BOB, ALICE, CAROL]]
        + [[BOB, CAROL, ALICE]] * 3
        + [[CAROL, ALICE, BOB]] * 3
    ))
