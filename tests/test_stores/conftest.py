"""Shared fixtures for ballot store tests."""

import pytest

SNAPSHOT = {
    "referencePoint": "18250000",
    "candidates": [
        {"id": 1, "name": "Alice", "description": "Progressive candidate", "active": True},
        {"id": 2, "name": "Bob", "description": "Conservative candidate", "active": True},
        {"id": 3, "name": "Carol", "description": "Independent candidate", "active": True},
    ],
    "ballots": [
        {"voterId": "7001", "ranking": [
            {"candidateId": 1, "tiedWithPrevious": False},
            {"candidateId": 2, "tiedWithPrevious": False},
            {"candidateId": 3, "tiedWithPrevious": False},
        ]},
        {"voterId": "7002", "ranking": [
            {"candidateId": 2, "tiedWithPrevious": False},
            {"candidateId": 1, "tiedWithPrevious": True},
            {"candidateId": 3, "tiedWithPrevious": False},
        ]},
    ],
}


@pytest.fixture
def snapshot_data():
    return {
        "referencePoint": SNAPSHOT["referencePoint"],
        "candidates": [dict(c) for c in SNAPSHOT["candidates"]],
        "ballots": [
            {"voterId": b["voterId"], "ranking": [dict(e) for e in b["ranking"]]}
            for b in SNAPSHOT["ballots"]
        ],
    }
