"""Tests for the bounded hash history."""

import sys
from pathlib import Path

import pytest

# Add server to path
sys.path.insert(0, str(Path(__file__).parent))

from hashgait.services.hash_history import HashHistory, iso_now, sha256_hex


def test_sha256_known_digest():
    assert sha256_hex("abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def test_history_keeps_newest_first_and_evicts_oldest():
    history = HashHistory(max_size=5)

    for i in range(7):
        history.record(f"payload-{i}")

    entries = history.entries()
    assert len(entries) == 5
    assert [e.gait_data for e in entries] == [f"payload-{i}" for i in (6, 5, 4, 3, 2)]
    assert history.total_generated == 7


def test_entry_ids_strictly_increase():
    history = HashHistory(max_size=5)

    ids = [history.add("h", "d").id for _ in range(20)]

    assert ids == sorted(ids)
    assert len(set(ids)) == len(ids)


def test_record_hashes_payload():
    history = HashHistory()

    entry = history.record("abc")

    assert entry.hash == sha256_hex("abc")
    assert entry.timestamp.endswith("Z")


def test_clear_keeps_lifetime_total():
    history = HashHistory(max_size=2)
    history.record("a")
    history.record("b")

    history.clear()

    assert len(history) == 0
    assert history.total_generated == 2


def test_non_positive_size_rejected():
    with pytest.raises(ValueError):
        HashHistory(max_size=0)


def test_iso_now_has_millisecond_precision():
    stamp = iso_now()

    assert stamp.endswith("Z")
    assert len(stamp.split(".")[-1]) == 4
