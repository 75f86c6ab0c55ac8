"""
Tests for the identity-preserving child reconciliation.
"""

import random
from types import SimpleNamespace

import pytest

from updatabletree.aio.core import reconcile_children


def items(*keys):
    return [SimpleNamespace(id=key) for key in keys]


def ids(entries):
    return [entry.id for entry in entries]


class TestReconcileChildren:
    """Test the merge rules of reconcile_children."""

    def test_same_keys_reports_unchanged_and_keeps_old_list(self):
        old = items("A", "B", "C")
        new = items("A", "B", "C")

        changed, merged = reconcile_children(old, new)

        assert changed is False
        assert merged is old

    def test_reordering_is_not_a_change(self):
        old = items("A", "B", "C")
        new = items("C", "B", "A")

        changed, merged = reconcile_children(old, new)

        assert changed is False
        assert merged is old
        assert ids(merged) == ["A", "B", "C"]

    def test_removal_and_addition(self):
        old = items("A", "B")
        new = items("B", "C")

        changed, merged = reconcile_children(old, new)

        assert changed is True
        assert ids(merged) == ["B", "C"]
        assert merged[0] is old[1]
        assert merged[1] is new[1]

    def test_removal_only(self):
        old = items("A", "B", "C")

        changed, merged = reconcile_children(old, items("C"))

        assert changed is True
        assert merged == [old[2]]

    def test_additions_are_appended_in_fetch_order(self):
        old = items("B")
        new = items("D", "B", "A")

        changed, merged = reconcile_children(old, new)

        assert changed is True
        assert ids(merged) == ["B", "D", "A"]

    def test_empty_sequences(self):
        old = []
        changed, merged = reconcile_children(old, [])
        assert changed is False
        assert merged is old

        changed, merged = reconcile_children([], items("A"))
        assert changed is True
        assert ids(merged) == ["A"]

        changed, merged = reconcile_children(items("A"), [])
        assert changed is True
        assert merged == []

    def test_field_changes_on_same_key_are_not_detected(self):
        old = [SimpleNamespace(id="A", status="open")]
        new = [SimpleNamespace(id="A", status="closed")]

        changed, merged = reconcile_children(old, new)

        assert changed is False
        assert merged[0].status == "open"

    def test_does_not_mutate_inputs(self):
        old = items("A", "B")
        new = items("B", "C")
        old_before, new_before = list(old), list(new)

        reconcile_children(old, new)

        assert old == old_before
        assert new == new_before

    def test_custom_key(self):
        old = [{"key": 1}, {"key": 2}]
        new = [{"key": 2}, {"key": 3}]

        changed, merged = reconcile_children(old, new, key=lambda entry: entry["key"])

        assert changed is True
        assert merged[0] is old[1]
        assert merged[1] is new[1]


@pytest.mark.parametrize("seed", range(20))
def test_kept_entries_are_always_the_old_objects(seed):
    """Random old/new sequences: shared keys keep old instances, key set follows new."""
    rng = random.Random(seed)
    universe = [f"k{i}" for i in range(12)]
    old = items(*rng.sample(universe, rng.randint(0, 8)))
    new = items(*rng.sample(universe, rng.randint(0, 8)))

    changed, merged = reconcile_children(old, new)

    old_by_key = {entry.id: entry for entry in old}
    for entry in merged:
        if entry.id in old_by_key:
            assert entry is old_by_key[entry.id]
    assert set(ids(merged)) == set(ids(new))
    assert changed == (set(ids(old)) != set(ids(new)))
