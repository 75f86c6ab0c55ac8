"""Identity-preserving reconciliation of child sequences.

A refresh fetches a brand new list of child objects. Replacing the cached
list wholesale would throw away whatever state the old children carry
(their own cached grandchildren, in-flight fetches) and make the UI
re-render every row. Instead the new list is merged into the old one by
key.
"""

from operator import attrgetter
from typing import Any, Callable, List, Sequence, Tuple, TypeVar


T = TypeVar('T')

by_id = attrgetter('id')


def reconcile_children(
    old: List[T],
    new: Sequence[T],
    key: Callable[[T], Any] = by_id,
) -> Tuple[bool, List[T]]:
    """Merge a freshly fetched sequence into the cached one.

    Old entries whose key is still present are kept, in their old order
    and as the old objects. New entries with unseen keys are appended in
    the order they were fetched. Order changes alone do not count, and
    neither do field changes on an entry whose key is unchanged.

    Args:
        old: Currently cached children
        new: Freshly fetched children
        key: Function returning an entry's stable identity

    Returns:
        Tuple of (changed, children). When nothing was added or removed,
        children is the ``old`` list object itself.
    """
    new_keys = {key(entry) for entry in new}
    old_keys = {key(entry) for entry in old}

    merged = [entry for entry in old if key(entry) in new_keys]
    removed = len(merged) != len(old)

    added = [entry for entry in new if key(entry) not in old_keys]
    merged.extend(added)

    if removed or added:
        return True, merged
    return False, old
