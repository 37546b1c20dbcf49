"""Keyed three-way diff between two element collections."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

from flowdiagram.exceptions import DuplicateKeyError

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


@dataclass(frozen=True)
class Diff(Generic[K]):
    """Result of reconciling previous keys against next keys.

    The three tuples are disjoint. ``entered`` and ``updated`` follow the
    order of the next keys; ``exited`` follows the order of the previous keys.
    """

    entered: tuple[K, ...] = ()
    updated: tuple[K, ...] = ()
    exited: tuple[K, ...] = ()

    @property
    def is_stable(self) -> bool:
        """True when nothing appears or disappears."""
        return not self.entered and not self.exited

    def counts(self) -> dict[str, int]:
        return {
            "entered": len(self.entered),
            "updated": len(self.updated),
            "exited": len(self.exited),
        }


def reconcile(prev_keys: Iterable[K], next_keys: Iterable[K]) -> Diff[K]:
    """Classify keys as entered, updated or exited.

    Example:
        >>> d = reconcile(["a", "b"], ["b", "c"])
        >>> d.entered, d.updated, d.exited
        (('c',), ('b',), ('a',))
    """
    prev = list(dict.fromkeys(prev_keys))
    nxt = list(dict.fromkeys(next_keys))
    prev_set = set(prev)
    next_set = set(nxt)
    return Diff(
        entered=tuple(k for k in nxt if k not in prev_set),
        updated=tuple(k for k in nxt if k in prev_set),
        exited=tuple(k for k in prev if k not in next_set),
    )


def key_by(items: Iterable[T], key: Callable[[T], K], collection: str) -> dict[K, T]:
    """Index items by identity key, preserving order.

    Raises:
        DuplicateKeyError: If two items share a key
    """
    keyed: dict[K, T] = {}
    for item in items:
        k = key(item)
        if k in keyed:
            raise DuplicateKeyError(collection, k)
        keyed[k] = item
    return keyed
