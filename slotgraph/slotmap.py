"""SlotMap: a finite, key-sorted mapping between slots."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable, Iterator
from functools import total_ordering

from .slot import Slot


@total_ordering
class SlotMap:
    """A mapping from slots to slots, kept sorted by key.

    Iterating yields ``(key, value)`` pairs in key order.
    """

    __slots__ = ("_keys", "_values")

    def __init__(self, pairs: Iterable[tuple[Slot, Slot]] = ()) -> None:
        self._keys: list[Slot] = []
        self._values: list[Slot] = []
        for key, value in pairs:
            if key in self:
                raise ValueError(f"SlotMap: duplicate key {key!r}")
            self.insert(key, value)

    def _search(self, key: Slot) -> tuple[int, bool]:
        i = bisect_left(self._keys, key)
        return i, i < len(self._keys) and self._keys[i] == key

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, slot: object) -> bool:
        if not isinstance(slot, Slot):
            return False
        return self._search(slot)[1]

    def __getitem__(self, slot: Slot) -> Slot:
        i, found = self._search(slot)
        if not found:
            raise KeyError(slot)
        return self._values[i]

    def __iter__(self) -> Iterator[tuple[Slot, Slot]]:
        return iter(zip(self._keys, self._values))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SlotMap):
            return NotImplemented
        return self._keys == other._keys and self._values == other._values

    def __lt__(self, other: SlotMap) -> bool:
        if not isinstance(other, SlotMap):
            return NotImplemented
        return self.items() < other.items()

    def __hash__(self) -> int:
        return hash(tuple(self.items()))

    def __repr__(self) -> str:
        inner = ", ".join(f"{k} -> {v}" for k, v in self)
        return f"SlotMap({{{inner}}})"

    def copy(self) -> SlotMap:
        """Return an independent copy."""
        out = SlotMap()
        out._keys = list(self._keys)
        out._values = list(self._values)
        return out

    def insert(self, key: Slot, value: Slot) -> None:
        """Map ``key`` to ``value``, replacing any previous value."""
        i, found = self._search(key)
        if found:
            self._values[i] = value
        else:
            self._keys.insert(i, key)
            self._values.insert(i, value)

    def get(self, key: Slot) -> Slot | None:
        i, found = self._search(key)
        return self._values[i] if found else None

    def remove(self, key: Slot) -> None:
        """Drop ``key`` if present."""
        i, found = self._search(key)
        if found:
            del self._keys[i]
            del self._values[i]

    def items(self) -> list[tuple[Slot, Slot]]:
        return list(zip(self._keys, self._values))

    def keys(self) -> set[Slot]:
        return set(self._keys)

    def values(self) -> set[Slot]:
        return set(self._values)

    def keys_list(self) -> list[Slot]:
        return list(self._keys)

    def values_list(self) -> list[Slot]:
        """Values ordered by their keys."""
        return list(self._values)

    def inverse(self) -> SlotMap:
        if not self.is_bijection():
            raise ValueError("SlotMap.inverse: the map is not a bijection")
        out = SlotMap()
        for key, value in self:
            out.insert(value, key)
        return out

    def is_bijection(self) -> bool:
        return len(set(self._values)) == len(self._values)

    def is_perm(self) -> bool:
        return self.is_bijection() and self.keys() == self.values()

    def compose(self, other: SlotMap) -> SlotMap:
        """Apply ``self`` then ``other``; their middle sets must agree."""
        if self.values() != other.keys():
            raise ValueError("SlotMap.compose: values do not match the other map's keys")
        return self.compose_partial(other)

    def compose_partial(self, other: SlotMap) -> SlotMap:
        """Apply ``self`` then ``other``, dropping keys ``other`` does not map."""
        out = SlotMap()
        for key, middle in self:
            target = other.get(middle)
            if target is not None:
                out.insert(key, target)
        return out

    def compose_fresh(self, other: SlotMap) -> SlotMap:
        """Apply ``self`` then ``other``; unmapped slots get fresh targets."""
        out = SlotMap()
        for key, middle in self:
            target = other.get(middle)
            out.insert(key, target if target is not None else Slot.fresh())
        return out

    def union(self, other: SlotMap) -> SlotMap:
        out = self.try_union(other)
        if out is None:
            raise ValueError("SlotMap.union: the maps disagree")
        return out

    def try_union(self, other: SlotMap) -> SlotMap | None:
        out = self.copy()
        for key, value in other:
            existing = out.get(key)
            if existing is not None and existing != value:
                return None
            out.insert(key, value)
        return out

    @classmethod
    def identity(cls, slots: Iterable[Slot]) -> SlotMap:
        out = cls()
        for slot in slots:
            out.insert(slot, slot)
        return out

    @classmethod
    def bijection_from_fresh_to(cls, slots: Iterable[Slot]) -> SlotMap:
        """Map a fresh slot to each of ``slots``."""
        out = cls()
        for slot in sorted(set(slots)):
            out.insert(Slot.fresh(), slot)
        return out

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[Slot, Slot]]) -> SlotMap:
        return cls(pairs)