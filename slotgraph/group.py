"""Permutation groups over slots, stored as a stabilizer chain."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .slot import Slot
from .slotmap import SlotMap

# Composition follows the usual convention: "x y" means x.compose(y),
# i.e. first apply x, then y.


@dataclass
class _Level:
    """One layer of the stabilizer chain."""

    # the slot stabilized by the next layer
    stab: Slot
    # orbit tree: ot[x] maps stab to x
    ot: dict[Slot, SlotMap]
    group: Group

    @classmethod
    def build(cls, identity: SlotMap, generators: set[SlotMap]) -> _Level | None:
        stab = _lowest_nonstab(generators)
        if stab is None:
            return None
        ot = _orbit_tree(stab, identity, generators)
        stabilizer_gens = _schreier_generators(stab, ot, generators)
        return cls(stab, ot, Group(identity, stabilizer_gens))


class Group:
    """A group of permutations on a fixed set of slots.

    ``identity`` is the identity permutation; its keys are the set the
    permutations act on.
    """

    __slots__ = ("_identity", "_next")

    def __init__(self, identity: SlotMap, generators: Iterable[SlotMap] = ()) -> None:
        self._identity = identity
        self._next = _Level.build(identity, set(generators))

    @classmethod
    def trivial(cls, identity: SlotMap) -> Group:
        """The group holding only ``identity``."""
        return cls(identity, ())

    def __repr__(self) -> str:
        return f"Group(count={self.count()}, identity={self._identity!r})"

    def is_trivial(self) -> bool:
        return self._next is None

    def orbit(self, slot: Slot) -> set[Slot]:
        """All slots that ``slot`` is mapped to by some group element."""
        return set(_orbit_tree(slot, self._identity, self.generators()))

    def _all_generators(self) -> set[SlotMap]:
        if self._next is None:
            return set()
        return set(self._next.ot.values()) | self._next.group._all_generators()

    def generators(self) -> set[SlotMap]:
        """A generating set of the group, without the identity."""
        out = self._all_generators()
        out.discard(self._identity)
        return out

    def all_perms(self) -> set[SlotMap]:
        """Every element of the group. Expensive for large groups."""
        if self._next is None:
            return {self._identity}
        left = set(self._next.ot.values())
        right = self._next.group.all_perms()
        return {r.compose(l) for l in left for r in right}

    def contains(self, perm: SlotMap) -> bool:
        if self._next is None:
            return all(x == y for x, y in perm)
        part = self._next.ot.get(perm[self._next.stab])
        if part is None:
            return False
        return self._next.group.contains(perm.compose(part.inverse()))

    def proven_contains(self, perm: SlotMap) -> SlotMap | None:
        """Return the group element equal to ``perm``, or None if it is not in the group."""
        if self._next is None:
            return self._identity if all(x == y for x, y in perm) else None
        part = self._next.ot.get(perm[self._next.stab])
        if part is None:
            return None
        step = self._next.group.proven_contains(perm.compose(part.inverse()))
        if step is None:
            return None
        # step == perm * part^-1, hence step * part == perm
        return step.compose(part)

    def add(self, perm: SlotMap) -> bool:
        """Extend the group by ``perm``; return whether the group grew."""
        return self.add_set({perm})

    def add_set(self, perms: Iterable[SlotMap]) -> bool:
        """Extend the group by ``perms``; return whether the group grew."""
        new = {p for p in perms if not self.contains(p)}
        if not new:
            return False
        self._next = Group(self._identity, self.generators() | new)._next
        return True

    def count(self) -> int:
        """The number of elements of the group."""
        if self._next is None:
            return 1
        return len(self._next.ot) * self._next.group.count()


def _orbit_tree(stab: Slot, identity: SlotMap, generators: Iterable[SlotMap]) -> dict[Slot, SlotMap]:
    ot = {stab: identity}
    gens = sorted(generators)
    grew = True
    while grew:
        grew = False
        for gen in gens:
            for perm in list(ot.values()):
                new = perm.compose(gen)
                target = new[stab]
                if target not in ot:
                    ot[target] = new
                    grew = True
    return ot


def _schreier_generators(stab: Slot, ot: dict[Slot, SlotMap], generators: set[SlotMap]) -> set[SlotMap]:
    """Generators of the stabilizer of ``stab``, by Schreier's lemma."""
    out = set()
    for r in ot.values():
        for gen in generators:
            rs = r.compose(gen)
            out.add(rs.compose(ot[rs[stab]].inverse()))
    return out


def _lowest_nonstab(generators: Iterable[SlotMap]) -> Slot | None:
    """The lowest slot moved by at least one generator."""
    return min((x for gen in generators for x, y in gen if x != y), default=None)