"""Languages: the e-node types of slotted e-graphs.

A language is declared as a direct subclass of :class:`Language`; its
variants are frozen dataclasses that subclass that family class. Their
fields are the children: :class:`AppliedId`, :class:`Slot`, :class:`Bind`
of those, or plain ``int``, ``bool`` and ``str`` payloads::

    class Lambda(Language):
        pass

    @dataclass(frozen=True)
    class Lam(Lambda, op="lam"):
        body: Bind[AppliedId]

    @dataclass(frozen=True)
    class Var(Lambda, op="var"):
        slot: Slot
"""

from __future__ import annotations

import dataclasses
import re
import typing
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from .slot import Slot
from .slotmap import SlotMap
from .types import AppliedId, Id

T = TypeVar("T")

# One element of an e-node's surface syntax: an identifier or payload,
# a child invocation, or a slot.
SyntaxElem = Union[str, AppliedId, Slot]

_INT = re.compile(r"[+-]?[0-9]+")
_FAIL = object()
_BARE_TYPES = (bool, int, str)


@dataclass(frozen=True)
class Bind(Generic[T]):
    """A child that binds ``slot`` privately inside ``elem``."""

    slot: Slot
    elem: T


# --- per-child helpers -------------------------------------------------------


def _child_occurrences(child: Any, bound: frozenset[Slot]) -> Iterator[tuple[Slot, bool]]:
    """Yield every slot occurrence of ``child`` with whether it is public."""
    if isinstance(child, Slot):
        yield child, child not in bound
    elif isinstance(child, AppliedId):
        for _, value in child.m:
            yield value, value not in bound
    elif isinstance(child, Bind):
        yield child.slot, False
        yield from _child_occurrences(child.elem, bound | {child.slot})


def _child_map_slots(child: Any, f: Callable[[Slot, bool], Slot], bound: frozenset[Slot]) -> Any:
    """Rebuild ``child`` with each occurrence ``s`` replaced by ``f(s, public)``."""
    if isinstance(child, Slot):
        return f(child, child not in bound)
    if isinstance(child, AppliedId):
        return AppliedId(child.id, SlotMap((k, f(v, v not in bound)) for k, v in child.m))
    if isinstance(child, Bind):
        slot = f(child.slot, False)
        elem = _child_map_slots(child.elem, f, bound | {child.slot})
        return Bind(slot, elem)
    return child


def _child_applied_ids(child: Any) -> Iterator[AppliedId]:
    if isinstance(child, AppliedId):
        yield child
    elif isinstance(child, Bind):
        yield from _child_applied_ids(child.elem)


def _child_map_applied_ids(child: Any, f: Callable[[AppliedId], AppliedId]) -> Any:
    if isinstance(child, AppliedId):
        return f(child)
    if isinstance(child, Bind):
        return Bind(child.slot, _child_map_applied_ids(child.elem, f))
    return child


class _Renamer:
    """Hands out numeric slots in order of first sight."""

    def __init__(self) -> None:
        self.mapping = SlotMap()
        self.counter = 0

    def add(self, slot: Slot) -> Slot:
        new = Slot.numeric(self.counter)
        self.counter += 1
        self.mapping.insert(slot, new)
        return new

    def see(self, slot: Slot) -> Slot:
        existing = self.mapping.get(slot)
        return existing if existing is not None else self.add(slot)


def _child_weak_shape(child: Any, renamer: _Renamer) -> Any:
    if isinstance(child, Slot):
        return renamer.see(child)
    if isinstance(child, AppliedId):
        return AppliedId(child.id, SlotMap((k, renamer.see(v)) for k, v in child.m))
    if isinstance(child, Bind):
        slot = renamer.add(child.slot)
        elem = _child_weak_shape(child.elem, renamer)
        renamer.mapping.remove(child.slot)
        return Bind(slot, elem)
    return child


def _child_to_syntax(child: Any) -> list[SyntaxElem]:
    if isinstance(child, Bind):
        return [child.slot, *_child_to_syntax(child.elem)]
    if isinstance(child, (AppliedId, Slot)):
        return [child]
    if isinstance(child, bool):
        return ["true" if child else "false"]
    return [str(child)]


def _is_bind(tp: Any) -> bool:
    return tp is Bind or typing.get_origin(tp) is Bind


def _bind_elem_type(tp: Any) -> Any:
    args = typing.get_args(tp)
    return args[0] if args else AppliedId


def _arity(tp: Any) -> int:
    return 1 + _arity(_bind_elem_type(tp)) if _is_bind(tp) else 1


_NAMED_TYPES: dict[str, Any] = {
    "AppliedId": AppliedId,
    "Slot": Slot,
    "int": int,
    "bool": bool,
    "str": str,
}


def _resolve(tp: Any) -> Any:
    """Turn a field annotation, possibly written as text, into a child type."""
    if isinstance(tp, typing.ForwardRef):
        tp = tp.__forward_arg__
    if isinstance(tp, str):
        text = tp.strip()
        head, bracket, rest = text.partition("[")
        name = head.strip().rsplit(".", 1)[-1]
        if bracket:
            if name != "Bind" or not rest.endswith("]"):
                raise TypeError(f"unsupported language child type: {tp!r}")
            return Bind[_resolve(rest[:-1])]
        if name == "Bind":
            return Bind[AppliedId]
        if name not in _NAMED_TYPES:
            raise TypeError(f"unsupported language child type: {tp!r}")
        return _NAMED_TYPES[name]
    if _is_bind(tp):
        return Bind[_resolve(_bind_elem_type(tp))]
    if tp in (AppliedId, Slot, *_BARE_TYPES):
        return tp
    raise TypeError(f"unsupported language child type: {tp!r}")


def _child_from_syntax(tp: Any, elems: list[SyntaxElem]) -> Any:
    if _is_bind(tp):
        head = elems[0]
        if not isinstance(head, Slot):
            return _FAIL
        elem = _child_from_syntax(_bind_elem_type(tp), elems[1:])
        return _FAIL if elem is _FAIL else Bind(head, elem)
    (elem,) = elems
    if tp is AppliedId or tp is Slot:
        return elem if isinstance(elem, tp) else _FAIL
    if not isinstance(elem, str):
        return _FAIL
    if tp is bool:
        return {"true": True, "false": False}.get(elem, _FAIL)
    if tp is int:
        return int(elem) if _INT.fullmatch(elem) else _FAIL
    return elem


# --- the language base --------------------------------------------------------


class Language:
    """Base of all e-node types. See the module docstring for declaring one."""

    _family: type[Language] | None = None
    _op: str | None = None

    def __init_subclass__(cls, op: str | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if Language in cls.__bases__:
            if op is not None:
                raise TypeError("a language family takes no operator")
            cls._variants: list[type[Language]] = []
            cls._family = cls
            return
        family = cls._family
        if family is None:
            raise TypeError(f"{cls.__name__} does not belong to a language family")
        cls._op = op
        family._variants.append(cls)

    # -- structure

    @classmethod
    def _field_types(cls) -> tuple[Any, ...]:
        cached = cls.__dict__.get("_cached_field_types")
        if cached is None:
            cached = tuple(_resolve(f.type) for f in dataclasses.fields(cls))
            cls._cached_field_types = cached
        return cached

    def _children(self) -> tuple[Any, ...]:
        type(self)._field_types()
        return tuple(getattr(self, f.name) for f in dataclasses.fields(self))

    def _rebuild(self, f: Callable[[Any], Any]) -> Language:
        return type(self)(*(f(child) for child in self._children()))

    def _occurrences(self) -> Iterator[tuple[Slot, bool]]:
        for child in self._children():
            yield from _child_occurrences(child, frozenset())

    def _map_slots(self, f: Callable[[Slot, bool], Slot]) -> Language:
        return self._rebuild(lambda child: _child_map_slots(child, f, frozenset()))

    # -- occurrences

    def all_slot_occurrences(self) -> list[Slot]:
        """All slot occurrences, in order."""
        return [slot for slot, _ in self._occurrences()]

    def public_slot_occurrences(self) -> list[Slot]:
        """Occurrences of slots visible from outside this e-node, in order."""
        return [slot for slot, public in self._occurrences() if public]

    def private_slot_occurrences(self) -> list[Slot]:
        """Occurrences whose slot is not among the public slots, in order."""
        public = set(self.public_slot_occurrences())
        return [slot for slot in self.all_slot_occurrences() if slot not in public]

    def applied_id_occurrences(self) -> list[AppliedId]:
        return [a for child in self._children() for a in _child_applied_ids(child)]

    def slots(self) -> set[Slot]:
        """The public slots."""
        return set(self.public_slot_occurrences())

    def private_slots(self) -> set[Slot]:
        return set(self.private_slot_occurrences())

    def ids(self) -> list[Id]:
        return [a.id for a in self.applied_id_occurrences()]

    # -- syntax

    def to_syntax(self) -> list[SyntaxElem]:
        out: list[SyntaxElem] = [] if self._op is None else [self._op]
        for child in self._children():
            out.extend(_child_to_syntax(child))
        return out

    @classmethod
    def from_syntax(cls, elems: Iterable[SyntaxElem]) -> Language | None:
        """Build an e-node from its syntax, or return None if none fits.

        On a family every variant is tried in declaration order; on a
        variant only that variant is tried.
        """
        if cls._family is None:
            raise TypeError("from_syntax needs a language family or variant")
        elems = list(elems)
        variants = cls._variants if cls._family is cls else [cls]
        for variant in variants:
            node = variant._parse(elems)
            if node is not None:
                return node
        return None

    @classmethod
    def _parse(cls, elems: list[SyntaxElem]) -> Language | None:
        rest = elems
        if cls._op is not None:
            if not rest or not isinstance(rest[0], str) or rest[0] != cls._op:
                return None
            rest = rest[1:]
        types = cls._field_types()
        if len(rest) != sum(_arity(tp) for tp in types):
            return None
        values = []
        for tp in types:
            n = _arity(tp)
            value = _child_from_syntax(tp, rest[:n])
            if value is _FAIL:
                return None
            values.append(value)
            rest = rest[n:]
        return cls(*values)

    # -- transformations

    def map_applied_ids(self, f: Callable[[AppliedId], AppliedId]) -> Language:
        return self._rebuild(lambda child: _child_map_applied_ids(child, f))

    def apply_slotmap(self, m: SlotMap) -> Language:
        """Rename the public slots through ``m``, which must cover all of them."""
        if not m.keys() >= self.slots():
            raise ValueError("Language.apply_slotmap: the SlotMap doesn't map all free slots")
        return self.apply_slotmap_partial(m)

    def apply_slotmap_partial(self, m: SlotMap) -> Language:
        """Rename the public slots through ``m``; a missing slot raises KeyError."""
        return self._map_slots(lambda slot, public: m[slot] if public else slot)

    def apply_slotmap_fresh(self, m: SlotMap) -> Language:
        """Rename the public slots through ``m``; each unmapped occurrence becomes fresh."""

        def rename(slot: Slot, public: bool) -> Slot:
            if not public:
                return slot
            target = m.get(slot)
            return target if target is not None else Slot.fresh()

        return self._map_slots(rename)

    def weak_shape(self) -> tuple[Language, SlotMap]:
        """Return ``(shape, bij)``: the node with slots renamed to ``$0, $1, ...``
        in order of occurrence, and the bijection from the shape's public slots
        back to this node's public slots."""
        renamer = _Renamer()
        shape = self._rebuild(lambda child: _child_weak_shape(child, renamer))
        return shape, renamer.mapping.inverse()

    def _refresh_where(self, chosen: set[Slot]) -> Language:
        fresh = SlotMap.bijection_from_fresh_to(chosen).inverse()
        return self._map_slots(lambda slot, _: fresh[slot] if slot in chosen else slot)

    def refresh_private(self) -> Language:
        """Give every private slot a fresh name."""
        return self._refresh_where(self.private_slots())

    def refresh_slots(self, slots: Iterable[Slot]) -> Language:
        """Give every occurrence of the given slots a fresh name."""
        return self._refresh_where(set(slots))

    def refresh_internals(self, public: Iterable[Slot]) -> Language:
        """Give every slot outside ``public`` a fresh name."""
        return self._refresh_where(set(self.all_slot_occurrences()) - set(public))

    def check(self) -> None:
        """Raise ValueError if a private slot shares its name with a public one."""
        occurrences = list(self._occurrences())
        public = {slot for slot, is_public in occurrences if is_public}
        clash = sorted({slot for slot, is_public in occurrences if not is_public and slot in public})
        if clash:
            raise ValueError(f"private slots collide with public slots: {clash}")