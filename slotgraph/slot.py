"""Slots: the variable names of slotted e-graphs."""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass

# A slot's code encodes its kind in the lowest two bits:
# 0 -> numeric, 1 -> fresh, 2 -> named, 3 -> unused.
_NUMERIC = 0
_FRESH = 1
_NAMED = 2

_U32_LIMIT = 2**32
_U64_LIMIT = 2**64
_DIGITS = re.compile(r"\+?[0-9]+")


class _SlotTable:
    """Process-wide registry of fresh counters and slot names."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.fresh_idx = 1
        self.names: list[str] = []
        self.by_name: dict[str, int] = {}


_TABLE = _SlotTable()


def _parse_u64(text: str) -> int | None:
    if not _DIGITS.fullmatch(text):
        return None
    value = int(text)
    return value if value < _U64_LIMIT else None


@dataclass(frozen=True, order=True, slots=True, repr=False)
class Slot:
    """A variable name. Internally just a number."""

    _code: int

    @classmethod
    def fresh(cls) -> Slot:
        """Return a slot that has never been constructed before."""
        with _TABLE.lock:
            code = _TABLE.fresh_idx
            _TABLE.fresh_idx += 4
        return cls(code)

    @classmethod
    def numeric(cls, n: int) -> Slot:
        """Return the numeric slot ``$n``."""
        if not 0 <= n < _U32_LIMIT:
            raise ValueError(f"numeric slot index out of range: {n}")
        return cls(n * 4 + _NUMERIC)

    @classmethod
    def named(cls, name: str) -> Slot:
        """Return the slot written ``$name``.

        Digit-only names give numeric slots and names like ``f12`` give
        fresh slots; anything else is interned as a named slot.
        """
        number = _parse_u64(name)
        if number is not None:
            return cls(number * 4 + _NUMERIC)

        with _TABLE.lock:
            if name.startswith("f"):
                number = _parse_u64(name[1:])
                if number is not None:
                    code = number * 4 + _FRESH
                    if _TABLE.fresh_idx <= code:
                        _TABLE.fresh_idx = code + 4
                    return cls(code)

            code = _TABLE.by_name.get(name)
            if code is None:
                code = len(_TABLE.names) * 4 + _NAMED
                _TABLE.names.append(name)
                _TABLE.by_name[name] = code
            return cls(code)

    def __str__(self) -> str:
        kind = self._code % 4
        if kind == _NUMERIC:
            return f"${self._code // 4}"
        if kind == _FRESH:
            return f"$f{(self._code - _FRESH) // 4}"
        if kind == _NAMED:
            return f"${_TABLE.names[(self._code - _NAMED) // 4]}"
        raise ValueError(f"invalid slot code {self._code}")

    __repr__ = __str__