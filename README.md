# slotgraph

Building blocks for *slotted e-graphs*: e-graphs whose e-classes take
variable names ("slots") as arguments, so that terms with variables and
binders can be shared up to renaming.

## What is in the package

- `slotgraph.slot.Slot` – variable names. `Slot.numeric(n)` gives `$n`,
  `Slot.named("x")` gives `$x` (digit-only names give numeric slots, names
  like `f7` give fresh slots), and `Slot.fresh()` gives a slot never handed
  out before, printed as `$f<n>`.
- `slotgraph.slotmap.SlotMap` – a finite mapping between slots, kept sorted
  by key. It supports `insert`, `get`, `remove`, indexing, `inverse`,
  `compose`, `compose_partial`, `compose_fresh`, `union`, `try_union`,
  `is_bijection`, `is_perm`, and the constructors `identity`,
  `bijection_from_fresh_to` and `from_pairs`. Iterating yields
  `(key, value)` pairs in key order. Inconsistent operations (inverting a
  non-bijection, composing maps whose middle sets differ, a union of maps
  that disagree, duplicate keys at construction) raise `ValueError`.
- `slotgraph.types.Id` and `slotgraph.types.AppliedId` – an e-class id
  together with a bijective `SlotMap` from its parameter slots to the slots
  put into them. `AppliedId.null()` is the placeholder used inside terms.
- `slotgraph.lang.Language` and `slotgraph.lang.Bind` – the base for your
  own e-node types. Nodes report their slot occurrences (all, public,
  private), their child `AppliedId`s, and can be renamed
  (`apply_slotmap`, `apply_slotmap_partial`, `apply_slotmap_fresh`,
  `refresh_private`, `refresh_slots`, `refresh_internals`), brought into a
  canonical `weak_shape`, and converted to and from their syntax.
- `slotgraph.group.Group` – permutation groups over slots, stored as a
  stabiliser chain built with Schreier's lemma: `count`, `contains`,
  `proven_contains`, `orbit`, `generators`, `all_perms`, `add`, `add_set`.
- `slotgraph.pattern` – `Pattern` (with the cases `ENodePattern`, `PVar`
  and `SubstPattern`), `RecExpr`, `pattern_to_re`, `re_to_pattern`, and an
  s-expression parser raising `ParseError` (a `ValueError`).

## Installation

```
pip install slotgraph
```

## Slots and slot maps

```python
from slotgraph.slot import Slot
from slotgraph.slotmap import SlotMap

x, y, z = Slot.named("x"), Slot.named("y"), Slot.named("z")
m = SlotMap([(x, y), (y, z)])
print(m[x])                 # $y
print(m.inverse()[z])       # $y
print(m.is_bijection())     # True
```

## Permutation groups

```python
from slotgraph.group import Group
from slotgraph.slot import Slot
from slotgraph.slotmap import SlotMap

a, b = Slot.numeric(0), Slot.numeric(1)
identity = SlotMap.identity({a, b})
swap = SlotMap([(a, b), (b, a)])
g = Group(identity, {swap})
print(g.count())            # 2
print(g.contains(swap))     # True
```

## Declaring a language and parsing terms

A language is a direct subclass of `Language`; each of its variants is a
frozen dataclass subclassing it, with an optional operator name. Fields may
be `AppliedId`, `Slot`, `Bind[...]` of those, or `int`, `bool` and `str`
payloads. A `Bind` binds its slot privately inside its element.

```python
from __future__ import annotations

from dataclasses import dataclass

from slotgraph.lang import Bind, Language
from slotgraph.pattern import Pattern, RecExpr
from slotgraph.slot import Slot
from slotgraph.types import AppliedId


class Lambda(Language):
    pass


@dataclass(frozen=True)
class Lam(Lambda, op="lam"):
    body: Bind[AppliedId]


@dataclass(frozen=True)
class App(Lambda, op="app"):
    fun: AppliedId
    arg: AppliedId


@dataclass(frozen=True)
class Var(Lambda, op="var"):
    slot: Slot


expr = RecExpr.parse("(lam $x (app (var $x) (var $y)))", Lambda)
print(expr)                          # (lam $x (app (var $x) (var $y)))
print(Var(Slot.named("y")).slots())  # {$y}

rule = Pattern.parse("?b[(var $1) := ?t]", Lambda)
print(rule)                          # ?b[(var $1) := ?t]
```

`Lambda.from_syntax(elems)` tries each variant in declaration order and
returns `None` if none fits; the parser turns that into a `ParseError`.

## What the package does not do

This package holds the data structures only. There is no e-graph here: no
adding of terms to e-classes, no union or congruence closure, no
e-matching, no rewrite rules or saturation loop, and no extraction of
terms. Patterns and terms can be built, parsed and printed, but nothing in
the package matches or applies them.

## Running the tests

```
pip install -e ".[test]"
pytest
```