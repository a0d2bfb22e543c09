"""Slots, slot maps, binder-aware languages, permutation groups and patterns for slotted e-graphs."""

__version__ = "0.1.0"