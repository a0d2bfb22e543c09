"""E-class identifiers and their invocations."""

from __future__ import annotations

from dataclasses import dataclass, field

from .slot import Slot
from .slotmap import SlotMap


@dataclass(frozen=True, order=True)
class Id:
    """Identifies an e-class."""

    value: int


@dataclass(frozen=True, order=True)
class AppliedId:
    """An invocation of an e-class.

    ``m`` maps the e-class's parameter slots to the slots put into them,
    and is always a bijection.
    """

    id: Id
    m: SlotMap = field(default_factory=SlotMap)

    def __post_init__(self) -> None:
        if not self.m.is_bijection():
            raise ValueError("AppliedId: the slot map must be a bijection")

    def apply_slotmap(self, m: SlotMap) -> AppliedId:
        """Rename the slots through ``m``, which must cover all of them."""
        if not m.keys() >= self.slots():
            raise ValueError("AppliedId.apply_slotmap: the SlotMap doesn't map all free slots")
        return self.apply_slotmap_partial(m)

    def apply_slotmap_partial(self, m: SlotMap) -> AppliedId:
        return AppliedId(self.id, self.m.compose_partial(m))

    def apply_slotmap_fresh(self, m: SlotMap) -> AppliedId:
        """Rename the slots through ``m``; unmapped slots become fresh."""
        return AppliedId(self.id, self.m.compose_fresh(m))

    def slots(self) -> set[Slot]:
        return self.m.values()

    @classmethod
    def null(cls) -> AppliedId:
        """The placeholder invocation of class 0 with no slots."""
        return cls(Id(0), SlotMap())