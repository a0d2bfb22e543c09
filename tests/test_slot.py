import pytest

from slotgraph.slot import Slot


def test_numeric_display():
    assert str(Slot.numeric(42)) == "$42"


def test_named_display():
    assert str(Slot.named("xyz")) == "$xyz"


@pytest.mark.parametrize("name", ["xyz", "foo_bar", "f", "fx", "alpha1"])
def test_named_round_trip(name):
    slot = Slot.named(name)
    assert str(slot) == "$" + name
    assert Slot.named(name) == slot


def test_named_digits_is_numeric():
    assert Slot.named("5") == Slot.numeric(5)
    assert str(Slot.named("17")) == "$17"


def test_named_fresh_form_round_trip():
    slot = Slot.named("f7")
    assert str(slot) == "$f7"
    assert Slot.named("f7") == slot


def test_fresh_slots_are_distinct():
    slots = {Slot.fresh() for _ in range(50)}
    assert len(slots) == 50


def test_fresh_never_collides_with_named_fresh_form():
    reserved = Slot.named("f1000")
    new = Slot.fresh()
    assert new != reserved
    assert str(new).startswith("$f")
    assert int(str(new)[2:]) > 1000


def test_fresh_differs_from_numeric_and_named():
    fresh = Slot.fresh()
    index = int(str(fresh)[2:])
    assert fresh != Slot.numeric(index)


def test_numeric_ordering_follows_index():
    assert Slot.numeric(1) < Slot.numeric(2)
    assert sorted([Slot.numeric(3), Slot.numeric(0), Slot.numeric(2)]) == [
        Slot.numeric(0),
        Slot.numeric(2),
        Slot.numeric(3),
    ]


def test_numeric_rejects_negative():
    with pytest.raises(ValueError):
        Slot.numeric(-1)


def test_repr_matches_str():
    slot = Slot.named("abc")
    assert repr(slot) == str(slot)


def test_slots_hash_as_equal():
    assert {Slot.numeric(4), Slot.named("4")} == {Slot.numeric(4)}