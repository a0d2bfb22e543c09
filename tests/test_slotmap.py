import pytest

from slotgraph.slot import Slot
from slotgraph.slotmap import SlotMap


def s(n):
    return Slot.numeric(n)


def test_slotmap_source_case():
    m = SlotMap()
    m.insert(s(3), s(7))
    m.insert(s(2), s(7))
    m.insert(s(3), s(8))
    m.insert(s(4), s(7))
    assert m[s(3)] == s(8)
    assert m.keys_list() == sorted(m.keys_list())
    assert len(m.keys_list()) == len(m.keys())
    assert len(m) == 3


def test_get_and_contains():
    m = SlotMap.from_pairs([(s(1), s(2))])
    assert m.get(s(1)) == s(2)
    assert m.get(s(5)) is None
    assert s(1) in m
    assert s(2) not in m


def test_getitem_missing_raises():
    with pytest.raises(KeyError):
        SlotMap()[s(0)]


def test_remove():
    m = SlotMap.from_pairs([(s(1), s(2)), (s(3), s(4))])
    m.remove(s(1))
    m.remove(s(9))
    assert m.items() == [(s(3), s(4))]


def test_iteration_is_key_ordered():
    m = SlotMap.from_pairs([(s(5), s(0)), (s(1), s(9)), (s(3), s(4))])
    assert list(m) == [(s(1), s(9)), (s(3), s(4)), (s(5), s(0))]
    assert m.values_list() == [s(9), s(4), s(0)]


def test_from_pairs_duplicate_raises():
    with pytest.raises(ValueError):
        SlotMap.from_pairs([(s(1), s(2)), (s(1), s(3))])


def test_inverse_round_trip():
    m = SlotMap.from_pairs([(s(0), s(5)), (s(1), s(6)), (s(2), s(4))])
    inv = m.inverse()
    assert inv[s(5)] == s(0)
    assert inv.inverse() == m


def test_inverse_of_non_bijection_raises():
    m = SlotMap.from_pairs([(s(0), s(5)), (s(1), s(5))])
    assert not m.is_bijection()
    with pytest.raises(ValueError):
        m.inverse()


def test_is_perm():
    assert SlotMap.from_pairs([(s(0), s(1)), (s(1), s(0))]).is_perm()
    assert not SlotMap.from_pairs([(s(0), s(1)), (s(1), s(2))]).is_perm()


def test_compose():
    swap = SlotMap.from_pairs([(s(0), s(1)), (s(1), s(0))])
    assert swap.compose(swap) == SlotMap.identity({s(0), s(1)})
    ident = SlotMap.identity({s(0), s(1)})
    assert swap.compose(ident) == swap


def test_compose_mismatch_raises():
    a = SlotMap.from_pairs([(s(0), s(1))])
    b = SlotMap.from_pairs([(s(2), s(3))])
    with pytest.raises(ValueError):
        a.compose(b)


def test_compose_partial_drops_missing():
    a = SlotMap.from_pairs([(s(0), s(1)), (s(2), s(3))])
    b = SlotMap.from_pairs([(s(1), s(7))])
    assert a.compose_partial(b).items() == [(s(0), s(7))]


def test_compose_fresh_keeps_keys():
    a = SlotMap.from_pairs([(s(0), s(1)), (s(2), s(3))])
    b = SlotMap.from_pairs([(s(1), s(7))])
    out = a.compose_fresh(b)
    assert out.keys() == a.keys()
    assert out[s(0)] == s(7)
    assert out[s(2)] not in {s(1), s(3), s(7)}


def test_union_and_try_union():
    a = SlotMap.from_pairs([(s(0), s(1))])
    b = SlotMap.from_pairs([(s(2), s(3)), (s(0), s(1))])
    assert a.union(b).items() == [(s(0), s(1)), (s(2), s(3))]
    c = SlotMap.from_pairs([(s(0), s(4))])
    assert a.try_union(c) is None
    with pytest.raises(ValueError):
        a.union(c)


def test_identity():
    slots = {s(0), s(3), s(9)}
    m = SlotMap.identity(slots)
    assert m.is_perm()
    assert all(k == v for k, v in m)
    assert m.keys() == slots


def test_bijection_from_fresh_to():
    slots = {s(0), s(1), s(2)}
    m = SlotMap.bijection_from_fresh_to(slots)
    assert m.values() == slots
    assert m.is_bijection()
    assert m.keys().isdisjoint(slots)
    assert m.inverse().keys() == slots


def test_equality_and_hash_ignore_insertion_order():
    a = SlotMap()
    a.insert(s(2), s(0))
    a.insert(s(1), s(5))
    b = SlotMap.from_pairs([(s(1), s(5)), (s(2), s(0))])
    assert a == b
    assert len({a, b}) == 1


def test_copy_is_independent():
    a = SlotMap.from_pairs([(s(1), s(2))])
    b = a.copy()
    b.insert(s(3), s(4))
    assert len(a) == 1
    assert len(b) == 2