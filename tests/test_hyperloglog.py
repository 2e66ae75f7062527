import pytest

from kiwistore.errors import InvalidFormatError
from kiwistore.hyperloglog import (
    HLL_DENSE_SIZE,
    HLL_P_MASK,
    HLL_REGISTERS,
    HyperLogLog,
    merged_count,
    murmurhash64a,
)


def _elements(prefix, n):
    return [f"{prefix}-{i}".encode() for i in range(n)]


def test_dense_size_matches_register_layout():
    sketch = HyperLogLog()
    assert len(sketch.to_bytes()) == 12288
    assert HLL_DENSE_SIZE == 12288
    assert sketch.register(16383) == 0
    with pytest.raises(IndexError):
        sketch.register(16384)


def test_empty_sketch_is_all_zero_and_counts_zero():
    sketch = HyperLogLog()
    assert sketch.to_bytes() == bytes(HLL_DENSE_SIZE)
    assert sketch.count() == 0


def test_hash_is_deterministic_and_64_bit():
    a = murmurhash64a(b"hello")
    assert a == murmurhash64a(b"hello")
    assert 0 <= a < 1 << 64
    assert murmurhash64a(b"hello") != murmurhash64a(b"hellp")
    assert 0 <= murmurhash64a(b"0123456789abcdef-long-input") < 1 << 64


def test_add_returns_true_then_false_for_same_element():
    sketch = HyperLogLog()
    assert sketch.add(b"alpha") is True
    assert sketch.add(b"alpha") is False


def test_single_element_counts_one():
    sketch = HyperLogLog()
    sketch.add(b"only")
    assert sketch.count() == 1


def test_register_written_at_hash_index_within_bounds():
    sketch = HyperLogLog()
    sketch.add(b"element")
    index = murmurhash64a(b"element") & HLL_P_MASK
    value = sketch.register(index)
    assert 15 <= value <= 63
    others = [sketch.register(i) for i in range(HLL_REGISTERS) if i != index]
    assert not any(others)


def test_register_out_of_range():
    sketch = HyperLogLog()
    with pytest.raises(IndexError):
        sketch.register(HLL_REGISTERS)
    with pytest.raises(IndexError):
        sketch.register(-1)


def test_update_reports_change():
    sketch = HyperLogLog()
    items = _elements("x", 50)
    assert sketch.update(items) is True
    assert sketch.update(items) is False
    assert sketch.update([]) is False


def test_count_is_close_for_many_distinct_elements():
    sketch = HyperLogLog()
    sketch.update(_elements("item", 1000))
    estimate = sketch.count()
    assert 900 <= estimate <= 1100


def test_duplicates_do_not_change_estimate():
    sketch = HyperLogLog()
    items = _elements("dup", 200)
    sketch.update(items)
    before = sketch.count()
    sketch.update(items)
    assert sketch.count() == before


def test_bytes_round_trip():
    sketch = HyperLogLog()
    sketch.update(_elements("rt", 300))
    restored = HyperLogLog.from_bytes(sketch.to_bytes())
    assert restored == sketch
    assert restored.count() == sketch.count()
    assert [restored.register(i) for i in range(0, HLL_REGISTERS, 97)] == [
        sketch.register(i) for i in range(0, HLL_REGISTERS, 97)
    ]


def test_from_bytes_rejects_wrong_length():
    with pytest.raises(InvalidFormatError):
        HyperLogLog.from_bytes(bytes(10))


def test_merge_equals_union():
    left_items = _elements("a", 400)
    right_items = _elements("b", 400)
    left = HyperLogLog()
    left.update(left_items)
    right = HyperLogLog()
    right.update(right_items)
    union = HyperLogLog()
    union.update(left_items + right_items)

    left.merge(right)
    assert left.to_bytes() == union.to_bytes()
    assert left.count() == union.count()


def test_merge_is_register_wise_max():
    left = HyperLogLog()
    left.update(_elements("m", 100))
    right = HyperLogLog()
    right.update(_elements("n", 100))
    merged = HyperLogLog.from_bytes(left.to_bytes())
    merged.merge(right)
    for i in range(HLL_REGISTERS):
        assert merged.register(i) == max(left.register(i), right.register(i))


def test_merged_count():
    assert merged_count([]) == 0
    one = HyperLogLog()
    one.update(_elements("s", 250))
    assert merged_count([one]) == one.count()
    two = HyperLogLog()
    two.update(_elements("t", 250))
    union = HyperLogLog()
    union.update(_elements("s", 250) + _elements("t", 250))
    assert merged_count([one, two]) == union.count()
    assert merged_count([one, two]) >= max(one.count(), two.count())