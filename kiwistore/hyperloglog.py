"""HyperLogLog cardinality estimation over a dense 6-bit register array."""

from __future__ import annotations

import math
from collections.abc import Iterable

from kiwistore.errors import InvalidFormatError

HLL_P = 14
HLL_REGISTERS = 1 << HLL_P
HLL_P_MASK = HLL_REGISTERS - 1
HLL_DENSE_SIZE = 6 * HLL_REGISTERS // 8
HLL_REGISTER_MAX = 63

_U64_MASK = (1 << 64) - 1
_U64_MAX = _U64_MASK
_SEED = 0x5F3759DF
_M = 0xC6A4A7935BD1E995
_R = 47
_TWO_POW_32 = float(1 << 32)


def murmurhash64a(data: bytes) -> int:
    """64-bit MurmurHash64A of ``data`` with the sketch's fixed seed."""
    data = bytes(data)
    h = (_SEED ^ (len(data) * _M)) & _U64_MASK

    full = len(data) - len(data) % 8
    for start in range(0, full, 8):
        k = int.from_bytes(data[start:start + 8], "little")
        k = (k * _M) & _U64_MASK
        k ^= k >> _R
        k = (k * _M) & _U64_MASK
        h ^= k
        h = (h * _M) & _U64_MASK

    remainder = data[full:]
    if remainder:
        h ^= int.from_bytes(remainder, "little")
        h = (h * _M) & _U64_MASK

    h ^= h >> _R
    h = (h * _M) & _U64_MASK
    h ^= h >> _R
    return h


def _leading_zeros64(value: int) -> int:
    return 64 - value.bit_length()


def _round_to_u64(estimate: float) -> int:
    """Round half away from zero and saturate into the unsigned 64-bit range."""
    if math.isnan(estimate) or estimate <= 0:
        return 0
    if math.isinf(estimate):
        return _U64_MAX
    return min(math.floor(estimate + 0.5), _U64_MAX)


class HyperLogLog:
    """A dense HyperLogLog sketch of ``HLL_REGISTERS`` 6-bit registers."""

    def __init__(self) -> None:
        self._registers = bytearray(HLL_DENSE_SIZE)

    @classmethod
    def from_bytes(cls, data: bytes) -> "HyperLogLog":
        """Build a sketch from its dense byte representation."""
        if len(data) != HLL_DENSE_SIZE:
            raise InvalidFormatError(
                f"invalid hyperloglog length: {len(data)} != {HLL_DENSE_SIZE}"
            )
        sketch = cls()
        sketch._registers[:] = data
        return sketch

    def to_bytes(self) -> bytes:
        """Dense byte representation of the registers."""
        return bytes(self._registers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HyperLogLog):
            return NotImplemented
        return self._registers == other._registers

    def register(self, index: int) -> int:
        """Value of register ``index``."""
        if not 0 <= index < HLL_REGISTERS:
            raise IndexError(f"register index out of range: {index}")
        regs = self._registers
        byte_pos, bit_offset = divmod(index * 6, 8)
        if bit_offset <= 2:
            return (regs[byte_pos] >> bit_offset) & 0x3F
        first = regs[byte_pos] >> bit_offset
        second = (regs[byte_pos + 1] << (8 - bit_offset)) & 0xFF
        return (first | second) & 0x3F

    def _set_register(self, index: int, value: int) -> None:
        regs = self._registers
        byte_pos, bit_offset = divmod(index * 6, 8)
        if bit_offset <= 2:
            regs[byte_pos] &= ~(0x3F << bit_offset) & 0xFF
            regs[byte_pos] |= (value << bit_offset) & 0xFF
        else:
            regs[byte_pos] &= ~(0xFF << bit_offset) & 0xFF
            regs[byte_pos] |= (value << bit_offset) & 0xFF
            regs[byte_pos + 1] &= ~(0x3F >> (8 - bit_offset)) & 0xFF
            regs[byte_pos + 1] |= value >> (8 - bit_offset)

    def add(self, element: bytes) -> bool:
        """Add one element; True if a register grew."""
        h = murmurhash64a(element)
        index = h & HLL_P_MASK
        value = min(_leading_zeros64(h >> HLL_P) + 1, HLL_REGISTER_MAX)
        if value > self.register(index):
            self._set_register(index, value)
            return True
        return False

    def update(self, elements: Iterable[bytes]) -> bool:
        """Add every element; True if any register grew."""
        changed = False
        for element in elements:
            if self.add(element):
                changed = True
        return changed

    def merge(self, other: "HyperLogLog") -> None:
        """Take the register-wise maximum with ``other``."""
        for index in range(HLL_REGISTERS):
            theirs = other.register(index)
            if theirs > self.register(index):
                self._set_register(index, theirs)

    def count(self) -> int:
        """Estimated number of distinct elements added."""
        m = float(HLL_REGISTERS)
        total = 0.0
        zero_regs = 0
        for index in range(HLL_REGISTERS):
            value = self.register(index)
            total += 1.0 / float(1 << value)
            if value == 0:
                zero_regs += 1

        alpha = 0.7213 / (1.0 + 1.079 / m)
        estimate = alpha * m * m / total

        if estimate <= 2.5 * m and zero_regs > 0:
            estimate = m * math.log(m / zero_regs)
        elif estimate > _TWO_POW_32 / 30.0:
            ratio = 1.0 - estimate / _TWO_POW_32
            if ratio > 0:
                estimate = -_TWO_POW_32 * math.log(ratio)
            elif ratio == 0:
                estimate = math.inf
            else:
                estimate = math.nan
        return _round_to_u64(estimate)


def merged_count(sketches: Iterable[HyperLogLog]) -> int:
    """Estimated cardinality of the union of ``sketches``; 0 if there are none."""
    merged = HyperLogLog()
    found = False
    for sketch in sketches:
        merged.merge(sketch)
        found = True
    return merged.count() if found else 0