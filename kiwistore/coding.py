"""Fixed-width little-endian integer encoding."""

from __future__ import annotations

_SIZES = (4, 8)


def encode_fixed(value: int, size: int) -> bytes:
    """Encode ``value`` as a ``size``-byte little-endian unsigned integer.

    Negative values in the signed range wrap around as two's complement.
    """
    if size not in _SIZES:
        raise ValueError(f"unsupported fixed int size: {size}")
    bits = size * 8
    if not -(1 << (bits - 1)) <= value < (1 << bits):
        raise OverflowError(f"value {value} does not fit in {size} bytes")
    return (value & ((1 << bits) - 1)).to_bytes(size, "little")


def decode_fixed(buf: bytes, size: int) -> int:
    """Decode an unsigned little-endian integer from the first ``size`` bytes."""
    if size not in _SIZES:
        raise ValueError(f"unsupported fixed int size: {size}")
    if len(buf) < size:
        raise ValueError("buffer too small for fixed int")
    return int.from_bytes(bytes(buf[:size]), "little")


def encode_fixed32(value: int) -> bytes:
    """Encode a 32-bit integer."""
    return encode_fixed(value, 4)


def decode_fixed32(buf: bytes) -> int:
    """Decode a 32-bit unsigned integer."""
    return decode_fixed(buf, 4)


def encode_fixed64(value: int) -> bytes:
    """Encode a 64-bit integer."""
    return encode_fixed(value, 8)


def decode_fixed64(buf: bytes) -> int:
    """Decode a 64-bit unsigned integer."""
    return decode_fixed(buf, 8)