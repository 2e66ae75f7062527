"""Data key and meta value formats for storage entries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from kiwistore.coding import decode_fixed64, encode_fixed64
from kiwistore.errors import InvalidFormatError

_META_HEADER_LENGTH = 17


class ValueType(IntEnum):
    """Kind of a stored entry."""

    DELETION = 0
    VALUE = 1
    META = 2
    LIST = 3
    SET = 4
    ZSET = 5
    HASH = 6

    @classmethod
    def from_byte(cls, value: int) -> "ValueType":
        """Decode a type byte; unknown bytes are treated as deletions."""
        try:
            return cls(value)
        except ValueError:
            return cls.DELETION


@dataclass
class DataKey:
    """A user key with its version and an optional sub key."""

    key: bytes
    version: int
    sub_key: bytes | None = None

    def encode(self) -> bytes:
        """Key bytes, then the version as 8 little-endian bytes, then the sub key."""
        return self.key + encode_fixed64(self.version) + (self.sub_key or b"")

    @classmethod
    def decode(cls, data: bytes) -> "DataKey":
        """Decode a key with a trailing version; the sub key is not recovered."""
        data = bytes(data)
        if len(data) < 8:
            raise InvalidFormatError("Invalid data key format")
        key_len = len(data) - 8
        return cls(key=data[:key_len], version=decode_fixed64(data[key_len:]))


@dataclass
class MetaValue:
    """Type byte, version, size and optional trailing bytes."""

    value_type: ValueType
    version: int
    size: int
    extra: bytes | None = None

    def encode(self) -> bytes:
        return b"".join(
            (
                bytes((int(self.value_type),)),
                encode_fixed64(self.version),
                encode_fixed64(self.size),
                self.extra or b"",
            )
        )

    @classmethod
    def decode(cls, data: bytes) -> "MetaValue":
        data = bytes(data)
        if len(data) < _META_HEADER_LENGTH:
            raise InvalidFormatError("Invalid meta value format")
        extra = data[_META_HEADER_LENGTH:] if len(data) > _META_HEADER_LENGTH else None
        return cls(
            value_type=ValueType.from_byte(data[0]),
            version=decode_fixed64(data[1:9]),
            size=decode_fixed64(data[9:17]),
            extra=extra,
        )