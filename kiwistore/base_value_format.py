"""Data types and the common internal value layout."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import IntEnum

from kiwistore.errors import InvalidFormatError

U64_MAX = (1 << 64) - 1


class DataType(IntEnum):
    """Kind of value stored under a key."""

    STRING = 0
    HASH = 1
    SET = 2
    LIST = 3
    ZSET = 4
    NONE = 5
    ALL = 6

    @classmethod
    def from_byte(cls, value: int) -> "DataType":
        """Decode a type byte, raising InvalidFormatError if unknown."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidFormatError(f"Invalid data type byte: {value}") from None


DATA_TYPE_STRINGS = ("string", "hash", "set", "list", "zset", "none", "all")
DATA_TYPE_TAG = ("k", "h", "s", "l", "z", "n", "a")


def data_type_to_string(data_type: DataType) -> str:
    """Return the lowercase name of a data type."""
    return DATA_TYPE_STRINGS[data_type]


def data_type_to_tag(data_type: DataType) -> str:
    """Return the one-letter tag of a data type."""
    return DATA_TYPE_TAG[data_type]


def now_micros() -> int:
    """Current Unix time in microseconds."""
    return time.time_ns() // 1000


@dataclass
class InternalValue:
    """A value before encoding: user payload plus version and timestamps."""

    data_type: DataType
    user_value: bytes
    version: int = 0
    etime: int = 0
    ctime: int = field(default_factory=now_micros)
    reserve: bytes = bytes(16)

    def __post_init__(self) -> None:
        self.user_value = bytes(self.user_value)

    def set_relative_etime(self, ttl: int) -> None:
        """Set the expiry time to ``ttl`` microseconds from now."""
        etime = now_micros() + ttl
        if etime > U64_MAX:
            raise InvalidFormatError(
                "Timestamp overflow when calculating relative etime"
            )
        self.etime = etime


@dataclass
class ParsedInternalValue:
    """A decoded view over an encoded value buffer."""

    value: bytearray
    data_type: DataType
    user_value_range: range
    reserve_range: range
    version: int
    ctime: int
    etime: int

    def __post_init__(self) -> None:
        self.value = bytearray(self.value)

    def user_value(self) -> bytes:
        """Copy of the user payload bytes."""
        r = self.user_value_range
        return bytes(self.value[r.start:r.stop])

    def is_permanent_survival(self) -> bool:
        """True if the value never expires."""
        return self.etime == 0

    def is_stale(self) -> bool:
        """True if the value has an expiry time in the past."""
        if self.etime == 0:
            return False
        return self.etime < now_micros()

    def is_valid(self) -> bool:
        """True if the value has not expired."""
        return not self.is_stale()