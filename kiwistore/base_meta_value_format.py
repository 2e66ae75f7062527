"""Meta value layout shared by hashes, sets and sorted sets.

Layout::

    | type | count | version | reserve | ctime | etime |
    |  1B  |  8B   |   8B    |   16B   |  8B   |  8B   |
"""

from __future__ import annotations

from kiwistore.base_value_format import (
    U64_MAX,
    DataType,
    InternalValue,
    ParsedInternalValue,
    now_micros,
)
from kiwistore.coding import decode_fixed64, encode_fixed64
from kiwistore.errors import InvalidFormatError

TYPE_LENGTH = 1
VERSION_LENGTH = 8
SUFFIX_RESERVE_LENGTH = 16
TIMESTAMP_LENGTH = 8
BASE_META_VALUE_COUNT_LENGTH = 8
BASE_META_VALUE_LENGTH = (
    TYPE_LENGTH
    + BASE_META_VALUE_COUNT_LENGTH
    + VERSION_LENGTH
    + SUFFIX_RESERVE_LENGTH
    + 2 * TIMESTAMP_LENGTH
)

_COUNT_START = TYPE_LENGTH
_VERSION_START = _COUNT_START + BASE_META_VALUE_COUNT_LENGTH
_RESERVE_START = _VERSION_START + VERSION_LENGTH
_CTIME_START = _RESERVE_START + SUFFIX_RESERVE_LENGTH
_ETIME_START = _CTIME_START + TIMESTAMP_LENGTH


def _next_version(current: int) -> int:
    now = now_micros()
    return current + 1 if current >= now else now


class BaseMetaValue:
    """A meta value to be encoded; the user value holds the encoded count."""

    def __init__(self, user_value: bytes) -> None:
        self.inner = InternalValue(DataType.NONE, user_value)

    @property
    def version(self) -> int:
        return self.inner.version

    @property
    def ctime(self) -> int:
        return self.inner.ctime

    @property
    def etime(self) -> int:
        return self.inner.etime

    def update_version(self) -> int:
        """Advance the version to now, or by one if it is already ahead."""
        self.inner.version = _next_version(self.inner.version)
        return self.inner.version

    def set_relative_etime(self, ttl: int) -> None:
        """Expire ``ttl`` microseconds from now."""
        self.inner.set_relative_etime(ttl)

    def encode(self) -> bytes:
        """Serialise to the on-disk layout."""
        inner = self.inner
        return b"".join(
            (
                bytes((int(inner.data_type),)),
                inner.user_value,
                encode_fixed64(inner.version),
                bytes(inner.reserve),
                encode_fixed64(inner.ctime),
                encode_fixed64(inner.etime),
            )
        )


class ParsedBaseMetaValue:
    """A decoded meta value whose setters write through to the buffer."""

    def __init__(self, internal_value: bytes) -> None:
        value = bytearray(internal_value)
        if len(value) < BASE_META_VALUE_LENGTH:
            raise InvalidFormatError(
                f"invalid meta value length: {len(value)} < {BASE_META_VALUE_LENGTH}"
            )
        data_type = DataType.from_byte(value[0])
        self.count = decode_fixed64(value[_COUNT_START:])
        version = decode_fixed64(value[_VERSION_START:])
        ctime = decode_fixed64(value[_CTIME_START:])
        etime = decode_fixed64(value[_ETIME_START:])
        self.inner = ParsedInternalValue(
            value=value,
            data_type=data_type,
            user_value_range=range(_COUNT_START, _VERSION_START),
            reserve_range=range(_RESERVE_START, _CTIME_START),
            version=version,
            ctime=ctime,
            etime=etime,
        )

    @property
    def data_type(self) -> DataType:
        return self.inner.data_type

    @property
    def value(self) -> bytes:
        return bytes(self.inner.value)

    @property
    def version(self) -> int:
        return self.inner.version

    @property
    def ctime(self) -> int:
        return self.inner.ctime

    @property
    def etime(self) -> int:
        return self.inner.etime

    def _write_u64(self, start: int, number: int) -> None:
        self.inner.value[start:start + 8] = encode_fixed64(number)

    def initial_meta_value(self) -> int:
        """Reset count and timestamps and bump the version."""
        self.set_count(0)
        self.set_etime(0)
        self.set_ctime(0)
        return self.update_version()

    def is_valid(self) -> bool:
        """True if not expired and not empty."""
        return not self.inner.is_stale() and self.count != 0

    def is_stale(self) -> bool:
        return self.inner.is_stale()

    def is_permanent_survival(self) -> bool:
        return self.inner.is_permanent_survival()

    def check_set_count(self, count: int) -> bool:
        """True if ``count`` fits in the stored count field."""
        return 0 <= count <= U64_MAX

    def set_count(self, count: int) -> None:
        self.count = count

    def set_etime(self, etime: int) -> None:
        self.inner.etime = etime
        self._write_u64(len(self.inner.value) - TIMESTAMP_LENGTH, etime)

    def set_ctime(self, ctime: int) -> None:
        self.inner.ctime = ctime
        self._write_u64(len(self.inner.value) - 2 * TIMESTAMP_LENGTH, ctime)

    def check_modify_count(self, delta: int) -> bool:
        """True if adding ``delta`` would not overflow the count."""
        return self.count + delta <= U64_MAX

    def modify_count(self, delta: int) -> None:
        """Add ``delta`` to the count, saturating at the maximum."""
        self.count = min(self.count + delta, U64_MAX)
        self._write_u64(_COUNT_START, self.count)

    def update_version(self) -> int:
        """Advance the version and store it in the buffer."""
        self.inner.version = _next_version(self.inner.version)
        self._write_u64(_VERSION_START, self.inner.version)
        return self.inner.version