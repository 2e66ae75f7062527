"""Meta value layout for lists.

Layout::

    | type | list_size | version | left index | right index | reserve | ctime | etime |
    |  1B  |    8B     |   8B    |     8B     |     8B      |   16B   |  8B   |  8B   |
"""

from __future__ import annotations

from kiwistore.base_meta_value_format import (
    BASE_META_VALUE_COUNT_LENGTH,
    SUFFIX_RESERVE_LENGTH,
    TIMESTAMP_LENGTH,
    TYPE_LENGTH,
    VERSION_LENGTH,
)
from kiwistore.base_value_format import (
    U64_MAX,
    DataType,
    InternalValue,
    ParsedInternalValue,
    now_micros,
)
from kiwistore.coding import decode_fixed64, encode_fixed64
from kiwistore.errors import InvalidFormatError

INITIAL_LEFT_INDEX = 9223372036854775807
INITIAL_RIGHT_INDEX = 9223372036854775808
LIST_VALUE_INDEX_LENGTH = 8

_COUNT_START = TYPE_LENGTH
_VERSION_START = _COUNT_START + BASE_META_VALUE_COUNT_LENGTH
_LEFT_START = _VERSION_START + VERSION_LENGTH
_RIGHT_START = _LEFT_START + LIST_VALUE_INDEX_LENGTH
_RESERVE_START = _RIGHT_START + LIST_VALUE_INDEX_LENGTH
_CTIME_START = _RESERVE_START + SUFFIX_RESERVE_LENGTH
_ETIME_START = _CTIME_START + TIMESTAMP_LENGTH


def _next_version(current: int) -> int:
    now = now_micros()
    return current + 1 if current >= now else now


def _checked_sub(value: int, amount: int) -> int:
    result = value - amount
    if result < 0:
        raise OverflowError(f"index underflow: {value} - {amount}")
    return result


def _checked_add(value: int, amount: int) -> int:
    result = value + amount
    if result > U64_MAX:
        raise OverflowError(f"value overflow: {value} + {amount}")
    return result


class ListsMetaValue:
    """A list meta value to be encoded; the user value holds the encoded size."""

    def __init__(self, list_size: bytes) -> None:
        self.inner = InternalValue(DataType.LIST, list_size)
        self.left_index = INITIAL_LEFT_INDEX
        self.right_index = INITIAL_RIGHT_INDEX

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

    def modify_left_index(self, index: int) -> None:
        """Move the left index ``index`` positions towards the head."""
        self.left_index = _checked_sub(self.left_index, index)

    def modify_right_index(self, index: int) -> None:
        """Move the right index ``index`` positions towards the tail."""
        self.right_index = _checked_add(self.right_index, index)

    def encode(self) -> bytes:
        """Serialise to the on-disk layout."""
        inner = self.inner
        return b"".join(
            (
                bytes((int(inner.data_type),)),
                inner.user_value,
                encode_fixed64(inner.version),
                encode_fixed64(self.left_index),
                encode_fixed64(self.right_index),
                bytes(inner.reserve),
                encode_fixed64(inner.ctime),
                encode_fixed64(inner.etime),
            )
        )


class ParsedListsMetaValue:
    """A decoded list meta value whose setters write through to the buffer."""

    LISTS_META_VALUE_SUFFIX_LENGTH = (
        VERSION_LENGTH
        + 2 * LIST_VALUE_INDEX_LENGTH
        + SUFFIX_RESERVE_LENGTH
        + 2 * TIMESTAMP_LENGTH
    )
    LISTS_META_VALUE_LENGTH = (
        TYPE_LENGTH + BASE_META_VALUE_COUNT_LENGTH + LISTS_META_VALUE_SUFFIX_LENGTH
    )

    def __init__(self, internal_value: bytes) -> None:
        value = bytearray(internal_value)
        if len(value) < self.LISTS_META_VALUE_LENGTH:
            raise InvalidFormatError(
                f"invalid lists meta value length: {len(value)} "
                f"< {self.LISTS_META_VALUE_LENGTH}"
            )
        data_type = DataType.from_byte(value[0])
        self.count = decode_fixed64(value[_COUNT_START:])
        version = decode_fixed64(value[_VERSION_START:])
        self.left_index = decode_fixed64(value[_LEFT_START:])
        self.right_index = decode_fixed64(value[_RIGHT_START:])
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

    def is_stale(self) -> bool:
        return self.inner.is_stale()

    def is_permanent_survival(self) -> bool:
        return self.inner.is_permanent_survival()

    def _write_u64(self, start: int, number: int) -> None:
        self.inner.value[start:start + 8] = encode_fixed64(number)

    def _write_indices(self) -> None:
        self._write_u64(_LEFT_START, self.left_index)
        self._write_u64(_RIGHT_START, self.right_index)

    def initial_meta_value(self) -> int:
        """Reset count, indices and timestamps and bump the version."""
        self.set_count(0)
        self.set_left_index(INITIAL_LEFT_INDEX)
        self.set_right_index(INITIAL_RIGHT_INDEX)
        self.set_etime(0)
        self.set_ctime(0)
        return self.update_version()

    def is_valid(self) -> bool:
        """True if not expired and not empty."""
        return not self.inner.is_stale() and self.count != 0

    def set_count(self, count: int) -> None:
        self.count = count
        self._write_u64(_COUNT_START, count)

    def modify_count(self, delta: int) -> None:
        """Add ``delta`` to the count."""
        self.count = _checked_add(self.count, delta)
        self._write_u64(_COUNT_START, self.count)

    def set_etime(self, etime: int) -> None:
        self.inner.etime = etime
        self._write_u64(len(self.inner.value) - TIMESTAMP_LENGTH, etime)

    def set_ctime(self, ctime: int) -> None:
        self.inner.ctime = ctime
        self._write_u64(len(self.inner.value) - 2 * TIMESTAMP_LENGTH, ctime)

    def update_version(self) -> int:
        """Advance the version and store it in the buffer."""
        self.inner.version = _next_version(self.inner.version)
        self._write_u64(_VERSION_START, self.inner.version)
        return self.inner.version

    def set_left_index(self, index: int) -> None:
        self.left_index = index
        self._write_indices()

    def modify_left_index(self, index: int) -> None:
        self.left_index = _checked_sub(self.left_index, index)
        self._write_indices()

    def set_right_index(self, index: int) -> None:
        self.right_index = index
        self._write_indices()

    def modify_right_index(self, index: int) -> None:
        self.right_index = _checked_add(self.right_index, index)
        self._write_indices()

    def strip_suffix(self) -> None:
        """Drop the fixed-size suffix, leaving type and count."""
        length = len(self.inner.value)
        if length and length >= self.LISTS_META_VALUE_SUFFIX_LENGTH:
            del self.inner.value[length - self.LISTS_META_VALUE_SUFFIX_LENGTH:]