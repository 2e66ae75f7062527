# kiwistore

Building blocks for a Redis-compatible key-value storage engine: the binary
value formats, fixed-width integer coding, storage options, an error
hierarchy and a HyperLogLog sketch.

## Install

```
pip install kiwistore
```

For running the tests:

```
pip install "kiwistore[test]"
pytest
```

## What is inside

- `kiwistore.coding`: little-endian fixed-width unsigned integers
  (`encode_fixed`, `decode_fixed`, `encode_fixed32`, `decode_fixed32`,
  `encode_fixed64`, `decode_fixed64`). Encoding accepts negative values in the
  signed range and stores them as two's complement; decoding always returns
  the unsigned value.
- `kiwistore.base_value_format`: the `DataType` enum (with
  `DataType.from_byte`), `data_type_to_string`, `data_type_to_tag`,
  `now_micros`, `InternalValue` and `ParsedInternalValue`.
- `kiwistore.base_meta_value_format`: meta values for hashes, sets and sorted
  sets (`BaseMetaValue`, `ParsedBaseMetaValue`). Setters on the parsed value
  write through to its byte buffer; `modify_count` saturates at the 64-bit
  maximum.
- `kiwistore.list_meta_value_format`: list meta values with left and right
  indices (`ListsMetaValue`, `ParsedListsMetaValue`). Moving an index past the
  64-bit range raises `OverflowError`.
- `kiwistore.format`: the `ValueType` enum and the `DataKey` and `MetaValue`
  records with `encode` and `decode`.
- `kiwistore.options`: the `StorageOptions` dataclass with its defaults and
  the `OptionType` enum.
- `kiwistore.hyperloglog`: `murmurhash64a`, the dense `HyperLogLog` sketch
  (`add`, `update`, `merge`, `count`, `register`, `from_bytes`, `to_bytes`)
  and `merged_count` for the cardinality of a union.
- `kiwistore.errors`: `StorageError` and its subclasses. A malformed value
  raises `InvalidFormatError`.

## Examples

Build a meta value and read it back:

```python
from kiwistore.base_meta_value_format import BaseMetaValue, ParsedBaseMetaValue
from kiwistore.coding import encode_fixed64

meta = BaseMetaValue(encode_fixed64(3))
parsed = ParsedBaseMetaValue(meta.encode())
print(parsed.count)          # 3
parsed.modify_count(2)
print(parsed.count)          # 5
```

Count distinct elements:

```python
from kiwistore.hyperloglog import HyperLogLog, merged_count

a = HyperLogLog()
a.update([b"alpha", b"beta", b"gamma"])
b = HyperLogLog.from_bytes(a.to_bytes())
b.add(b"delta")
print(a.count(), merged_count([a, b]))
```

## What it does not do

This package holds formats and in-memory structures only. It does not store
anything: there is no database, no column families, no persistence to disk,
no compaction and no server or command-line program. `StorageOptions` records
settings but nothing in the package acts on them.