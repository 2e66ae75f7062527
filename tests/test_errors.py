import pytest

from kiwistore.errors import (
    BatchError,
    CompactionError,
    ConfigError,
    EncodingError,
    InvalidFormatError,
    IoError,
    KeyNotFoundError,
    OptionNoneError,
    StorageError,
    SystemStorageError,
    TransactionError,
    UnknownStorageError,
)


@pytest.mark.parametrize(
    "cls, prefix",
    [
        (EncodingError, "Encoding error"),
        (InvalidFormatError, "Invalid format"),
        (TransactionError, "Transaction error"),
        (BatchError, "Batch operation error"),
        (CompactionError, "Compaction error"),
        (ConfigError, "Configuration error"),
        (SystemStorageError, "System error"),
        (UnknownStorageError, "Unknown error"),
        (OptionNoneError, "Option is none"),
    ],
)
def test_message_display(cls, prefix):
    err = cls("db is not initialized")
    assert str(err) == f"{prefix}: db is not initialized"
    assert err.message == "db is not initialized"


def test_key_not_found_keeps_key():
    err = KeyNotFoundError("mykey")
    assert err.key == "mykey"
    assert str(err) == "Key not found: mykey"


def test_io_error_wraps_os_error():
    cause = OSError("disk gone")
    err = IoError(cause)
    assert str(err) == "IO error"
    assert err.error is cause
    assert err.__cause__ is cause


def test_all_caught_as_storage_error():
    err = InvalidFormatError("bad layout")
    assert isinstance(err, StorageError)
    assert str(err) == "Invalid format: bad layout"
    assert err.message == "bad layout"

    caught = KeyNotFoundError("missing")
    assert isinstance(caught, StorageError)
    assert str(caught) == "Key not found: missing"