"""Exception hierarchy for the storage engine."""

from __future__ import annotations


class StorageError(Exception):
    """Base class of every error raised by the storage engine."""

    label = "Storage error"

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(f"{self.label}: {message}")


class IoError(StorageError):
    """An operating-system level I/O failure."""

    label = "IO error"

    def __init__(self, error: OSError) -> None:
        self.error = error
        self.message = str(error)
        Exception.__init__(self, self.label)
        self.__cause__ = error


class EncodingError(StorageError):
    """A value could not be encoded."""

    label = "Encoding error"


class KeyNotFoundError(StorageError):
    """The requested key does not exist."""

    label = "Key not found"

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key)


class InvalidFormatError(StorageError):
    """Stored bytes do not match the expected layout."""

    label = "Invalid format"


class TransactionError(StorageError):
    """A transaction could not be completed."""

    label = "Transaction error"


class BatchError(StorageError):
    """A batch operation failed."""

    label = "Batch operation error"


class CompactionError(StorageError):
    """A compaction failed."""

    label = "Compaction error"


class ConfigError(StorageError):
    """The configuration is invalid."""

    label = "Configuration error"


class SystemStorageError(StorageError):
    """A system-level failure."""

    label = "System error"


class UnknownStorageError(StorageError):
    """A failure of unknown origin."""

    label = "Unknown error"


class OptionNoneError(StorageError):
    """A required component is missing or not initialised."""

    label = "Option is none"