"""Value formats, coding, options, errors and a HyperLogLog sketch for a key-value store."""

__version__ = "0.1.0"

__all__ = [
    "base_meta_value_format",
    "base_value_format",
    "coding",
    "errors",
    "format",
    "hyperloglog",
    "list_meta_value_format",
    "options",
]