"""Storage engine options."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

U32_MAX = (1 << 32) - 1


def _default_db_options() -> dict[str, Any]:
    return {
        "create_if_missing": True,
        "create_missing_column_families": True,
        "max_open_files": 10000,
        "write_buffer_size": 64 << 20,
        "max_write_buffer_number": 3,
        "target_file_size_base": 64 << 20,
        "level_compaction_dynamic_level_bytes": True,
    }


@dataclass
class StorageOptions:
    """Tuning knobs for the storage engine and its database instances."""

    db_options: dict[str, Any] = field(default_factory=_default_db_options)
    block_cache_size: int = 8 << 30
    share_block_cache: bool = True
    statistics_max_size: int = 0
    small_compaction_threshold: int = 5000
    small_compaction_duration_threshold: int = 10000
    db_instance_num: int = 3
    db_id: int = 0
    raft_timeout_s: int = U32_MAX
    max_gap: int = 1000
    mem_manager_size: int = 100_000_000


class OptionType(Enum):
    """Scope an option change applies to."""

    DB = "db"
    COLUMN_FAMILY = "column_family"