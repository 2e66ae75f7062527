import dataclasses

from kiwistore.options import U32_MAX, OptionType, StorageOptions


def test_default_numeric_options():
    opts = StorageOptions()
    assert opts.block_cache_size == 8 << 30
    assert opts.small_compaction_threshold == 5000
    assert opts.small_compaction_duration_threshold == 10000
    assert opts.db_instance_num == 3
    assert opts.db_id == 0
    assert opts.max_gap == 1000
    assert opts.mem_manager_size == 100_000_000
    assert opts.raft_timeout_s == U32_MAX
    assert opts.statistics_max_size == 0
    assert opts.share_block_cache is True


def test_default_db_options():
    db = StorageOptions().db_options
    assert db["create_if_missing"] is True
    assert db["create_missing_column_families"] is True
    assert db["max_open_files"] == 10000
    assert db["write_buffer_size"] == 64 << 20
    assert db["target_file_size_base"] == 64 << 20
    assert db["max_write_buffer_number"] == 3


def test_db_options_not_shared_between_instances():
    a = StorageOptions()
    b = StorageOptions()
    a.db_options["max_open_files"] = 1
    assert b.db_options["max_open_files"] == 10000


def test_replace_keeps_other_fields():
    opts = dataclasses.replace(StorageOptions(), db_instance_num=1, db_id=7)
    assert opts.db_instance_num == 1
    assert opts.db_id == 7
    assert opts.small_compaction_threshold == StorageOptions().small_compaction_threshold


def test_options_equality():
    assert StorageOptions() == StorageOptions()
    changed = StorageOptions(max_gap=5)
    assert changed != StorageOptions()
    assert changed.max_gap == 5


def test_option_type_members():
    assert set(OptionType) == {OptionType.DB, OptionType.COLUMN_FAMILY}
    assert OptionType("db") is OptionType.DB