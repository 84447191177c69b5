import json

from core.database import (
    HISTORY_KEY, REFLECTIONS_KEY, JsonFileStore, MemoryStore, RoutineDatabase, create_database
)
from core.models import CompletionLog, ReflectionLog


def test_toggle_writes_through_to_store():
    store = MemoryStore()
    db = RoutineDatabase(store)

    outcome = db.toggle("2024-01-15", "1")

    assert outcome.completed and outcome.persisted
    assert json.loads(store.blobs[HISTORY_KEY]) == {"2024-01-15": ["1"]}


def test_reload_sees_saved_state():
    store = MemoryStore()
    db = RoutineDatabase(store)
    db.toggle("2024-01-15", "1")
    db.set_reflection("2024-01-15", "Solid start")

    reloaded = RoutineDatabase(store)
    assert reloaded.get_completed("2024-01-15") == frozenset({"1"})
    assert reloaded.get_reflection("2024-01-15") == "Solid start"


def test_missing_data_starts_empty():
    db = RoutineDatabase(MemoryStore())
    assert len(db.history) == 0
    assert len(db.reflections) == 0


def test_corrupt_blob_starts_empty():
    store = MemoryStore({HISTORY_KEY: "{not json", REFLECTIONS_KEY: "[1, 2]"})
    db = RoutineDatabase(store)
    assert len(db.history) == 0
    assert len(db.reflections) == 0
    assert db.stats.error_count == 2


def test_read_failure_starts_empty():
    store = MemoryStore({HISTORY_KEY: json.dumps({"2024-01-15": ["1"]})})
    store.fail_reads = True
    db = RoutineDatabase(store)
    assert len(db.history) == 0


def test_write_failure_is_retried_once():
    store = MemoryStore()
    store.fail_writes = 1
    db = RoutineDatabase(store, save_retries=1)

    outcome = db.toggle("2024-01-15", "2")

    assert outcome.persisted
    assert store.write_attempts == 2
    assert not db.has_unsaved_changes


def test_write_failure_keeps_memory_and_marks_dirty():
    store = MemoryStore()
    store.fail_writes = 2
    db = RoutineDatabase(store, save_retries=1)

    outcome = db.toggle("2024-01-15", "2")

    assert outcome.completed
    assert not outcome.persisted
    assert db.get_completed("2024-01-15") == frozenset({"2"})
    assert db.has_unsaved_changes
    assert HISTORY_KEY not in store.blobs

    assert db.flush()
    assert not db.has_unsaved_changes
    assert json.loads(store.blobs[HISTORY_KEY]) == {"2024-01-15": ["2"]}


def test_replace_all_persists_both_logs():
    store = MemoryStore()
    db = RoutineDatabase(store)
    db.toggle("2024-01-01", "1")

    saved = db.replace_all(
        CompletionLog({"2024-02-01": ["3", "4"]}),
        ReflectionLog({"2024-02-01": "Restored"})
    )

    assert saved
    assert json.loads(store.blobs[HISTORY_KEY]) == {"2024-02-01": ["3", "4"]}
    assert json.loads(store.blobs[REFLECTIONS_KEY]) == {"2024-02-01": "Restored"}
    assert db.get_completed("2024-01-01") == frozenset()


def test_json_file_store_round_trip(tmp_path):
    db = create_database(tmp_path)
    db.toggle("2024-01-15", "7")

    assert (tmp_path / f"{HISTORY_KEY}.json").exists()
    assert not list(tmp_path.glob("*.tmp"))
    assert create_database(tmp_path).get_completed("2024-01-15") == frozenset({"7"})


def test_json_file_store_quarantines_corrupt_file(tmp_path):
    (tmp_path / f"{HISTORY_KEY}.json").write_text("{broken", encoding="utf-8")

    db = RoutineDatabase(JsonFileStore(tmp_path))

    assert len(db.history) == 0
    assert (tmp_path / f"{HISTORY_KEY}.corrupt").exists()
    assert not (tmp_path / f"{HISTORY_KEY}.json").exists()


def test_undecodable_file_is_quarantined_before_next_write(tmp_path):
    raw = b'{"2024-01-10": ["1"], "note": "\xff\xfe"}'
    (tmp_path / f"{HISTORY_KEY}.json").write_bytes(raw)

    db = create_database(tmp_path)
    db.toggle("2024-01-11", "1")

    assert (tmp_path / f"{HISTORY_KEY}.corrupt").read_bytes() == raw
    assert create_database(tmp_path).history.to_dict() == {"2024-01-11": ["1"]}


def test_stats_report_unsaved_keys():
    store = MemoryStore()
    store.fail_writes = 5
    db = RoutineDatabase(store, save_retries=0)
    db.set_reflection("2024-01-15", "text")

    stats = db.get_stats()
    assert stats["unsaved"] == [REFLECTIONS_KEY]
    assert stats["reflections"] == 1
