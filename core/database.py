#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RoutineCheck v1.0 - Database Manager
Хранилище журналов с немедленной записью после каждого изменения

Версия: 1.0.0
Дата: 2026-10-18
"""

import json
import shutil
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Any, Protocol
from dataclasses import dataclass
import logging

from core.models import CompletionLog, ReflectionLog

logger = logging.getLogger(__name__)

HISTORY_KEY = "routine_history_v2"
REFLECTIONS_KEY = "routine_reflections_v2"

# ===== EXCEPTIONS =====

class DatabaseError(Exception):
    """Базовое исключение для ошибок хранилища"""
    pass

class StoreReadError(DatabaseError):
    """Ошибка чтения из хранилища"""
    pass

class StoreWriteError(DatabaseError):
    """Ошибка записи в хранилище"""
    pass

# ===== STORES =====

class PersistenceStore(Protocol):
    """Ключ-значение хранилище сериализованных журналов"""

    def load(self, key: str) -> Optional[str]:
        ...

    def save(self, key: str, blob: str) -> None:
        ...

class JsonFileStore:
    """Хранилище в JSON-файлах: один файл <key>.json на ключ"""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def load(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except OSError as e:
            raise StoreReadError(f"Failed to read {path}: {e}") from e

    def save(self, key: str, blob: str) -> None:
        """Атомарная запись через временный файл"""
        path = self._path(key)
        temp_file = path.with_suffix('.tmp')

        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'w', encoding='utf-8') as f:
                f.write(blob)

            # Проверяем целостность записанного файла
            with open(temp_file, 'r', encoding='utf-8') as f:
                json.load(f)

            temp_file.replace(path)

        except (OSError, ValueError) as e:
            if temp_file.exists():
                temp_file.unlink()
            raise StoreWriteError(f"Failed to write {path}: {e}") from e

    def quarantine(self, key: str) -> Optional[Path]:
        """Отложить повреждённый файл в <key>.corrupt"""
        path = self._path(key)
        if not path.exists():
            return None
        target = path.with_suffix('.corrupt')
        try:
            shutil.move(str(path), str(target))
            logger.warning(f"Corrupted store file moved to {target}")
            return target
        except OSError as e:
            logger.error(f"Failed to move corrupted file {path}: {e}")
            return None

class MemoryStore:
    """Хранилище в памяти (тесты и сухой запуск)"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.blobs: Dict[str, str] = dict(initial or {})
        self.fail_writes = 0  # сколько следующих записей провалить
        self.fail_reads = False
        self.write_attempts = 0

    def load(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise StoreReadError(f"Read failure for {key}")
        return self.blobs.get(key)

    def save(self, key: str, blob: str) -> None:
        self.write_attempts += 1
        if self.fail_writes:
            self.fail_writes -= 1
            raise StoreWriteError(f"Write failure for {key}")
        self.blobs[key] = blob

# ===== HELPER CLASSES =====

@dataclass
class DatabaseStats:
    """Статистика хранилища"""
    save_count: int = 0
    load_count: int = 0
    error_count: int = 0
    retry_count: int = 0
    last_save: Optional[str] = None
    last_error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'save_count': self.save_count,
            'load_count': self.load_count,
            'error_count': self.error_count,
            'retry_count': self.retry_count,
            'last_save': self.last_save,
            'last_error': self.last_error
        }

class RoutineDatabase:
    """
    Владелец журнала выполнения и журнала рефлексий.

    Каждое изменение сразу записывается в хранилище. Неудачная запись
    повторяется save_retries раз; если и повтор не удался, состояние в
    памяти сохраняется, журнал помечается как несохранённый, а метод
    возвращает False.
    """

    def __init__(self, store: PersistenceStore, save_retries: int = 1):
        self.store = store
        self.save_retries = max(0, save_retries)
        self.stats = DatabaseStats()
        self.history = CompletionLog()
        self.reflections = ReflectionLog()
        self.dirty_keys: set = set()
        self._load_all()

    # ===== LOADING =====

    def _load_all(self) -> None:
        self.history = self._load_log(HISTORY_KEY, CompletionLog)
        self.reflections = self._load_log(REFLECTIONS_KEY, ReflectionLog)
        logger.info(
            f"Database loaded: {len(self.history)} logged days, "
            f"{len(self.reflections)} reflections"
        )

    def _load_log(self, key: str, log_class):
        """Загрузка одного журнала; любая ошибка означает пустой журнал"""
        self.stats.load_count += 1
        try:
            blob = self.store.load(key)
            if blob is None:
                logger.info(f"No stored data for {key}, starting empty")
                return log_class()
            return log_class.from_dict(json.loads(blob))

        except (StoreReadError, ValueError) as e:
            # UnicodeDecodeError, json.JSONDecodeError и ValidationError наследуют ValueError
            logger.warning(f"Failed to load {key}, starting empty: {e}")
            self.stats.error_count += 1
            self.stats.last_error = str(e)
            if not isinstance(e, StoreReadError) and hasattr(self.store, 'quarantine'):
                self.store.quarantine(key)
            return log_class()

    # ===== PERSISTENCE =====

    def _persist(self, key: str) -> bool:
        """Запись журнала по ключу с повтором"""
        data = self.history.to_dict() if key == HISTORY_KEY else self.reflections.to_dict()
        blob = json.dumps(data, ensure_ascii=False, indent=2)

        for attempt in range(self.save_retries + 1):
            try:
                self.store.save(key, blob)
                self.stats.save_count += 1
                self.stats.last_save = datetime.now().isoformat()
                self.dirty_keys.discard(key)
                return True
            except StoreWriteError as e:
                self.stats.error_count += 1
                self.stats.last_error = str(e)
                if attempt < self.save_retries:
                    self.stats.retry_count += 1
                    logger.warning(f"Save of {key} failed, retrying: {e}")
                else:
                    logger.error(f"Save of {key} failed, keeping changes in memory: {e}")

        self.dirty_keys.add(key)
        return False

    def flush(self) -> bool:
        """Повторная запись всех несохранённых журналов"""
        results = [self._persist(key) for key in sorted(self.dirty_keys)]
        return all(results)

    @property
    def has_unsaved_changes(self) -> bool:
        return bool(self.dirty_keys)

    # ===== PUBLIC API =====

    def toggle(self, date_key: str, task_id: str) -> "ToggleOutcome":
        """Переключить выполнение задачи и записать журнал"""
        completed = self.history.toggle(date_key, task_id)
        persisted = self._persist(HISTORY_KEY)
        return ToggleOutcome(completed=completed, persisted=persisted)

    def get_completed(self, date_key: str) -> frozenset:
        return self.history.get(date_key)

    def set_reflection(self, date_key: str, text: str) -> bool:
        self.reflections.set(date_key, text)
        return self._persist(REFLECTIONS_KEY)

    def get_reflection(self, date_key: str) -> Optional[str]:
        return self.reflections.get(date_key)

    def replace_all(self, history: CompletionLog, reflections: ReflectionLog) -> bool:
        """Полная замена журналов (восстановление из экспорта)"""
        self.history = history
        self.reflections = reflections
        saved_history = self._persist(HISTORY_KEY)
        saved_reflections = self._persist(REFLECTIONS_KEY)
        logger.info(f"Database replaced: {len(history)} days, {len(reflections)} reflections")
        return saved_history and saved_reflections

    def get_stats(self) -> Dict[str, Any]:
        data = self.stats.to_dict()
        data.update({
            'logged_days': len(self.history),
            'reflections': len(self.reflections),
            'unsaved': sorted(self.dirty_keys)
        })
        return data

@dataclass(frozen=True)
class ToggleOutcome:
    """Результат переключения задачи"""
    completed: bool
    persisted: bool

# ===== CONVENIENCE FUNCTIONS =====

def create_database(data_dir: Path, save_retries: int = 1) -> RoutineDatabase:
    """Создать базу поверх JSON-файлов"""
    return RoutineDatabase(JsonFileStore(data_dir), save_retries=save_retries)

# ===== EXPORT =====

__all__ = [
    'HISTORY_KEY',
    'REFLECTIONS_KEY',
    'DatabaseError',
    'StoreReadError',
    'StoreWriteError',
    'PersistenceStore',
    'JsonFileStore',
    'MemoryStore',
    'DatabaseStats',
    'RoutineDatabase',
    'ToggleOutcome',
    'create_database',
]
