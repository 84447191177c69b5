#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RoutineCheck v1.0 - Core Data Models
Журнал выполнения и журнал рефлексий с валидацией

Версия: 1.0.0
Дата: 2026-10-18
"""

import re
from datetime import date
from typing import Dict, List, Optional, Any, FrozenSet
import logging

logger = logging.getLogger(__name__)

# ===== VALIDATION HELPERS =====

class ValidationError(ValueError):
    """Ошибка валидации данных"""
    pass

_DATE_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

def validate_date_key(value: Any) -> str:
    """Проверка ключа даты формата YYYY-MM-DD"""
    if not isinstance(value, str) or not _DATE_KEY_PATTERN.match(value):
        raise ValidationError(f"Неверный формат даты: {value!r}")
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Неверная дата: {value!r}")
    return value

def is_date_key(value: Any) -> bool:
    try:
        validate_date_key(value)
        return True
    except ValidationError:
        return False

# ===== COMPLETION LOG =====

class CompletionLog:
    """
    Журнал выполнения: дата -> множество id выполненных задач.

    Отсутствующая дата эквивалентна пустому множеству. Неизвестные id
    (после изменения каталога) хранятся как есть и не дублируются.
    """

    def __init__(self, entries: Optional[Dict[str, List[str]]] = None):
        # Порядок внутри дня сохраняется только для сериализации
        self._entries: Dict[str, List[str]] = {}
        for date_key, task_ids in (entries or {}).items():
            validate_date_key(date_key)
            self._entries[date_key] = _unique(task_ids)

    def toggle(self, date_key: str, task_id: str) -> bool:
        """Переключить выполнение задачи. Возвращает True если задача теперь выполнена"""
        validate_date_key(date_key)
        task_id = str(task_id)
        current = self._entries.get(date_key, [])

        if task_id in current:
            self._entries[date_key] = [t for t in current if t != task_id]
            return False

        self._entries[date_key] = current + [task_id]
        return True

    def get(self, date_key: str) -> FrozenSet[str]:
        """Выполненные задачи за дату (пустое множество если даты нет)"""
        return frozenset(self._entries.get(date_key, ()))

    def is_completed(self, date_key: str, task_id: str) -> bool:
        return task_id in self._entries.get(date_key, ())

    def count(self, date_key: str) -> int:
        return len(self._entries.get(date_key, ()))

    def dates(self) -> List[str]:
        """Все записанные даты по возрастанию"""
        return sorted(self._entries.keys())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, date_key: object) -> bool:
        return date_key in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompletionLog):
            return NotImplemented
        return {k: set(v) for k, v in self._entries.items() if v} == \
               {k: set(v) for k, v in other._entries.items() if v}

    def __repr__(self) -> str:
        return f"CompletionLog(days={len(self._entries)})"

    def to_dict(self) -> Dict[str, List[str]]:
        return {date_key: list(task_ids) for date_key, task_ids in self._entries.items()}

    @classmethod
    def from_dict(cls, data: Any) -> "CompletionLog":
        """Загрузка с пропуском повреждённых записей"""
        if not isinstance(data, dict):
            raise ValidationError("Completion log must be a JSON object")

        entries: Dict[str, List[str]] = {}
        for date_key, task_ids in data.items():
            if not is_date_key(date_key):
                logger.warning(f"Skipping completion entry with bad date key: {date_key!r}")
                continue
            if not isinstance(task_ids, list):
                logger.warning(f"Skipping completion entry for {date_key}: expected a list")
                continue
            entries[date_key] = [str(t) for t in task_ids if isinstance(t, (str, int))]

        return cls(entries)

# ===== REFLECTION LOG =====

class ReflectionLog:
    """Журнал рефлексий: не более одной записи на дату, новая перезаписывает старую"""

    def __init__(self, entries: Optional[Dict[str, str]] = None):
        self._entries: Dict[str, str] = {}
        for date_key, text in (entries or {}).items():
            self.set(date_key, text)

    def set(self, date_key: str, text: str) -> None:
        validate_date_key(date_key)
        if not isinstance(text, str):
            raise ValidationError("Reflection text must be a string")
        self._entries[date_key] = text

    def get(self, date_key: str) -> Optional[str]:
        return self._entries.get(date_key)

    def has(self, date_key: str) -> bool:
        return date_key in self._entries

    def dates(self) -> List[str]:
        return sorted(self._entries.keys())

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReflectionLog):
            return NotImplemented
        return self._entries == other._entries

    def to_dict(self) -> Dict[str, str]:
        return dict(self._entries)

    @classmethod
    def from_dict(cls, data: Any) -> "ReflectionLog":
        if not isinstance(data, dict):
            raise ValidationError("Reflection log must be a JSON object")

        entries: Dict[str, str] = {}
        for date_key, text in data.items():
            if not is_date_key(date_key) or not isinstance(text, str):
                logger.warning(f"Skipping malformed reflection entry: {date_key!r}")
                continue
            entries[date_key] = text

        return cls(entries)

def _unique(task_ids) -> List[str]:
    seen = set()
    result = []
    for task_id in task_ids:
        task_id = str(task_id)
        if task_id not in seen:
            seen.add(task_id)
            result.append(task_id)
    return result

# ===== EXPORT =====

__all__ = [
    'ValidationError',
    'validate_date_key',
    'is_date_key',
    'CompletionLog',
    'ReflectionLog',
]
