#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RoutineCheck v1.0 - Routine Catalog
Фиксированный распорядок дня и разбор времени в 12-часовом формате

Версия: 1.0.0
Дата: 2026-10-18
"""

import re
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, List, Optional, Sequence, Any, Tuple

from core.models import ValidationError

# ===== ENUMS =====

class Category(Enum):
    """Части дня (порядок важен для отображения и аналитики)"""
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"
    NIGHT = "Night"

    @classmethod
    def ordered(cls) -> List["Category"]:
        return [cls.MORNING, cls.AFTERNOON, cls.EVENING, cls.NIGHT]

# ===== TIME PARSING =====

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*$")

def parse_time_to_minutes(time_str: str) -> int:
    """
    Перевод строки вида "7:45 AM" в минуты от полуночи.

    12:00 AM -> 0, 12:00 PM -> 720, для PM с 1 до 11 прибавляется 720.
    Строки без AM/PM (24-часовой формат) не принимаются.
    """
    if not isinstance(time_str, str):
        raise ValidationError(f"time must be a string, got {type(time_str).__name__}")

    match = _TIME_PATTERN.match(time_str)
    if not match:
        raise ValidationError(f"Invalid 12-hour time: {time_str!r}")

    hours, minutes, period = int(match.group(1)), int(match.group(2)), match.group(3).upper()

    if not 1 <= hours <= 12:
        raise ValidationError(f"Hour out of range in {time_str!r}")
    if not 0 <= minutes <= 59:
        raise ValidationError(f"Minute out of range in {time_str!r}")

    if period == "AM" and hours == 12:
        hours = 0
    elif period == "PM" and hours < 12:
        hours += 12

    return hours * 60 + minutes

# ===== MODELS =====

@dataclass(frozen=True)
class RoutineItem:
    """Элемент распорядка дня"""
    id: str
    time: str  # 12h формат, например "5:00 AM"
    activity: str
    emoji: str
    category: Category

    @property
    def minutes(self) -> int:
        """Время начала в минутах от полуночи"""
        return parse_time_to_minutes(self.time)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['category'] = self.category.value
        return data

# ===== DEFINITIONS =====

ROUTINE_DEFINITIONS: Tuple[RoutineItem, ...] = (
    RoutineItem('1', '5:00 AM', 'Wake Up, Clean, Fresh & Run 🏃‍♂️', '☀️', Category.MORNING),
    RoutineItem('2', '6:00 AM', 'Gym Workout or Study 🏋️‍♂️', '💪', Category.MORNING),
    RoutineItem('3', '7:00 AM', 'Rest, Freshup & Tiffan 🍱', '🚿', Category.MORNING),
    RoutineItem('4', '7:45 AM', 'College Bus Waiting 🚌', '🕙', Category.MORNING),
    RoutineItem('5', '8:20 AM', 'College Hours 🎓', '📚', Category.AFTERNOON),
    RoutineItem('6', '4:15 PM', 'Rest, Freshup & Snacks ☕', '🛋️', Category.AFTERNOON),
    RoutineItem('7', '6:00 PM', 'Excellence Python Class 🐍', '💻', Category.EVENING),
    RoutineItem('8', '7:00 PM', 'Evening Study Session 📖', '✍️', Category.EVENING),
    RoutineItem('9', '9:30 PM', 'Dinner Time 🍽️', '🥘', Category.NIGHT),
    RoutineItem('10', '10:30 PM', 'Night Workout 💪', '🏃', Category.NIGHT),
    RoutineItem('11', '11:00 PM', 'Late Study / Other Work 🖋️', '🌙', Category.NIGHT),
    RoutineItem('12', '12:00 AM', 'Deep Sleep 💤', '🛌', Category.NIGHT),
)

# ===== HELPERS =====

def validate_catalog(catalog: Sequence[RoutineItem]) -> None:
    """Проверка уникальности id и корректности времени"""
    seen = set()
    for item in catalog:
        if item.id in seen:
            raise ValidationError(f"Duplicate routine id: {item.id}")
        seen.add(item.id)
        parse_time_to_minutes(item.time)
        if not isinstance(item.category, Category):
            raise ValidationError(f"Unknown category for routine {item.id}: {item.category!r}")

def catalog_ids(catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> frozenset:
    return frozenset(item.id for item in catalog)

def get_item(task_id: str, catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> Optional[RoutineItem]:
    for item in catalog:
        if item.id == task_id:
            return item
    return None

def items_in_category(category: Category,
                      catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> List[RoutineItem]:
    return [item for item in catalog if item.category == category]

validate_catalog(ROUTINE_DEFINITIONS)

# ===== EXPORT =====

__all__ = [
    'Category',
    'RoutineItem',
    'ROUTINE_DEFINITIONS',
    'parse_time_to_minutes',
    'validate_catalog',
    'catalog_ids',
    'get_item',
    'items_in_category',
]
