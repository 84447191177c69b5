#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RoutineCheck v1.0 - Analytics Engine
Чистые функции аналитики над журналом выполнения

Все функции без побочных эффектов: журнал не изменяется, текущее время
передаётся явно через параметр now. Повторный вызов с теми же аргументами
даёт тот же результат.

Версия: 1.0.0
Дата: 2026-10-18
"""

from datetime import datetime, timedelta
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Any
import logging

from core.catalog import (
    Category, RoutineItem, ROUTINE_DEFINITIONS, catalog_ids, items_in_category,
    parse_time_to_minutes
)
from core.models import CompletionLog
from utils.datetime_utils import to_date_key, parse_date_key, minutes_since_midnight

logger = logging.getLogger(__name__)

# Предел обхода назад для серии (10 лет)
STREAK_SAFETY_BOUND = 3650

WEEK_DAYS = 7
MONTH_DAYS = 30

# ===== DATA CLASSES =====

@dataclass(frozen=True)
class WindowPoint:
    """Точка скользящего окна"""
    date: str
    percent: int
    weekday: str  # короткое имя дня недели, "Mon"
    day: int      # число месяца

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date,
            'percent': self.percent,
            'weekday': self.weekday,
            'day': self.day
        }

@dataclass(frozen=True)
class CategoryStat:
    """Эффективность по части дня"""
    category: Category
    percent: float
    done: int
    total: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category.value,
            'percent': round(self.percent, 2),
            'done': self.done,
            'total': self.total
        }

@dataclass
class AnalyticsSnapshot:
    """Сводка аналитики на момент now"""
    average_completion: int = 0
    streak: int = 0
    total_tasks_done: int = 0
    longest_streak: int = 0
    best_day: Optional[str] = None
    active_days: int = 0
    generated_for: Optional[str] = None

    def to_summary(self) -> Dict[str, int]:
        """Сводка для экспорта"""
        return {
            'averageCompletion': self.average_completion,
            'streak': self.streak,
            'totalTasksDone': self.total_tasks_done
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_summary()
        data.update({
            'longestStreak': self.longest_streak,
            'bestDay': self.best_day,
            'activeDays': self.active_days,
            'generatedFor': self.generated_for
        })
        return data

# ===== PER-DAY METRICS =====

def completed_known(log: CompletionLog, date_key: str,
                    catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> frozenset:
    """Выполненные за день id, которые есть в каталоге (устаревшие id отбрасываются)"""
    return log.get(date_key) & catalog_ids(catalog)

def done_count(log: CompletionLog, date_key: str,
               catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> int:
    return len(completed_known(log, date_key, catalog))

def completion_ratio(log: CompletionLog, date_key: str,
                     catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> float:
    if not catalog:
        return 0.0
    return done_count(log, date_key, catalog) / len(catalog)

def completion_percent(log: CompletionLog, date_key: str,
                       catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> int:
    """Процент выполнения за день, целое 0..100"""
    return _round_half_up(completion_ratio(log, date_key, catalog) * 100)

def active_dates(log: CompletionLog,
                 catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> List[str]:
    """Даты хотя бы с одной отметкой (любой id), по возрастанию"""
    return [d for d in log.dates() if log.count(d) > 0]

# ===== STREAKS =====

def calculate_streak(log: CompletionLog, now: datetime,
                     catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS,
                     max_days: int = STREAK_SAFETY_BOUND) -> int:
    """
    Текущая серия: число подряд идущих дней, заканчивающихся сегодня,
    в каждом из которых выполнена хотя бы одна задача.

    Пустой сегодняшний день даёт 0 независимо от истории.
    """
    streak = 0
    check_date = now.date()

    while streak < max_days:
        if log.count(to_date_key(check_date)) > 0:
            streak += 1
            check_date -= timedelta(days=1)
        else:
            break

    if streak >= max_days:
        logger.warning(f"Streak calculation hit the safety bound of {max_days} days")

    return streak

def longest_streak(log: CompletionLog,
                   catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> int:
    """Самая длинная серия подряд идущих активных дней за всю историю"""
    days = [parse_date_key(d) for d in active_dates(log, catalog)]
    if not days:
        return 0

    max_streak = 1
    current_streak = 1

    for i in range(1, len(days)):
        if days[i] == days[i - 1] + timedelta(days=1):
            current_streak += 1
            max_streak = max(max_streak, current_streak)
        else:
            current_streak = 1

    return max_streak

# ===== AGGREGATES =====

def average_completion(log: CompletionLog,
                       catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> int:
    """
    Средний процент выполнения по активным дням.

    Дни без выполненных задач не входят в знаменатель. Округление
    выполняется один раз, после усреднения долей.
    """
    dates = active_dates(log, catalog)
    if not dates:
        return 0

    total_ratio = sum(completion_ratio(log, d, catalog) for d in dates)
    return _round_half_up(total_ratio / len(dates) * 100)

def total_tasks_done(log: CompletionLog,
                     catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> int:
    """Сумма размеров множеств выполненных задач по всем датам (включая устаревшие id)"""
    return sum(log.count(d) for d in log.dates())

def best_day(log: CompletionLog,
             catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> Optional[str]:
    """Дата с наибольшим процентом; при равенстве самая поздняя"""
    best_key = None
    best_count = 0

    for date_key in active_dates(log, catalog):
        count = done_count(log, date_key, catalog)
        if count >= best_count:
            best_key, best_count = date_key, count

    return best_key

# ===== ROLLING WINDOWS =====

def rolling_window(log: CompletionLog, now: datetime, days: int,
                   catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> List[WindowPoint]:
    """
    Ряд процентов за последние days дней, от старых к новым.

    Длина ряда всегда равна days, отсутствующие даты дают 0.
    """
    if days < 0:
        raise ValueError("Window size must be non-negative")

    today = now.date()
    points = []

    for i in range(days):
        day = today - timedelta(days=days - 1 - i)
        date_key = to_date_key(day)
        points.append(WindowPoint(
            date=date_key,
            percent=completion_percent(log, date_key, catalog),
            weekday=day.strftime("%a"),
            day=day.day
        ))

    return points

def weekly_trend(log: CompletionLog, now: datetime,
                 catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> List[WindowPoint]:
    return rolling_window(log, now, WEEK_DAYS, catalog)

def monthly_trend(log: CompletionLog, now: datetime,
                  catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> List[WindowPoint]:
    return rolling_window(log, now, MONTH_DAYS, catalog)

def window_average(points: Sequence[WindowPoint]) -> int:
    if not points:
        return 0
    return _round_half_up(sum(p.percent for p in points) / len(points))

# ===== CATEGORIES =====

def category_efficiency(log: CompletionLog, date_key: str,
                        catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> List[CategoryStat]:
    """Процент выполнения по частям дня в порядке Morning, Afternoon, Evening, Night"""
    completed = log.get(date_key)
    stats = []

    for category in Category.ordered():
        tasks_in_cat = items_in_category(category, catalog)
        done_in_cat = sum(1 for item in tasks_in_cat if item.id in completed)
        percent = (done_in_cat / len(tasks_in_cat)) * 100 if tasks_in_cat else 0.0
        stats.append(CategoryStat(
            category=category,
            percent=percent,
            done=done_in_cat,
            total=len(tasks_in_cat)
        ))

    return stats

# ===== NEXT TASK =====

def next_upcoming_task(log: CompletionLog, date_key: str, now: datetime,
                       catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> Optional[RoutineItem]:
    """
    Ближайшая по времени невыполненная задача, начинающаяся строго позже now.

    Сравнивается только время суток now; при одинаковом времени побеждает
    задача, стоящая раньше в каталоге.
    """
    current_minutes = minutes_since_midnight(now)
    completed = log.get(date_key)

    remaining = [
        item for item in catalog
        if parse_time_to_minutes(item.time) > current_minutes and item.id not in completed
    ]
    if not remaining:
        return None

    return min(remaining, key=lambda item: parse_time_to_minutes(item.time))

# ===== SNAPSHOT =====

def build_snapshot(log: CompletionLog, now: datetime,
                   catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS) -> AnalyticsSnapshot:
    """Полная сводка аналитики"""
    return AnalyticsSnapshot(
        average_completion=average_completion(log, catalog),
        streak=calculate_streak(log, now, catalog),
        total_tasks_done=total_tasks_done(log, catalog),
        longest_streak=longest_streak(log, catalog),
        best_day=best_day(log, catalog),
        active_days=len(active_dates(log, catalog)),
        generated_for=to_date_key(now)
    )

def _round_half_up(value: float) -> int:
    # round() в Python банковский: 12.5 -> 12
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)

# ===== EXPORT =====

__all__ = [
    'STREAK_SAFETY_BOUND',
    'WEEK_DAYS',
    'MONTH_DAYS',
    'WindowPoint',
    'CategoryStat',
    'AnalyticsSnapshot',
    'completed_known',
    'done_count',
    'completion_ratio',
    'completion_percent',
    'active_dates',
    'calculate_streak',
    'longest_streak',
    'average_completion',
    'total_tasks_done',
    'best_day',
    'rolling_window',
    'weekly_trend',
    'monthly_trend',
    'window_average',
    'category_efficiency',
    'next_upcoming_task',
    'build_snapshot',
]
