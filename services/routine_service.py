# services/routine_service.py

import logging
from datetime import datetime
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from core import analytics
from core.ai_service import AIService, FallbackResponseProvider
from core.analytics import AnalyticsSnapshot, CategoryStat, WindowPoint
from core.catalog import Category, RoutineItem, ROUTINE_DEFINITIONS, get_item, items_in_category
from core.database import RoutineDatabase
from core.models import validate_date_key
from services.data_export import (
    build_export_payload, export_filename, parse_export, serialize_export, write_export_file
)
from utils.datetime_utils import Clock, to_date_key, shift_date_key

logger = logging.getLogger(__name__)

# ===== VIEW MODELS =====

@dataclass(frozen=True)
class ToggleResult:
    """Результат отметки задачи"""
    task_id: str
    item: Optional[RoutineItem]
    completed: bool
    persisted: bool

@dataclass
class DayItemView:
    item: RoutineItem
    completed: bool

@dataclass
class DayView:
    """Чек-лист выбранного дня"""
    date: str
    is_today: bool
    percent: int
    done: int
    total: int
    sections: List[Tuple[Category, List[DayItemView]]] = field(default_factory=list)
    reflection: Optional[str] = None
    can_reflect: bool = False

    @property
    def left(self) -> int:
        return self.total - self.done

@dataclass
class DashboardView:
    """Командный центр: прогресс, серия, следующая задача, тренды"""
    date: str
    is_today: bool
    percent: int
    streak: int
    next_task: Optional[RoutineItem]
    weekly: List[WindowPoint]
    categories: List[CategoryStat]

@dataclass
class AnalyticsView:
    snapshot: AnalyticsSnapshot
    monthly: List[WindowPoint]
    insight: str
    is_ai_loading: bool

# ===== SERVICE =====

class RoutineService:
    """
    Единая точка изменения состояния трекера.

    Владеет базой (оба журнала), AI сервисом и часами. Выбранная дата и
    слот AI-инсайта живут только в памяти процесса.
    """

    def __init__(self, database: RoutineDatabase, ai_service: AIService, clock: Clock,
                 catalog: Sequence[RoutineItem] = ROUTINE_DEFINITIONS,
                 export_dir: Optional[Path] = None):
        self.database = database
        self.ai_service = ai_service
        self.clock = clock
        self.catalog = tuple(catalog)
        self.export_dir = export_dir
        self.selected_date = self.today_key()
        self.ai_insight: Optional[str] = None
        self.is_reflecting = False
        self.is_ai_loading = False

    # ===== DATES =====

    def now(self) -> datetime:
        return self.clock()

    def today_key(self) -> str:
        return to_date_key(self.clock())

    def is_today_selected(self) -> bool:
        return self.selected_date == self.today_key()

    def select_date(self, date_key: str) -> str:
        """Выбор даты; будущие даты заменяются сегодняшней"""
        validate_date_key(date_key)
        today = self.today_key()
        self.selected_date = min(date_key, today)
        return self.selected_date

    def shift_selected_date(self, offset: int) -> str:
        return self.select_date(shift_date_key(self.selected_date, offset))

    # ===== COMPLETION =====

    def toggle_task(self, task_id: str) -> ToggleResult:
        """Переключить задачу на выбранную дату (запись сразу в хранилище)"""
        outcome = self.database.toggle(self.selected_date, task_id)
        item = get_item(task_id, self.catalog)
        if item is None:
            logger.warning(f"Toggled unknown routine id {task_id!r} on {self.selected_date}")
        logger.debug(f"Task {task_id} on {self.selected_date}: completed={outcome.completed}")
        return ToggleResult(
            task_id=task_id,
            item=item,
            completed=outcome.completed,
            persisted=outcome.persisted
        )

    def completed_ids(self, date_key: Optional[str] = None) -> frozenset:
        return self.database.get_completed(date_key or self.selected_date)

    # ===== VIEWS =====

    def snapshot(self) -> AnalyticsSnapshot:
        return analytics.build_snapshot(self.database.history, self.now(), self.catalog)

    def day_view(self) -> DayView:
        log = self.database.history
        date_key = self.selected_date

        sections = []
        for category in Category.ordered():
            items = [
                DayItemView(item=item, completed=log.is_completed(date_key, item.id))
                for item in items_in_category(category, self.catalog)
            ]
            sections.append((category, items))

        return DayView(
            date=date_key,
            is_today=self.is_today_selected(),
            percent=analytics.completion_percent(log, date_key, self.catalog),
            done=analytics.done_count(log, date_key, self.catalog),
            total=len(self.catalog),
            sections=sections,
            reflection=self.database.get_reflection(date_key),
            can_reflect=self.can_offer_reflection()
        )

    def dashboard(self) -> DashboardView:
        log = self.database.history
        now = self.now()
        date_key = self.selected_date

        return DashboardView(
            date=date_key,
            is_today=self.is_today_selected(),
            percent=analytics.completion_percent(log, date_key, self.catalog),
            streak=analytics.calculate_streak(log, now, self.catalog),
            next_task=analytics.next_upcoming_task(log, date_key, now, self.catalog),
            weekly=analytics.weekly_trend(log, now, self.catalog),
            categories=analytics.category_efficiency(log, date_key, self.catalog)
        )

    def analytics_view(self) -> AnalyticsView:
        return AnalyticsView(
            snapshot=self.snapshot(),
            monthly=analytics.monthly_trend(self.database.history, self.now(), self.catalog),
            insight=self.ai_insight or FallbackResponseProvider.INSIGHT_PLACEHOLDER,
            is_ai_loading=self.is_ai_loading
        )

    # ===== AI =====

    def can_offer_reflection(self) -> bool:
        """Сохранение достижения предлагается при 100% и отсутствии рефлексии"""
        date_key = self.selected_date
        percent = analytics.completion_percent(self.database.history, date_key, self.catalog)
        return percent == 100 and self.database.get_reflection(date_key) is None

    def begin_reflection(self) -> bool:
        """Занимает слот рефлексии; False если генерация уже идёт"""
        if self.is_reflecting:
            return False
        self.is_reflecting = True
        return True

    def end_reflection(self):
        self.is_reflecting = False

    def begin_review(self) -> bool:
        """Занимает слот разбора; False если разбор уже идёт"""
        if self.is_ai_loading:
            return False
        self.is_ai_loading = True
        return True

    def end_review(self):
        self.is_ai_loading = False

    async def generate_daily_reflection(self, date_key: Optional[str] = None) -> Optional[str]:
        """Рефлексия для выбранного дня; дата фиксируется до ожидания ответа.

        Если слот уже занят вызывающим через begin_reflection, освобождает его тоже вызывающий.
        """
        date_key = date_key or self.selected_date
        completed = self.database.get_completed(date_key)
        labels = [item.activity for item in self.catalog if item.id in completed]
        if not labels:
            return None

        started = self.begin_reflection()
        try:
            text = await self.ai_service.generate_daily_reflection(labels)
        finally:
            if started:
                self.end_reflection()

        if not self.database.set_reflection(date_key, text):
            logger.warning(f"Reflection for {date_key} kept in memory only")
        return text

    async def generate_ai_report(self) -> str:
        """Разбор прогресса в эфемерный слот инсайта"""
        started = self.begin_review()
        try:
            text = await self.ai_service.generate_performance_review(
                self.snapshot(),
                done_today=len(self.completed_ids() & {item.id for item in self.catalog}),
                catalog_size=len(self.catalog)
            )
        finally:
            if started:
                self.end_review()

        self.ai_insight = text
        return text

    # ===== EXPORT =====

    def export_payload(self) -> Dict[str, Any]:
        return build_export_payload(
            self.database.history,
            self.database.reflections,
            self.snapshot(),
            self.now()
        )

    def export_document(self) -> Tuple[str, Dict[str, Any], bytes]:
        """Имя файла, данные и содержимое JSON-экспорта; копия пишется в export_dir"""
        now = self.now()
        payload = self.export_payload()

        if self.export_dir is not None:
            try:
                path = write_export_file(payload, self.export_dir, now)
                logger.info(f"Export copy written to {path}")
            except OSError as e:
                logger.warning(f"Could not write export copy: {e}")

        return export_filename(now), payload, serialize_export(payload)

    def restore_from_export(self, raw: bytes) -> bool:
        """Замена обоих журналов содержимым экспорта; False если запись не удалась"""
        history, reflections = parse_export(raw)
        return self.database.replace_all(history, reflections)
