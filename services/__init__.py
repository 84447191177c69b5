# services/__init__.py

"""
Модуль сервисов RoutineCheck v1.0

Сервис распорядка (выбранная дата, отметки, AI-итоги) и экспорт данных.
"""

from .data_export import (
    EXPORT_PREFIX,
    export_filename,
    build_export_payload,
    serialize_export,
    write_export_file,
    parse_export
)
from .routine_service import (
    RoutineService,
    ToggleResult,
    DayItemView,
    DayView,
    DashboardView,
    AnalyticsView
)

__all__ = [
    'EXPORT_PREFIX',
    'export_filename',
    'build_export_payload',
    'serialize_export',
    'write_export_file',
    'parse_export',
    'RoutineService',
    'ToggleResult',
    'DayItemView',
    'DayView',
    'DashboardView',
    'AnalyticsView',
]
