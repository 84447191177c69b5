#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RoutineCheck v1.0 - Core Package
Каталог распорядка, журналы, аналитика, хранилище и AI сервис

Версия: 1.0.0
Дата: 2026-10-18
"""

from .models import (
    ValidationError,
    CompletionLog,
    ReflectionLog
)

from .catalog import (
    Category,
    RoutineItem,
    ROUTINE_DEFINITIONS
)

from .analytics import (
    AnalyticsSnapshot,
    build_snapshot
)

from .database import (
    RoutineDatabase,
    create_database
)

from .ai_service import (
    AIService,
    create_ai_service
)

__version__ = "1.0.0"

__all__ = [
    'ValidationError',
    'CompletionLog',
    'ReflectionLog',
    'Category',
    'RoutineItem',
    'ROUTINE_DEFINITIONS',
    'AnalyticsSnapshot',
    'build_snapshot',
    'RoutineDatabase',
    'create_database',
    'AIService',
    'create_ai_service',
]
