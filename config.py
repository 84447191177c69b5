#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RoutineCheck v1.0 - Configuration
Централизованная конфигурация из переменных окружения с валидацией

Версия: 1.0.0
Дата: 2026-10-18
"""

import os
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass
from enum import Enum

import pytz

from utils.datetime_utils import get_timezone

class Environment(Enum):
    """Среды выполнения"""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"

class LogLevel(Enum):
    """Уровни логирования"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

@dataclass
class StorageConfig:
    """Конфигурация хранилища журналов"""
    data_dir: Path
    export_dir: Path
    save_retries: int = 1

@dataclass
class AIConfig:
    """Конфигурация генерации текстов"""
    openai_api_key: Optional[str]
    openai_model: str = "gpt-4o-mini"
    openai_max_tokens: int = 200
    ai_enabled: bool = True
    request_timeout: int = 30
    max_retries: int = 3

@dataclass
class TelegramConfig:
    """Конфигурация Telegram бота"""
    bot_token: Optional[str]
    owner_user_id: Optional[int] = None
    drop_pending_updates: bool = True

class RoutineConfig:
    """Главный класс конфигурации"""

    def __init__(self):
        self.environment = Environment(os.getenv('ENVIRONMENT', 'development'))
        self._load_config()
        self._validate_config()

    def _load_config(self):
        """Загрузка конфигурации из переменных окружения"""

        owner_id = os.getenv('OWNER_USER_ID')
        self.telegram = TelegramConfig(
            bot_token=os.getenv('BOT_TOKEN'),
            owner_user_id=int(owner_id) if owner_id else None,
            drop_pending_updates=_env_flag('DROP_PENDING_UPDATES', True)
        )

        # Директории
        self.data_dir = Path(os.getenv('DATA_DIR', 'data'))
        self.export_dir = Path(os.getenv('EXPORT_DIR', 'exports'))
        self.log_dir = Path(os.getenv('LOG_DIR', 'logs'))

        self.storage = StorageConfig(
            data_dir=self.data_dir,
            export_dir=self.export_dir,
            save_retries=int(os.getenv('SAVE_RETRIES', 1))
        )

        openai_key = os.getenv('OPENAI_API_KEY')
        self.ai = AIConfig(
            openai_api_key=openai_key or None,
            openai_model=os.getenv('OPENAI_MODEL', 'gpt-4o-mini'),
            openai_max_tokens=int(os.getenv('OPENAI_MAX_TOKENS', 200)),
            ai_enabled=_env_flag('AI_ENABLED', True),
            request_timeout=int(os.getenv('AI_TIMEOUT', 30)),
            max_retries=int(os.getenv('AI_MAX_RETRIES', 3))
        )

        # Часовой пояс для ключей дат; пусто - локальная зона процесса
        self.timezone_name = os.getenv('TIMEZONE') or None

        # Логирование
        self.log_level = LogLevel(os.getenv('LOG_LEVEL', 'INFO').upper())
        self.log_to_file = _env_flag('LOG_TO_FILE', True)
        self.log_format = os.getenv(
            'LOG_FORMAT',
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        )

    def _validate_config(self):
        """Валидация конфигурации"""
        errors = []

        if self.storage.save_retries < 0:
            errors.append("SAVE_RETRIES must not be negative")

        if self.ai.request_timeout <= 0:
            errors.append("AI_TIMEOUT must be positive")

        if self.ai.max_retries < 1:
            errors.append("AI_MAX_RETRIES must be at least 1")

        if self.timezone_name:
            try:
                pytz.timezone(self.timezone_name)
            except pytz.UnknownTimeZoneError:
                errors.append(f"Unknown TIMEZONE: {self.timezone_name}")

        if self.telegram.owner_user_id is not None and self.telegram.owner_user_id <= 0:
            errors.append("OWNER_USER_ID must be a positive number")

        if errors:
            raise ValueError("Configuration errors:\n" + "\n".join(f"• {error}" for error in errors))

    def require_bot_token(self) -> str:
        """Токен нужен только для запуска бота"""
        if not self.telegram.bot_token:
            raise ValueError("Required environment variable BOT_TOKEN is not set")
        return self.telegram.bot_token

    def ensure_directories(self):
        """Создание необходимых директорий"""
        for directory in (self.data_dir, self.export_dir, self.log_dir):
            directory.mkdir(parents=True, exist_ok=True)

    @property
    def ai_available(self) -> bool:
        return bool(self.ai.ai_enabled and self.ai.openai_api_key)

    def get_timezone(self):
        return get_timezone(self.timezone_name)

    def get_logging_config(self) -> Dict[str, Any]:
        """Получение конфигурации логирования для dictConfig"""
        handlers = ['console']
        if self.log_to_file:
            handlers.append('file')

        handler_configs: Dict[str, Any] = {
            'console': {
                'class': 'logging.StreamHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'stream': sys.stdout
            }
        }
        if self.log_to_file:
            handler_configs['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'filename': str(self.log_dir / f"routinecheck_{self.environment.value}.log"),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }

        quiet = {'level': 'WARNING', 'handlers': handlers, 'propagate': False}

        return {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.log_format,
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': handler_configs,
            'loggers': {
                '': {
                    'level': self.log_level.value,
                    'handlers': handlers,
                    'propagate': False
                },
                'httpx': dict(quiet),
                'telegram': dict(quiet),
                'openai': dict(quiet)
            }
        }

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация конфигурации (без секретов)"""
        token = self.telegram.bot_token
        return {
            'environment': self.environment.value,
            'telegram': {
                'bot_token': token[:10] + "..." if token else None,
                'owner_user_id': self.telegram.owner_user_id
            },
            'storage': {
                'data_dir': str(self.data_dir),
                'export_dir': str(self.export_dir),
                'save_retries': self.storage.save_retries
            },
            'ai_available': self.ai_available,
            'ai_model': self.ai.openai_model,
            'timezone': self.timezone_name or 'local',
            'log_level': self.log_level.value
        }

def _env_flag(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')

# Глобальный экземпляр конфигурации
config = RoutineConfig()
