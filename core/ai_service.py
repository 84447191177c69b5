#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RoutineCheck v1.0 - AI Service
Генерация коротких текстов (рефлексия дня, разбор прогресса) с фоллбеками

Генерация best-effort: любая ошибка провайдера превращается в Unavailable
и заменяется фиксированной строкой, пользователь ошибок не видит.

Версия: 1.0.0
Дата: 2026-10-18
"""

import asyncio
import time
from datetime import datetime
from typing import Dict, List, Optional, Any, Protocol, Sequence, Union
from dataclasses import dataclass, field
from enum import Enum
import logging

import openai
from openai import AsyncOpenAI

from core.analytics import AnalyticsSnapshot

logger = logging.getLogger(__name__)

# ===== EXCEPTIONS =====

class AIServiceError(Exception):
    """Базовое исключение для AI сервиса"""
    pass

class AIProviderError(AIServiceError):
    """Ошибка провайдера AI"""
    pass

# ===== ENUMS =====

class AIProvider(Enum):
    """Провайдеры AI"""
    OPENAI = "openai"
    FALLBACK = "fallback"

class PromptTemplate(Enum):
    """Шаблоны промптов"""
    DAILY_REFLECTION = "daily_reflection"
    PERFORMANCE_REVIEW = "performance_review"

# ===== RESULTS =====

@dataclass(frozen=True)
class Summary:
    """Успешно сгенерированный текст"""
    text: str

@dataclass(frozen=True)
class Unavailable:
    """Генерация не удалась"""
    reason: str = "unavailable"

SummaryResult = Union[Summary, Unavailable]

def resolve_text(result: SummaryResult, fallback: str, empty_fallback: Optional[str] = None) -> str:
    """Перевод результата в текст для пользователя"""
    if isinstance(result, Summary):
        text = result.text.strip()
        if text:
            return text
        return empty_fallback if empty_fallback is not None else fallback
    return fallback

# ===== STATS =====

@dataclass
class AIStats:
    """Статистика AI сервиса"""
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    average_response_time_ms: float = 0.0
    requests_by_type: Dict[str, int] = field(default_factory=dict)
    last_failure: Optional[str] = None

    @property
    def success_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return (self.successful_requests / self.total_requests) * 100

    def record(self, template: PromptTemplate, result: SummaryResult, response_time_ms: int) -> None:
        self.total_requests += 1
        type_key = template.value
        self.requests_by_type[type_key] = self.requests_by_type.get(type_key, 0) + 1

        if isinstance(result, Summary):
            self.successful_requests += 1
            total_time = self.average_response_time_ms * (self.successful_requests - 1)
            self.average_response_time_ms = (total_time + response_time_ms) / self.successful_requests
        else:
            self.failed_requests += 1
            self.last_failure = result.reason

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_requests': self.total_requests,
            'successful_requests': self.successful_requests,
            'failed_requests': self.failed_requests,
            'average_response_time_ms': round(self.average_response_time_ms, 2),
            'success_rate': round(self.success_rate, 2),
            'requests_by_type': self.requests_by_type,
            'last_failure': self.last_failure
        }

# ===== SUMMARIZERS =====

class Summarizer(Protocol):
    """Удалённый генератор текста"""

    async def summarize(self, prompt: str) -> SummaryResult:
        ...

class StaticSummarizer:
    """Заглушка, когда AI отключён: всегда Unavailable"""

    def __init__(self, reason: str = "AI is not configured"):
        self.reason = reason

    async def summarize(self, prompt: str) -> SummaryResult:
        return Unavailable(self.reason)

class OpenAISummarizer:
    """Генерация через OpenAI Chat Completions с повторами"""

    def __init__(self, client: AsyncOpenAI, model: str, max_tokens: int = 200,
                 timeout: int = 30, max_retries: int = 3, retry_delay: float = 1.0):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay

    async def summarize(self, prompt: str) -> SummaryResult:
        try:
            text = await self._request(prompt)
            return Summary(text)
        except AIServiceError as e:
            logger.warning(f"Summarizer unavailable: {e}")
            return Unavailable(str(e))
        except Exception as e:
            logger.error(f"Unexpected summarizer error: {e}")
            return Unavailable(f"unexpected error: {e}")

    async def _request(self, prompt: str) -> str:
        messages = [{"role": "user", "content": prompt}]

        for attempt in range(self.max_retries):
            try:
                response = await self.client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    max_tokens=self.max_tokens,
                    temperature=0.8,
                    timeout=self.timeout
                )
                if not response.choices:
                    raise AIProviderError("OpenAI returned no choices")
                content = response.choices[0].message.content
                return (content or "").strip()

            except openai.RateLimitError:
                logger.warning(f"OpenAI rate limit hit, attempt {attempt + 1}")
                if attempt < self.max_retries - 1:
                    await asyncio.sleep(self.retry_delay * (2 ** attempt))
                else:
                    raise AIProviderError("OpenAI rate limit exceeded")

            except openai.APITimeoutError:
                logger.warning(f"OpenAI timeout, attempt {attempt + 1}")
                if attempt < self.max_retries - 1:
                    await asyncio.sleep(self.retry_delay)
                else:
                    raise AIProviderError("OpenAI request timeout")

            except openai.APIError as e:
                logger.warning(f"OpenAI API error on attempt {attempt + 1}: {e}")
                if attempt < self.max_retries - 1:
                    await asyncio.sleep(self.retry_delay)
                else:
                    raise AIProviderError(f"OpenAI API failed: {e}")

        raise AIProviderError("OpenAI request failed")

def create_summarizer(ai_config) -> Summarizer:
    """Выбор генератора по конфигурации"""
    if not ai_config.ai_enabled:
        logger.info("AI generation disabled by configuration")
        return StaticSummarizer("AI is disabled")

    if not ai_config.openai_api_key:
        logger.warning("OpenAI API key not configured, using fallback texts")
        return StaticSummarizer()

    client = AsyncOpenAI(api_key=ai_config.openai_api_key, timeout=ai_config.request_timeout)
    logger.info(f"OpenAI summarizer initialized ({ai_config.openai_model})")
    return OpenAISummarizer(
        client,
        model=ai_config.openai_model,
        max_tokens=ai_config.openai_max_tokens,
        timeout=ai_config.request_timeout,
        max_retries=ai_config.max_retries
    )

# ===== PROMPT MANAGER =====

class PromptManager:
    """Менеджер промптов с шаблонами"""

    def __init__(self):
        self.templates: Dict[PromptTemplate, str] = self._load_templates()

    def _load_templates(self) -> Dict[PromptTemplate, str]:
        return {
            PromptTemplate.DAILY_REFLECTION: (
                "I completed these tasks today: {completed_tasks}. "
                "Write a very brief, high-energy success summary (1-2 sentences) "
                "of my day to save in my archive. Use emojis."
            ),
            PromptTemplate.PERFORMANCE_REVIEW: (
                "Schedule: 5AM to 12AM. Python, College and Fitness focus. "
                "30-day avg: {average}%. Streak: {streak}. Today: {done_today}/{catalog_size}. "
                "Provide a sharp motivational analysis. One tip to maintain the streak. "
                "Use emojis. 2 sentences max."
            )
        }

    def get_prompt(self, template: PromptTemplate, **kwargs) -> str:
        return self.templates[template].format(**kwargs)

# ===== FALLBACK RESPONSES =====

class FallbackResponseProvider:
    """Фиксированные тексты на случай недоступности AI"""

    REFLECTION_FAILURE = "Another day of progress stored in the archives! 🚀"
    REFLECTION_EMPTY = "Day completed with excellence! 🌟"
    REVIEW_FAILURE = "Crushing your goals! Python and fitness are the ultimate combo. 🐍🏋️‍♂️"
    INSIGHT_PLACEHOLDER = "Log your day and generate an AI insight here!"

    def for_template(self, template: PromptTemplate) -> str:
        if template == PromptTemplate.DAILY_REFLECTION:
            return self.REFLECTION_FAILURE
        return self.REVIEW_FAILURE

    def for_empty(self, template: PromptTemplate) -> str:
        if template == PromptTemplate.DAILY_REFLECTION:
            return self.REFLECTION_EMPTY
        return self.REVIEW_FAILURE

# ===== MAIN AI SERVICE =====

class AIService:
    """Сервис генерации рефлексий и разборов прогресса"""

    def __init__(self, summarizer: Summarizer):
        self.summarizer = summarizer
        self.prompt_manager = PromptManager()
        self.fallback_provider = FallbackResponseProvider()
        self.stats = AIStats()

    @property
    def provider(self) -> AIProvider:
        if isinstance(self.summarizer, StaticSummarizer):
            return AIProvider.FALLBACK
        return AIProvider.OPENAI

    async def _generate(self, template: PromptTemplate, **kwargs) -> str:
        prompt = self.prompt_manager.get_prompt(template, **kwargs)
        start_time = time.time()

        result = await self.summarizer.summarize(prompt)

        self.stats.record(template, result, int((time.time() - start_time) * 1000))
        if isinstance(result, Unavailable):
            logger.info(f"Using fallback text for {template.value}: {result.reason}")

        return resolve_text(
            result,
            fallback=self.fallback_provider.for_template(template),
            empty_fallback=self.fallback_provider.for_empty(template)
        )

    async def generate_daily_reflection(self, completed_labels: Sequence[str]) -> str:
        """Короткое резюме дня по списку выполненных задач"""
        return await self._generate(
            PromptTemplate.DAILY_REFLECTION,
            completed_tasks=", ".join(completed_labels)
        )

    async def generate_performance_review(self, snapshot: AnalyticsSnapshot,
                                          done_today: int, catalog_size: int) -> str:
        """Мотивирующий разбор по серии, среднему и сегодняшнему прогрессу"""
        return await self._generate(
            PromptTemplate.PERFORMANCE_REVIEW,
            average=snapshot.average_completion,
            streak=snapshot.streak,
            done_today=done_today,
            catalog_size=catalog_size
        )

    def get_stats(self) -> Dict[str, Any]:
        return {
            'service': self.stats.to_dict(),
            'provider': self.provider.value,
            'checked_at': datetime.now().isoformat()
        }

# ===== CONVENIENCE FUNCTIONS =====

def create_ai_service(ai_config) -> AIService:
    """Создать AI сервис"""
    return AIService(create_summarizer(ai_config))

# ===== EXPORT =====

__all__ = [
    'AIServiceError',
    'AIProviderError',
    'AIProvider',
    'PromptTemplate',
    'Summary',
    'Unavailable',
    'SummaryResult',
    'resolve_text',
    'AIStats',
    'Summarizer',
    'StaticSummarizer',
    'OpenAISummarizer',
    'create_summarizer',
    'PromptManager',
    'FallbackResponseProvider',
    'AIService',
    'create_ai_service',
]
