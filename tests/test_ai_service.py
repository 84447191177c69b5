import unittest
from types import SimpleNamespace

import httpx
import openai

from core.ai_service import (
    AIProvider, AIService, FallbackResponseProvider, OpenAISummarizer, StaticSummarizer,
    Summary, Unavailable, create_summarizer, resolve_text
)
from core.analytics import AnalyticsSnapshot
from config import AIConfig
from tests.helpers import FakeSummarizer


def _response(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeCompletions:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def _timeout_error():
    return openai.APITimeoutError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))


class ResolveTextTests(unittest.TestCase):

    def test_summary_text_is_stripped(self):
        self.assertEqual(resolve_text(Summary("  Great day!  "), "fallback"), "Great day!")

    def test_empty_summary_uses_empty_fallback(self):
        self.assertEqual(resolve_text(Summary("   "), "fallback", "empty"), "empty")
        self.assertEqual(resolve_text(Summary(""), "fallback"), "fallback")

    def test_unavailable_uses_fallback(self):
        self.assertEqual(resolve_text(Unavailable("down"), "fallback", "empty"), "fallback")


class AIServiceTests(unittest.IsolatedAsyncioTestCase):

    async def test_reflection_uses_summary_and_prompt_lists_tasks(self):
        summarizer = FakeSummarizer("Crushed it! 🚀")
        service = AIService(summarizer)

        text = await service.generate_daily_reflection(["Gym Workout", "College Hours"])

        self.assertEqual(text, "Crushed it! 🚀")
        self.assertIn("Gym Workout, College Hours", summarizer.prompts[0])

    async def test_reflection_failure_fallback(self):
        service = AIService(FakeSummarizer(Unavailable("boom")))
        text = await service.generate_daily_reflection(["Dinner"])
        self.assertEqual(text, FallbackResponseProvider.REFLECTION_FAILURE)

    async def test_reflection_empty_response_fallback(self):
        service = AIService(FakeSummarizer(""))
        text = await service.generate_daily_reflection(["Dinner"])
        self.assertEqual(text, "Day completed with excellence! 🌟")

    async def test_review_prompt_and_fallback(self):
        summarizer = FakeSummarizer(Unavailable("offline"))
        service = AIService(summarizer)
        snapshot = AnalyticsSnapshot(average_completion=64, streak=5, total_tasks_done=40)

        text = await service.generate_performance_review(snapshot, done_today=7, catalog_size=12)

        self.assertEqual(text, FallbackResponseProvider.REVIEW_FAILURE)
        self.assertIn("30-day avg: 64%", summarizer.prompts[0])
        self.assertIn("Streak: 5", summarizer.prompts[0])
        self.assertIn("Today: 7/12", summarizer.prompts[0])

    async def test_stats_are_recorded(self):
        service = AIService(FakeSummarizer("ok", Unavailable("down")))
        await service.generate_daily_reflection(["A"])
        await service.generate_daily_reflection(["A"])

        stats = service.get_stats()["service"]
        self.assertEqual(stats["total_requests"], 2)
        self.assertEqual(stats["successful_requests"], 1)
        self.assertEqual(stats["last_failure"], "down")

    async def test_static_summarizer_is_fallback_provider(self):
        service = AIService(StaticSummarizer())
        self.assertEqual(service.provider, AIProvider.FALLBACK)
        self.assertEqual(
            await service.generate_daily_reflection(["A"]),
            FallbackResponseProvider.REFLECTION_FAILURE
        )


class OpenAISummarizerTests(unittest.IsolatedAsyncioTestCase):

    async def test_returns_message_content(self):
        completions = FakeCompletions(_response(" Nice work "))
        summarizer = OpenAISummarizer(_client(completions), model="gpt-4o-mini")

        result = await summarizer.summarize("prompt")

        self.assertEqual(result, Summary("Nice work"))
        self.assertEqual(completions.calls[0]["model"], "gpt-4o-mini")
        self.assertEqual(completions.calls[0]["messages"], [{"role": "user", "content": "prompt"}])

    async def test_none_content_becomes_empty_summary(self):
        summarizer = OpenAISummarizer(_client(FakeCompletions(_response(None))), model="m")
        self.assertEqual(await summarizer.summarize("p"), Summary(""))

    async def test_no_choices_is_unavailable(self):
        completions = FakeCompletions(SimpleNamespace(choices=[]))
        summarizer = OpenAISummarizer(_client(completions), model="m", max_retries=1)
        self.assertIsInstance(await summarizer.summarize("p"), Unavailable)

    async def test_timeout_is_retried(self):
        completions = FakeCompletions(_timeout_error(), _response("Back online"))
        summarizer = OpenAISummarizer(_client(completions), model="m", max_retries=2, retry_delay=0)

        self.assertEqual(await summarizer.summarize("p"), Summary("Back online"))
        self.assertEqual(len(completions.calls), 2)

    async def test_exhausted_retries_are_unavailable(self):
        completions = FakeCompletions(_timeout_error(), _timeout_error())
        summarizer = OpenAISummarizer(_client(completions), model="m", max_retries=2, retry_delay=0)
        self.assertIsInstance(await summarizer.summarize("p"), Unavailable)

    async def test_unexpected_error_is_unavailable(self):
        completions = FakeCompletions(RuntimeError("socket closed"))
        summarizer = OpenAISummarizer(_client(completions), model="m")
        result = await summarizer.summarize("p")
        self.assertIsInstance(result, Unavailable)
        self.assertIn("socket closed", result.reason)


class CreateSummarizerTests(unittest.TestCase):

    def test_disabled_or_missing_key_gives_static(self):
        self.assertIsInstance(create_summarizer(AIConfig(openai_api_key="sk-test", ai_enabled=False)), StaticSummarizer)
        self.assertIsInstance(create_summarizer(AIConfig(openai_api_key=None)), StaticSummarizer)

    def test_key_gives_openai(self):
        summarizer = create_summarizer(AIConfig(openai_api_key="sk-test", openai_model="gpt-4o-mini"))
        self.assertIsInstance(summarizer, OpenAISummarizer)
        self.assertEqual(summarizer.model, "gpt-4o-mini")
