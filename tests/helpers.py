import asyncio
from datetime import datetime

from core.ai_service import AIService, Summary, Unavailable
from core.database import MemoryStore, RoutineDatabase
from services.routine_service import RoutineService


class FixedClock:
    """Часы с ручным управлением"""

    def __init__(self, moment: datetime):
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment


class FakeSummarizer:
    """Отдаёт заранее заданные результаты и запоминает промпты"""

    def __init__(self, *results):
        self.results = list(results)
        self.prompts = []

    async def summarize(self, prompt):
        self.prompts.append(prompt)
        if not self.results:
            return Unavailable("no scripted result")
        result = self.results.pop(0)
        if isinstance(result, str):
            return Summary(result)
        return result


class GatedSummarizer:
    """Ждёт разрешения перед ответом"""

    def __init__(self, text):
        self.text = text
        self.release = asyncio.Event()
        self.prompts = []

    async def summarize(self, prompt):
        self.prompts.append(prompt)
        await self.release.wait()
        return Summary(self.text)


def make_service(moment, summarizer=None, store=None, export_dir=None):
    store = store if store is not None else MemoryStore()
    database = RoutineDatabase(store)
    service = RoutineService(
        database=database,
        ai_service=AIService(summarizer or FakeSummarizer()),
        clock=FixedClock(moment),
        export_dir=export_dir
    )
    return service, store
