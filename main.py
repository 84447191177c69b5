#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RoutineCheck v1.0 - Telegram бот
Личный трекер ежедневного распорядка: чек-лист, серии, аналитика и AI-итоги дня

Версия: 1.0.0
Дата: 2026-10-18
"""

import asyncio
import logging
import signal
import sys
from typing import Optional

from telegram import Update
from telegram.error import Conflict, TimedOut, NetworkError
from telegram.ext import Application

from bot.application import build_application
from config import config, RoutineConfig
from core.ai_service import create_ai_service
from core.database import create_database
from services.routine_service import RoutineService
from utils.datetime_utils import make_clock
from utils.logger import setup_logging

logger = logging.getLogger("routinecheck")

# ===== БОТ =====

class RoutineCheckBot:
    """Сборка сервиса и жизненный цикл polling"""

    def __init__(self, app_config: RoutineConfig):
        self.config = app_config
        self.application: Optional[Application] = None
        self.service: Optional[RoutineService] = None
        self._stop_event = asyncio.Event()

    def setup_bot(self):
        """Создание базы, AI сервиса и Application"""
        token = self.config.require_bot_token()
        logger.info(f"Configuration: {self.config.to_dict()}")
        self.config.ensure_directories()

        database = create_database(self.config.storage.data_dir, self.config.storage.save_retries)
        ai_service = create_ai_service(self.config.ai)
        self.service = RoutineService(
            database=database,
            ai_service=ai_service,
            clock=make_clock(self.config.get_timezone()),
            export_dir=self.config.storage.export_dir
        )

        self.application = build_application(token, self.service, self.config.telegram.owner_user_id)
        self.application.add_error_handler(self._error_handler)

        total_handlers = sum(len(handlers) for handlers in self.application.handlers.values())
        logger.info(f"✅ {total_handlers} handlers registered, AI provider: {ai_service.provider.value}")

    async def start_polling(self):
        """Запуск polling до сигнала остановки"""
        try:
            logger.info("🎯 Starting polling...")
            await self.application.initialize()
            await self.application.start()
            await self.application.updater.start_polling(
                drop_pending_updates=self.config.telegram.drop_pending_updates,
                allowed_updates=['message', 'callback_query'],
            )
            logger.info("✅ Polling started")
            await self._stop_event.wait()
        finally:
            await self._stop()

    def request_stop(self):
        self._stop_event.set()

    async def _error_handler(self, update: object, context):
        """Обработчик ошибок"""
        error = context.error

        if isinstance(error, Conflict):
            logger.error(f"getUpdates conflict, another instance is polling: {error}")
        elif isinstance(error, (TimedOut, NetworkError)):
            logger.warning(f"⚠️ Temporary network error: {error}")
        else:
            logger.error("❌ Unexpected error while handling update", exc_info=error)

            if isinstance(update, Update) and update.effective_user:
                try:
                    if update.callback_query:
                        await update.callback_query.answer("⚠️ Temporary error. Please try again.")
                    elif update.effective_message:
                        await update.effective_message.reply_text(
                            "⚠️ Temporary error. Please try again in a few seconds."
                        )
                except (TimedOut, NetworkError) as e:
                    logger.warning(f"Could not report error to user: {e}")

    async def _stop(self):
        """Остановка бота"""
        if self.service and self.service.database.has_unsaved_changes:
            logger.info("💾 Flushing unsaved changes before shutdown...")
            if not self.service.database.flush():
                logger.error("Some changes could not be saved")

        if self.service:
            logger.info(f"Storage stats: {self.service.database.get_stats()}")
            logger.info(f"AI stats: {self.service.ai_service.get_stats()}")

        if self.application:
            if self.application.updater and self.application.updater.running:
                await self.application.updater.stop()
            if self.application.running:
                await self.application.stop()
            await self.application.shutdown()
            logger.info("🛑 Bot stopped")

# ===== ГЛАВНАЯ ФУНКЦИЯ =====

async def main():
    """Главная функция запуска бота"""
    setup_logging(config)
    bot = RoutineCheckBot(config)

    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, bot.request_stop)
        except NotImplementedError:
            # Windows
            signal.signal(signum, lambda *_: bot.request_stop())

    bot.setup_bot()
    await bot.start_polling()

# ===== ТОЧКА ВХОДА =====

def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("👋 Stopped by user")
    except Exception as e:
        logger.critical(f"💥 Fatal error: {e}", exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    run()
