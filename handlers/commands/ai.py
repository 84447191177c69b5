# handlers/commands/ai.py

from telegram.ext import Application, CommandHandler, ContextTypes
from telegram import Update
import logging

from handlers.utils import get_service, notify, render_analytics, render_day, show_screen
from ui.messages import SAVE_WARNING, insight_message, reflection_message
from utils.decorators import owner_only

logger = logging.getLogger(__name__)

NOTHING_LOGGED = "Log at least one task before saving the day."

async def run_reflection(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Генерация и сохранение рефлексии выбранного дня (команда и кнопка)"""
    service = get_service(context)
    # Слот занимается до первого await
    if not service.begin_reflection():
        await notify(update, "⏳ Already logging this day...")
        return

    date_key = service.selected_date
    query = update.callback_query
    status = None
    try:
        if service.day_view().done == 0:
            await notify(update, NOTHING_LOGGED)
            return

        if query:
            await query.answer()
            text, markup = render_day(service, is_reflecting=True)
            await show_screen(update, text, markup)
        else:
            status = await update.message.reply_text("⏳ Logging your day...")

        reflection = await service.generate_daily_reflection(date_key)
    finally:
        service.end_reflection()

    if reflection is None:
        # задачи сняты, пока ждали ответа
        if query:
            text, markup = render_day(service)
            await show_screen(update, text, markup)
        else:
            await status.edit_text(NOTHING_LOGGED)
        return
    logger.info(f"Reflection stored for {date_key}")

    if query:
        text, markup = render_day(service)
        await show_screen(update, text, markup)
    else:
        await status.edit_text(reflection_message(date_key, reflection), parse_mode="HTML")

    if service.database.has_unsaved_changes:
        await update.effective_message.reply_text(SAVE_WARNING)

async def run_review(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """AI-разбор прогресса в слот инсайта (команда и кнопка)"""
    service = get_service(context)
    if not service.begin_review():
        await notify(update, "⏳ Already analyzing...")
        return

    query = update.callback_query
    status = None
    try:
        if query:
            await query.answer()
            text, markup = render_analytics(service, is_ai_loading=True)
            await show_screen(update, text, markup)
        else:
            status = await update.message.reply_text("⏳ Analyzing your progress...")

        insight = await service.generate_ai_report()
    finally:
        service.end_review()

    if query:
        text, markup = render_analytics(service)
        await show_screen(update, text, markup)
    else:
        await status.edit_text(insight_message(insight), parse_mode="HTML")

@owner_only
async def reflect_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await run_reflection(update, context)

@owner_only
async def review_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await run_review(update, context)

def register_ai_handlers(application: Application):
    # block=False: отметки задач обрабатываются, пока идёт генерация
    application.add_handler(CommandHandler("reflect", reflect_command, block=False))
    application.add_handler(CommandHandler("review", review_command, block=False))
