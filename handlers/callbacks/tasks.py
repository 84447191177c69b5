# handlers/callbacks/tasks.py

from telegram.ext import Application, CallbackQueryHandler, ContextTypes
from telegram import Update
import logging

from handlers.utils import get_service, render_day, show_screen
from ui.messages import SAVE_WARNING, toggle_notice
from utils.decorators import owner_only

logger = logging.getLogger(__name__)

@owner_only
async def toggle_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Отметка задачи на выбранную дату"""
    query = update.callback_query
    service = get_service(context)
    task_id = query.data.split(":", 1)[1]

    result = service.toggle_task(task_id)
    await query.answer(toggle_notice(result) if result.persisted else SAVE_WARNING)

    text, markup = render_day(service)
    await show_screen(update, text, markup)

@owner_only
async def nav_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Переход между днями; дальше сегодняшнего дня не уходит"""
    query = update.callback_query
    service = get_service(context)
    step = query.data.split(":", 1)[1]

    if step == "today":
        service.select_date(service.today_key())
    else:
        service.shift_selected_date(int(step))
    await query.answer()

    text, markup = render_day(service)
    await show_screen(update, text, markup)

def register_tasks_callbacks(application: Application):
    application.add_handler(CallbackQueryHandler(toggle_callback, pattern=r"^toggle:.+$"))
    application.add_handler(CallbackQueryHandler(nav_callback, pattern=r"^nav:(today|-?1)$"))
