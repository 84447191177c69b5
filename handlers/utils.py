# ===== handlers/utils.py =====
from telegram import Update
from telegram.error import BadRequest
from telegram.ext import ContextTypes
import logging

from services.routine_service import RoutineService
from ui.keyboards import day_keyboard, dashboard_keyboard, analytics_keyboard
from ui.messages import day_message, dashboard_message, analytics_message
from utils.text_utils import ALERT_LIMIT, truncate

SERVICE_KEY = "routine_service"

logger = logging.getLogger(__name__)

def get_service(context: ContextTypes.DEFAULT_TYPE) -> RoutineService:
    return context.bot_data[SERVICE_KEY]

# Экраны
def render_day(service: RoutineService, is_reflecting: bool = False):
    view = service.day_view()
    return day_message(view), day_keyboard(view, is_reflecting or service.is_reflecting)

def render_dashboard(service: RoutineService):
    view = service.dashboard()
    return dashboard_message(view), dashboard_keyboard(view.next_task is not None)

def render_analytics(service: RoutineService, is_ai_loading: bool = False):
    view = service.analytics_view()
    view.is_ai_loading = view.is_ai_loading or is_ai_loading
    return analytics_message(view), analytics_keyboard(view.is_ai_loading)

async def notify(update: Update, text: str):
    """Короткое уведомление: всплывающее для кнопок, сообщение для команд"""
    if update.callback_query:
        await update.callback_query.answer(truncate(text, ALERT_LIMIT))
    else:
        await update.effective_message.reply_text(text)

async def show_screen(update: Update, text: str, reply_markup=None):
    """Редактирует сообщение под кнопкой или отправляет новое"""
    query = update.callback_query
    if query is None:
        return await update.effective_message.reply_html(text, reply_markup=reply_markup)

    try:
        return await query.edit_message_text(text, parse_mode="HTML", reply_markup=reply_markup)
    except BadRequest as e:
        if "not modified" in str(e).lower():
            logger.debug("Screen unchanged, skipping edit")
            return None
        raise
