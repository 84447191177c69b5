# handlers/callbacks/main_menu.py

from telegram.ext import Application, CallbackQueryHandler, ContextTypes
from telegram import Update

from handlers.utils import get_service, render_analytics, render_dashboard, render_day, show_screen
from utils.decorators import owner_only

SCREENS = {
    "dashboard": render_dashboard,
    "daily": render_day,
    "analytics": render_analytics,
}

@owner_only
async def view_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()
    screen = query.data.split(":", 1)[1]
    text, markup = SCREENS[screen](get_service(context))
    await show_screen(update, text, markup)

def register_main_menu_callbacks(application: Application):
    application.add_handler(CallbackQueryHandler(view_callback, pattern="^view:(dashboard|daily|analytics)$"))
