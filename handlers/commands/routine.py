# handlers/commands/routine.py

from telegram.ext import Application, CommandHandler, ContextTypes
from telegram import Update

from core.models import ValidationError
from handlers.utils import get_service, render_day, render_dashboard, show_screen
from utils.decorators import owner_only

@owner_only
async def today_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/today [YYYY-MM-DD] - чек-лист дня"""
    service = get_service(context)
    if context.args:
        try:
            service.select_date(context.args[0])
        except ValidationError:
            await update.message.reply_text("Use a date like 2024-01-15.")
            return
    else:
        service.select_date(service.today_key())

    text, markup = render_day(service)
    await show_screen(update, text, markup)

@owner_only
async def dashboard_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    text, markup = render_dashboard(get_service(context))
    await show_screen(update, text, markup)

def register_routine_handlers(application: Application):
    application.add_handler(CommandHandler(["today", "daily"], today_command))
    application.add_handler(CommandHandler("dashboard", dashboard_command))
