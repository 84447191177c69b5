# handlers/commands/analytics.py

from telegram.ext import Application, CommandHandler, ContextTypes
from telegram import Update

from handlers.utils import get_service, render_analytics, show_screen
from utils.decorators import owner_only

@owner_only
async def stats_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    text, markup = render_analytics(get_service(context))
    await show_screen(update, text, markup)

def register_analytics_handlers(application: Application):
    application.add_handler(CommandHandler(["stats", "analytics"], stats_command))
