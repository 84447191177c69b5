# handlers/commands/basic.py

from telegram.ext import Application, CommandHandler, ContextTypes
from telegram import Update

from ui.keyboards import main_menu_keyboard
from ui.messages import welcome_message, help_message
from utils.decorators import owner_only

@owner_only
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    user = update.effective_user
    await update.message.reply_html(
        welcome_message(user.first_name if user else None),
        reply_markup=main_menu_keyboard()
    )

@owner_only
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.message.reply_html(help_message())

def register_basic_handlers(application: Application):
    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(CommandHandler("help", help_command))
