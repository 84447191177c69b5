# handlers/callbacks/ai.py

from telegram.ext import Application, CallbackQueryHandler, ContextTypes
from telegram import Update

from handlers.commands.ai import run_reflection, run_review
from utils.decorators import owner_only

@owner_only
async def reflect_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await run_reflection(update, context)

@owner_only
async def review_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await run_review(update, context)

def register_ai_callbacks(application: Application):
    application.add_handler(CallbackQueryHandler(reflect_callback, pattern="^reflect$", block=False))
    application.add_handler(CallbackQueryHandler(review_callback, pattern="^review$", block=False))
