"""
Data export commands
Команды экспорта и восстановления данных
"""

from telegram.ext import Application, CallbackQueryHandler, CommandHandler, MessageHandler, ContextTypes, filters
from telegram import Update
import io
import logging

from core.models import ValidationError
from handlers.utils import get_service
from ui.messages import SAVE_WARNING, export_caption
from utils.decorators import owner_only

logger = logging.getLogger(__name__)

async def send_export(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Отправка JSON-бэкапа документом"""
    service = get_service(context)
    filename, payload, content = service.export_document()

    document = io.BytesIO(content)
    document.name = filename

    await update.effective_message.reply_document(
        document=document,
        filename=filename,
        caption=export_caption(payload, filename),
        parse_mode="HTML"
    )
    logger.info(f"Export sent: {filename} ({len(content)} bytes)")

@owner_only
async def export_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Команда /export - экспорт данных"""
    await send_export(update, context)

@owner_only
async def export_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.callback_query.answer("Preparing backup...")
    await send_export(update, context)

@owner_only
async def restore_document(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Восстановление из присланного .json бэкапа"""
    service = get_service(context)
    document = update.message.document

    telegram_file = await document.get_file()
    raw = bytes(await telegram_file.download_as_bytearray())

    try:
        saved = service.restore_from_export(raw)
    except ValidationError as e:
        logger.warning(f"Rejected backup {document.file_name}: {e}")
        await update.message.reply_text(f"❌ Not a valid backup: {e}")
        return

    history = service.database.history
    reflections = service.database.reflections
    await update.message.reply_text(
        f"♻️ Restored {len(history)} days and {len(reflections)} reflections."
    )
    if not saved:
        await update.message.reply_text(SAVE_WARNING)

def register_export_handlers(application: Application):
    application.add_handler(CommandHandler("export", export_command))
    application.add_handler(CallbackQueryHandler(export_callback, pattern="^export$"))
    application.add_handler(MessageHandler(filters.Document.FileExtension("json"), restore_document))
