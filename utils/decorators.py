import functools
import logging

OWNER_KEY = "OWNER_USER_ID"

logger = logging.getLogger(__name__)

def owner_only(func):
    """Пропускает апдейты только от владельца, если OWNER_USER_ID задан"""
    @functools.wraps(func)
    async def wrapper(update, context, *args, **kwargs):
        owner_id = context.bot_data.get(OWNER_KEY)
        user = update.effective_user
        if owner_id is not None and (user is None or user.id != owner_id):
            logger.warning(f"Ignored update from non-owner {user.id if user else None}")
            if update.callback_query:
                await update.callback_query.answer("⛔️ This tracker is private.", show_alert=True)
            elif update.effective_message:
                await update.effective_message.reply_text("⛔️ This tracker is private.")
            return
        return await func(update, context, *args, **kwargs)
    return wrapper
