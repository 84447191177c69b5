from telegram.ext import Application, ApplicationBuilder
from typing import Optional
import logging

from handlers.router import register_handlers
from handlers.utils import SERVICE_KEY
from services.routine_service import RoutineService
from utils.decorators import OWNER_KEY

logger = logging.getLogger(__name__)

def build_application(token: str, service: RoutineService, owner_id: Optional[int] = None) -> Application:
    # Создание Application
    application = (
        ApplicationBuilder()
        .token(token)
        .concurrent_updates(True)  # AI-запросы не блокируют отметки
        .build()
    )

    application.bot_data[SERVICE_KEY] = service
    application.bot_data[OWNER_KEY] = owner_id

    register_handlers(application)
    logger.info(f"Application built, owner restriction: {'on' if owner_id else 'off'}")
    return application
