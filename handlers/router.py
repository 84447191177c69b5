# handlers/router.py

from telegram.ext import Application

# Импорт всех обработчиков (команды, callbacks, документы)
from handlers.commands.basic import register_basic_handlers
from handlers.commands.routine import register_routine_handlers
from handlers.commands.analytics import register_analytics_handlers
from handlers.commands.ai import register_ai_handlers
from handlers.commands.export_data import register_export_handlers

from handlers.callbacks.main_menu import register_main_menu_callbacks
from handlers.callbacks.tasks import register_tasks_callbacks
from handlers.callbacks.ai import register_ai_callbacks

def register_handlers(application: Application):
    """Подключает все обработчики в Application"""
    register_basic_handlers(application)
    register_routine_handlers(application)
    register_analytics_handlers(application)
    register_ai_handlers(application)
    register_export_handlers(application)

    register_main_menu_callbacks(application)
    register_tasks_callbacks(application)
    register_ai_callbacks(application)
