import logging
import logging.config

def setup_logging(app_config) -> logging.Logger:
    """Настройка логирования по конфигурации (консоль + ротация файла)"""
    if app_config.log_to_file:
        app_config.log_dir.mkdir(exist_ok=True, parents=True)
    logging.config.dictConfig(app_config.get_logging_config())
    return logging.getLogger("routinecheck")
