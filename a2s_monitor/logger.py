# a2s_monitor/logger.py

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from a2s_monitor.config import Config
from a2s_monitor.singleton import Singleton

# Корень иерархии: клиент A2S, опросчик и медиатор пишут в дочерние "app.*"
LOGGER_NAME = "app"
LOG_FORMAT = "[%(asctime)s][%(levelname)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# ANSI цвета
COLORS = {
    'DEBUG': '\033[36m',  # Cyan
    'INFO': '\033[32m',  # Green
    'WARNING': '\033[33m',  # Yellow
    'ERROR': '\033[31m',  # Red
    'CRITICAL': '\033[1;31m',  # Bold red
    'RESET': '\033[0m'
}


class ColoredFormatter(logging.Formatter):

    def format(self, record):
        color = COLORS.get(record.levelname, COLORS['RESET'])
        orig_fmt = self._style._fmt
        try:
            self._style._fmt = f"{color}{orig_fmt}{COLORS['RESET']}"
            return super().format(record)
        finally:
            self._style._fmt = orig_fmt


class Logger(Singleton):
    """
    Настраивает логгер "app" по секции LOG конфига один раз за процесс:
      LOG_FILE, LEVEL_FILE_LOG, LEVEL_CONSOLE_LOG, MAIN_LEVEL_LOG,
      BACKUP_DAYS (ротация в полночь), CONSOLE_COLORS.
    Экземпляр проксирует вызовы (info, warning, ...) в настроенный logging.Logger.
    """

    def __init__(self, config=None):
        if hasattr(self, '_initialized'):
            return

        config = config or Config()
        log_file = config.get("LOG.LOG_FILE", "./logs/app.log")
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)

        self._logger = logging.getLogger(LOGGER_NAME)
        self._logger.setLevel(config.get("LOG.MAIN_LEVEL_LOG", "INFO"))
        self._logger.propagate = False

        if not self._logger.handlers:
            file_handler = TimedRotatingFileHandler(
                log_file,
                when="midnight",
                backupCount=int(config.get("LOG.BACKUP_DAYS", 14)),
                encoding="utf-8"
            )
            file_handler.setLevel(config.get("LOG.LEVEL_FILE_LOG", "INFO"))
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

            console_handler = logging.StreamHandler()
            console_handler.setLevel(config.get("LOG.LEVEL_CONSOLE_LOG", "INFO"))
            formatter_cls = ColoredFormatter if config.get("LOG.CONSOLE_COLORS", True) else logging.Formatter
            console_handler.setFormatter(formatter_cls(LOG_FORMAT, datefmt=DATE_FORMAT))

            self._logger.addHandler(file_handler)
            self._logger.addHandler(console_handler)

        self._initialized = True

    def __getattr__(self, name):
        # Вызывается только для отсутствующих атрибутов: debug/info/.../handlers
        if name == "_logger":
            raise AttributeError(name)
        return getattr(self._logger, name)


class LoggerMixin:
    """
    Даёт классу self.logger - дочерний логгер "app.<ИмяКласса>".
    Не требует инициализированного Logger(): без обработчиков записи просто уходят в "app".
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.logger = logging.getLogger(f"{LOGGER_NAME}.{type(self).__name__}")
