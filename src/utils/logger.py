"""Logging configuration and utilities."""

import logging
import logging.handlers
import os
from pathlib import Path
from config.settings import settings

# Console output is disabled while the TUI owns the terminal
_console_enabled = True


class ControllerContextFilter(logging.Filter):
    """Filter to add controller context to log records."""

    def __init__(self):
        super().__init__()
        self.controller = None

    def set_controller_context(self, controller: str):
        """Set the controller context for this filter."""
        self.controller = controller

    def filter(self, record):
        """Add controller context to the log record."""
        record.controller = self.controller or 'unknown'
        return True


def get_logger(name: str, controller: str = None) -> logging.Logger:
    """Get configured logger instance with optional controller context."""
    logger = logging.getLogger(name)

    if not logger.handlers:
        level = getattr(logging, str(settings.get('logging.level', 'INFO')).upper(), logging.INFO)
        logger.setLevel(level)
        logger.propagate = False

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - [%(controller)s] - %(levelname)s - %(message)s'
        )

        if _console_enabled:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(level)
            console_handler.setFormatter(formatter)
            console_handler.addFilter(ControllerContextFilter())
            logger.addHandler(console_handler)

        log_file = settings.get('logging.file', 'logs/clashtui.log')
        log_dir = os.path.dirname(log_file)
        if log_dir:
            Path(log_dir).mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=settings.get('logging.max_bytes', 10485760),
            backupCount=settings.get('logging.backup_count', 5)
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(ControllerContextFilter())
        logger.addHandler(file_handler)

    if controller:
        update_logger_controller_context(logger, controller)

    return logger


def update_logger_controller_context(logger: logging.Logger, controller: str):
    """Update the controller context for an existing logger."""
    for handler in logger.handlers:
        for filter_obj in handler.filters:
            if isinstance(filter_obj, ControllerContextFilter):
                filter_obj.set_controller_context(controller)


def suppress_console_logging():
    """Detach console handlers from all loggers; file logging continues."""
    global _console_enabled
    _console_enabled = False

    for logger in logging.Logger.manager.loggerDict.values():
        if not isinstance(logger, logging.Logger):
            continue
        for handler in list(logger.handlers):
            # RotatingFileHandler is itself a StreamHandler subclass
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                logger.removeHandler(handler)
