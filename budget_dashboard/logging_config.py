import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from .config import LOG_FILE, LOG_LEVEL

APP_LOGGER_NAME = "budget_dashboard"


def setup_logging(
    app_log_level: Optional[str] = None,
    third_party_log_level: str = "WARNING",
    log_file: Optional[str] = None,
    max_file_size: int = 5 * 1024 * 1024,  # 5MB
    backup_count: int = 3,
) -> logging.Logger:
    """
    Set up logging configuration for the budget dashboard.

    Args:
        app_log_level: Log level for application logs (default: config.LOG_LEVEL)
        third_party_log_level: Log level for third-party libraries
        log_file: Optional log file path. If None, config.LOG_FILE is used;
            when that is unset too, logs only go to the console
        max_file_size: Maximum size of log file before rotation (bytes)
        backup_count: Number of backup log files to keep

    Returns:
        Logger instance for the application
    """
    app_log_level = app_log_level or LOG_LEVEL
    log_file = log_file or LOG_FILE

    app_level = getattr(logging, app_log_level.upper(), logging.INFO)
    third_party_level = getattr(logging, third_party_log_level.upper(), logging.WARNING)

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(app_level)

    # Clear any existing handlers to avoid duplicates on Streamlit reruns
    app_logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(app_level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count
        )
        file_handler.setLevel(app_level)
        file_handler.setFormatter(formatter)
        app_logger.addHandler(file_handler)

    for logger_name in ("streamlit", "matplotlib", "urllib3", "tornado.access"):
        logging.getLogger(logger_name).setLevel(third_party_level)

    app_logger.propagate = False

    return app_logger


def get_logger(name: str = APP_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance for the specified module.

    Args:
        name: Logger name (typically ``__name__``)

    Returns:
        Logger instance nested under the application logger
    """
    if name == APP_LOGGER_NAME or name.startswith(f"{APP_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")
