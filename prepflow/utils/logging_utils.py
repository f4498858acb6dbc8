"""
Logging helpers shared by the preprocessing step and the HTTP surface.
"""

import logging
import os
from logging import Handler
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from typing import Optional

# Get logger for preprocessing actions
preprocess_logger = logging.getLogger("preprocess_actions")


def log_preprocess_action(
    action: str, success: bool = True, details: Optional[str] = None
) -> None:
    """
    Log preprocessing-related actions for monitoring and debugging

    Args:
        action: The action being performed
        success: Whether the action succeeded
        details: Additional details about the action
    """
    level = logging.INFO if success else logging.ERROR
    message = f"Action: {action}"

    if details:
        message += f" | Details: {details}"

    if not success:
        message += " | Status: FAILED"
    else:
        message += " | Status: SUCCESS"

    preprocess_logger.log(level, message)


def setup_universal_logging(
    log_file: str = "logs/prepflow.log",
    log_level: str = "INFO",
    rotation_type: str = "size",
    rotation_when: str | None = None,
    rotation_interval: int = 1,
    max_bytes: int = 50 * 1024 * 1024,
    backup_count: int = 10,
    console_log_level: str = "WARNING",
) -> None:
    """
    Configure the root logger with a rotating file handler and a rich console.

    Args:
        log_file: Path to log file (creates directory if needed)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console_log_level: Logging level for console output
    """
    log_dir = os.path.dirname(log_file)
    if log_dir:  # Only create if there's actually a directory path
        os.makedirs(log_dir, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Remove all existing handlers to prevent duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    try:
        file_handler: Handler
        if rotation_type and rotation_type.lower() in ("time", "timed"):
            file_handler = TimedRotatingFileHandler(
                filename=log_file,
                when=rotation_when or "midnight",
                interval=rotation_interval,
                backupCount=backup_count,
                encoding="utf-8",
            )
        elif os.name == "nt":
            # RotatingFileHandler trips over file locking on Windows
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        else:
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        file_handler.setLevel(getattr(logging, log_level.upper(), logging.INFO))
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)8s] %(name)s: %(message)s "
                "[%(filename)s:%(lineno)d in %(funcName)s()]"
            )
        )
        root_logger.addHandler(file_handler)
    except (OSError, IOError) as e:
        print(f"Warning: Could not setup file logging to {log_file}: {e}")

    from rich.logging import RichHandler

    console_handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=True,
        show_path=False,
    )
    console_handler.setLevel(
        getattr(logging, console_log_level.upper(), logging.WARNING)
    )
    root_logger.addHandler(console_handler)

    # === NOISE REDUCTION ===
    for logger_name in ("httpx", "httpcore", "multipart", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.info(
        f"Universal logging initialized. Log file: {log_file}, Level: {log_level}"
    )
