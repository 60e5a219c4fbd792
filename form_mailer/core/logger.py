"""Centralized logging configuration for form mailer.

Provides a logger factory with file rotation, console output and
consistent formatting across the mailer, the SMTP client and the API.

Features:
    - Dual output: Console (stdout) + File handlers
    - Automatic log file rotation (size and backups from settings)
    - Separate error log
    - Configurable log levels per module
    - Startup configuration summary with masked credentials

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from form_mailer.config.settings import MailerSettings

# Global configuration
_ROOT_LOGGER: logging.Logger | None = None
_LOG_DIR = Path.cwd() / "logs"
_LOG_FORMAT_DETAILED = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
)
_LOG_FORMAT_SIMPLE = "%(asctime)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Module-level logger configuration
_MODULE_LEVELS = {
    "form_mailer.mailer": logging.DEBUG,
    "form_mailer.clients": logging.DEBUG,
    "form_mailer.session": logging.INFO,
    "form_mailer.api": logging.INFO,
    "form_mailer.config": logging.INFO,
}

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "magenta": "\033[35m",
}

_summary_printed = False


def _mask_password(password: str) -> str:
    """Mask password for display, showing only first and last char.

    Args:
        password: Password to mask.

    Returns:
        Masked password string.
    """
    if not password:
        return "(not set)"
    if len(password) <= 2:
        return "***"
    return f"{password[0]}{'*' * (len(password) - 2)}{password[-1]}"


def print_config_summary(settings: "MailerSettings") -> None:
    """Print a formatted configuration summary, once per process.

    Args:
        settings: MailerSettings instance with loaded configuration.
    """
    global _summary_printed  # noqa: PLW0603
    if _summary_printed:
        return
    _summary_printed = True

    c = COLORS

    def _line(label: str, value: str, color: str = "cyan") -> None:
        print(f"  {c['dim']}│{c['reset']} {label:<22} {c[color]}{value}{c['reset']}")

    def _header(title: str, color: str) -> None:
        print(f"\n  {c[color]}▶ {title}{c['reset']}")
        print(f"  {c['dim']}├{'─' * 50}{c['reset']}")

    print(f"{c['dim']}{'─' * 72}{c['reset']}")
    print(f"{c['cyan']}{c['bold']}  {settings.SERVICE_NAME} {settings.SERVICE_VERSION}{c['reset']}")
    print(f"{c['dim']}{'─' * 72}{c['reset']}")

    _header("Service", "green")
    _line("Host", settings.API_HOST)
    _line("Port", str(settings.API_PORT))
    _line("Ajax Mode", str(settings.MAILER_AJAX_MODE).lower())

    _header("SMTP", "magenta")
    _line("Host", settings.SMTP_HOST)
    _line("Port", str(settings.SMTP_PORT))
    _line("Security", settings.SMTP_SECURE)
    _line("User", settings.SMTP_USER or "(not set)", "yellow" if not settings.SMTP_USER else "cyan")
    _line("Password", _mask_password(settings.SMTP_PASSWORD), "yellow" if not settings.SMTP_PASSWORD else "cyan")
    _line("Recipient", settings.MAIL_TO or "(not set)", "yellow" if not settings.MAIL_TO else "cyan")
    _line("Timeout", f"{settings.SMTP_TIMEOUT}s")

    _header("Logging", "yellow")
    _line("Level", settings.LOG_LEVEL, "green")
    _line("Log to File", str(settings.LOG_TO_FILE).lower())
    _line("Directory", settings.LOG_DIR)
    print(f"\n{c['dim']}{'─' * 72}{c['reset']}\n")


def setup_logging(
    log_dir: Path | str | None = None,
    log_level: str = "INFO",
    file_level: str = "DEBUG",
    console_level: str = "INFO",
    enable_file: bool = True,
    max_size_mb: int = 10,
    backup_count: int = 5,
    settings: Optional["MailerSettings"] = None,
) -> None:
    """Configure root logger with file and console handlers.

    Should be called once at application startup (the API lifespan or a script's main).

    Args:
        log_dir: Directory for log files. Defaults to ./logs.
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file_level: File handler level (usually DEBUG for comprehensive logging).
        console_level: Console handler level (usually INFO to reduce noise).
        enable_file: Whether to write logs to files.
        max_size_mb: Size of a log file before it is rotated.
        backup_count: Number of rotated files to keep.
        settings: Optional MailerSettings for printing configuration summary.

    Example:
        setup_logging(
            log_level="INFO",
            console_level="WARNING",  # Only show warnings and errors on console
            settings=config,
        )
    """
    global _ROOT_LOGGER, _LOG_DIR

    _LOG_DIR = Path(log_dir) if log_dir else Path.cwd() / "logs"

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, console_level.upper(), logging.INFO))
    console_handler.setFormatter(logging.Formatter(_LOG_FORMAT_SIMPLE, datefmt=_DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if enable_file:
        _LOG_DIR.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            _LOG_DIR / "form_mailer.log",
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(getattr(logging, file_level.upper(), logging.DEBUG))
        file_handler.setFormatter(logging.Formatter(_LOG_FORMAT_DETAILED, datefmt=_DATE_FORMAT))
        root_logger.addHandler(file_handler)

        # Errors also go to form_mailer.error.log
        error_handler = logging.handlers.RotatingFileHandler(
            _LOG_DIR / "form_mailer.error.log",
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(logging.Formatter(_LOG_FORMAT_DETAILED, datefmt=_DATE_FORMAT))
        root_logger.addHandler(error_handler)

    for module_name, level in _MODULE_LEVELS.items():
        logging.getLogger(module_name).setLevel(level)

    _ROOT_LOGGER = root_logger

    if settings:
        print_config_summary(settings)


def get_logger(name: str, log_level: str | None = None) -> logging.Logger:
    """Get a logger instance for a module.

    Call setup_logging() once at startup for full configuration.

    Args:
        name: Logger name (typically __name__ of calling module).
        log_level: Optional override for logger level (DEBUG, INFO, WARNING, ERROR).

    Returns:
        Logger instance ready for use.

    Example:
        from form_mailer.core.logger import get_logger

        logger = get_logger(__name__)
        logger.info("Contact form received")
    """
    logger = logging.getLogger(name)

    if log_level:
        logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    return logger


def log_context(
    operation: str,
    recipient: str | None = None,
    **kwargs,
) -> str:
    """Format a log context string with metadata.

    Args:
        operation: Operation name (e.g., "send", "check_token").
        recipient: Recipient email if applicable.
        **kwargs: Additional context key-value pairs.

    Returns:
        Formatted context string for logging.

    Example:
        msg = log_context("send", recipient="inbox@example.com", sender="a@b.com")
        logger.info(f"Starting: {msg}")
        # Output: Starting: send | →inbox@example.com (sender=a@b.com)
    """
    context_parts = [operation]

    if recipient:
        context_parts.append(f"→{recipient}")

    context = " | ".join(context_parts)

    if kwargs:
        extra = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        context = f"{context} ({extra})"

    return context
