"""Logging utility functions for artifact import operations."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, NoReturn, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from rich.console import Console, Group, RenderableType
from rich.logging import RichHandler
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from artifact_import.common import SENSITIVE_URL_PARAMS, LogLevel

_logger: Optional[logging.Logger] = None
_console = Console()

REDACTED = "REDACTED"


def get_logger() -> logging.Logger:
    """Get the global artifact import logger instance."""
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger


class ImportLogFileFormatter(logging.Formatter):
    """Custom formatter for artifact import log files"""

    def format(self, record):
        # Second precision, same layout as the console
        record.asctime = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")

        # Log files get the message without Rich markup
        message = record.getMessage()
        clean_message = Text.from_markup(message).plain

        # Fixed-width level column
        formatted = f"{record.asctime} | {record.levelname:<8} | {clean_message}"
        return formatted


def _setup_file_logging() -> Path:
    """Return the path of a new timestamped log file."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_dir = Path(__file__).parent.parent / "logs"
    log_dir.mkdir(exist_ok=True)
    return log_dir / f"artifact_import_{timestamp}.log"


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """
    Set up console and file logging.

    Args:
        log_level: Minimum console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    global _logger

    # One named logger for the whole package
    logger = logging.getLogger("artifact_import")
    logger.setLevel(logging.DEBUG)

    # Clear any existing handlers
    logger.handlers.clear()

    # Rich console output, markup enabled for log_message symbols
    console_handler = RichHandler(
        console=_console,
        show_time=True,
        omit_repeated_times=False,
        show_path=False,
        rich_tracebacks=True,
        markup=True,
        log_time_format="[%Y-%m-%d %H:%M:%S]",
    )
    console_handler.setLevel(getattr(logging, log_level.upper()))
    logger.addHandler(console_handler)

    # Always log everything to file
    log_file = _setup_file_logging()
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(ImportLogFileFormatter())
    logger.addHandler(file_handler)

    # Keep records away from the root logger
    logger.propagate = False

    logger.info(
        f"Log file: {log_file}",
    )

    _logger = logger
    return logger


def log_message(level: LogLevel, message: str) -> None:
    """
    Log a message.

    Args:
        level: Log level (mapped to standard logging levels)
        message: Message to log
    """
    logger = get_logger()

    # SUCCESS has no stdlib level of its own
    level_mapping = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.SUCCESS: logging.INFO,
        LogLevel.WARN: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
    }

    log_level = level_mapping.get(level, logging.INFO)

    # Prefix symbols are rich markup, stripped again in the log file
    if level == LogLevel.SUCCESS:
        logger.info(f"[bright_green]✓[/bright_green] {message}")
    elif level == LogLevel.ERROR:
        logger.error(f"[bright_red]✗[/bright_red] {message}")
    elif level == LogLevel.WARN:
        logger.warning(f"[yellow]⚠[/yellow] {message}")
    else:
        logger.log(log_level, message)


def log_section(title: str, section_level: int = 1) -> None:
    """
    Log a section header with formatting based on section level.

    Args:
        title: The title of the section
        section_level: Integer indicating the section level (1 for main, 2+ for subsections)
    """
    _console.print(Rule(title, style="blue", characters="─" if section_level == 1 else "-"))


def log_step(step_number: int, total_steps: int, description: str) -> None:
    """Log a step in a multi-step process."""
    logger = get_logger()
    logger.info(f"[bold blue]Step {step_number}/{total_steps}:[/bold blue] {description}")


def redact_url(url: str) -> str:
    """
    Replace credential-bearing query parameters of a pre-signed URL.

    Args:
        url: URL that may carry a signature

    Returns:
        str: The same URL with signature, credential and token values masked
    """
    parts = urlsplit(url)
    if not parts.query:
        return url

    # Parameter names are matched case-insensitively
    sensitive = {name.lower() for name in SENSITIVE_URL_PARAMS}
    query = [
        (name, REDACTED if name.lower() in sensitive else value)
        for name, value in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(query, safe="/")))


def error_and_exit(*parts: RenderableType, code: int) -> NoReturn:
    """
    Display an error message and exit the application.

    Args:
        *parts: Renderable parts to display in the error message.
        code: Exit code to use when exiting.
    """
    logger = get_logger()

    # Rules are redrawn in red
    processed_parts = []
    for part in parts:
        if isinstance(part, Rule):
            processed_part = Rule(title=part.title, align=part.align, characters=part.characters, style="red")
        elif isinstance(part, str):
            processed_part = Text.from_markup(part)
            logger.error(f"Fatal error (exit code {code}): {processed_part}")
        else:
            processed_part = part
        processed_parts.append(processed_part)

    # Panel goes to the console only; the log file got the lines above
    group = Group(*processed_parts)
    _console.print(Panel(group, title="[bold red]Error[/bold red]", border_style="red", padding=(1, 2)))

    # The panel must be visible before the process exits
    _console.file.flush()

    sys.exit(code)


def display_summary(title: str, items: Dict) -> None:
    """Display a summary panel with key-value pairs."""
    logger = get_logger()
    logger.info(f"[bold cyan]{title}[/bold cyan]")

    for key, value in items.items():
        logger.info(f"  [bold]{key}:[/bold] {value}")

    # Same items again as a panel
    content = "\n".join([f"[bold]{key}:[/bold] {value}" for key, value in items.items()])
    panel = Panel(content, title=title, border_style="cyan", padding=(1, 2))
    _console.print(panel)
