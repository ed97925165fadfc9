"""
Structured Logging Configuration

Single-line console logging for every module, with an optional plain-text
file sink. Records emitted while a pathway is being served carry that
pathway's slug.

Usage:
    from pharmacy_first.utils import get_logger, pathway_context

    logger = get_logger(__name__)
    with pathway_context("otitis-externa"):
        logger.info("Answer rejected")   # ... [pathway=otitis-externa] Answer rejected
"""
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Iterator, Optional

NO_PATHWAY = "-"

# ── Per-request pathway slug (copied into asyncio.to_thread workers) ───────
_pathway_var: ContextVar[Optional[str]] = ContextVar("_pathway", default=None)


@contextmanager
def pathway_context(slug: str) -> Iterator[None]:
    """Tag every record logged inside the block with `slug`."""
    token = _pathway_var.set(slug)
    try:
        yield
    finally:
        _pathway_var.reset(token)


def current_pathway() -> Optional[str]:
    return _pathway_var.get()


class PathwayContextFilter(logging.Filter):
    """Stamps `record.pathway` so both sinks can format it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.pathway = _pathway_var.get() or NO_PATHWAY
        return True


class StructuredFormatter(logging.Formatter):
    """UTC timestamp, level, logger name, pathway (when set), message."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'
    }

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, timezone.utc).isoformat()

        if self.use_color:
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            reset = self.COLORS['RESET']
        else:
            color = reset = ""

        pathway = getattr(record, "pathway", NO_PATHWAY)
        context = f"[pathway={pathway}] " if pathway != NO_PATHWAY else ""

        log_message = (
            f"{color}[{timestamp}] "
            f"{record.levelname:8} "
            f"[{record.name}] "
            f"{context}{record.getMessage()}{reset}"
        )

        if record.exc_info:
            log_message += f"\n{self.formatException(record.exc_info)}"

        return log_message


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure application-wide logging.

    Unknown level names fall back to INFO. Colour is used only when stdout
    is a terminal.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    context_filter = PathwayContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.addFilter(context_filter)
    console_handler.setFormatter(StructuredFormatter(use_color=sys.stdout.isatty()))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.addFilter(context_filter)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)s | %(name)s | %(pathway)s | %(message)s'
        ))
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
