"""
Colored console logging for the topology pipeline and its CLI.

Messages carry a timestamp, a colored level tag and optional key=value
context. The table and zone summary helpers render the CLI report.
"""

import sys
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, TextIO
from colorama import Fore, Style, init

init(autoreset=True)


class LogLevel(Enum):
    """Enumeration for different log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


LEVEL_ORDER = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARNING: 2,
    LogLevel.ERROR: 3,
}

# (color, symbol) per level
LEVEL_STYLES = {
    LogLevel.DEBUG: (Fore.CYAN, "🔍"),
    LogLevel.INFO: (Fore.GREEN, "ℹ️"),
    LogLevel.WARNING: (Fore.YELLOW, "⚠️"),
    LogLevel.ERROR: (Fore.RED, "❌"),
}


def _context_suffix(context: Dict[str, object]) -> str:
    if not context:
        return ""
    details = " | ".join(f"{key}={value}" for key, value in context.items())
    return f" {Style.DIM}({details}){Style.RESET_ALL}"


def _columns(values: List[object], widths: List[int], joiner: str = " | ") -> str:
    return joiner.join(f"{str(value):<{width}}" for value, width in zip(values, widths))


class Logger:
    """
    Console logger with a minimum level.

    Errors go to stderr, everything else to stdout. Report helpers
    (section, tables, zone summary) print only at INFO or below.
    """

    def __init__(self, name: str = "NetworkTopology", min_level: LogLevel = LogLevel.INFO):
        self.name = name
        self.min_level = min_level

    def _enabled(self, level: LogLevel) -> bool:
        return LEVEL_ORDER[level] >= LEVEL_ORDER[self.min_level]

    def _emit(self, tag: str, message: str, context: Dict[str, object],
              stream: Optional[TextIO] = None) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S")
        line = f"{Style.DIM}[{timestamp}]{Style.RESET_ALL} {tag}{Style.RESET_ALL} {message}"
        print(line + _context_suffix(context), file=stream or sys.stdout)

    def _log(self, level: LogLevel, message: str, **context) -> None:
        if not self._enabled(level):
            return
        color, symbol = LEVEL_STYLES[level]
        stream = sys.stderr if level is LogLevel.ERROR else sys.stdout
        self._emit(f"{color}{symbol} {level.value:<7}", message, context, stream)

    def debug(self, message: str, **context) -> None:
        self._log(LogLevel.DEBUG, message, **context)

    def info(self, message: str, **context) -> None:
        self._log(LogLevel.INFO, message, **context)

    def warning(self, message: str, **context) -> None:
        self._log(LogLevel.WARNING, message, **context)

    def error(self, message: str, exception: Optional[Exception] = None, **context) -> None:
        """Log an error, appending the exception type and text when given."""
        if exception is not None:
            context["exception"] = f"{type(exception).__name__}: {exception}"
        self._log(LogLevel.ERROR, message, **context)

    def success(self, message: str, **context) -> None:
        if self._enabled(LogLevel.INFO):
            self._emit(f"{Fore.GREEN}✅ SUCCESS", f"{Style.BRIGHT}{message}{Style.RESET_ALL}", context)

    def section(self, title: str) -> None:
        if not self._enabled(LogLevel.INFO):
            return
        rule = "=" * 60
        print(f"\n{Fore.BLUE}{Style.BRIGHT}{rule}\n  {title.upper()}\n{rule}{Style.RESET_ALL}\n")

    def table_header(self, headers: List[str], widths: List[int]) -> None:
        if not self._enabled(LogLevel.INFO):
            return
        print(f"{Style.BRIGHT}{_columns(headers, widths)}{Style.RESET_ALL}")
        print(f"{Style.DIM}{_columns(['-' * width for width in widths], widths, '-+-')}{Style.RESET_ALL}")

    def table_row(self, values: List[object], widths: List[int], highlight: bool = False) -> None:
        """Print one table row; highlighted rows are rendered bright."""
        if not self._enabled(LogLevel.INFO):
            return
        row = _columns(values, widths)
        print(f"{Style.BRIGHT}{row}{Style.RESET_ALL}" if highlight else row)

    def zone_summary(self, zone_counts: Dict[str, int], public_ip_devices: int) -> None:
        """
        Print the device count of each zone followed by the public IP count.

        Args:
            zone_counts: Zone name to member device count, in zone order
            public_ip_devices: Devices flagged with a public IP
        """
        if not self._enabled(LogLevel.INFO):
            return
        print(f"\n{Fore.CYAN}{Style.BRIGHT}🌐 ZONE SUMMARY{Style.RESET_ALL}")
        for label, count in [*zone_counts.items(), ("Public IPs", public_ip_devices)]:
            print(f"  {label:<14} {Style.BRIGHT}{count}{Style.RESET_ALL}")
        print()


# Shared instance; its level is the default for loggers made by get_logger
logger = Logger()


def set_log_level(level: LogLevel) -> None:
    """Set the level of the shared logger and of loggers created afterwards."""
    logger.min_level = level


def get_logger(name: str = "NetworkTopology") -> Logger:
    return Logger(name, min_level=logger.min_level)
