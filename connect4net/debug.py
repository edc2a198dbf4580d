"""
debug.py - Process-wide logging for a Connect Four peer

A single DebugManager (the module-level ``debug``) wraps the standard logging
module. Messages are tagged with the component that wrote them ("board",
"channel", "session", ...) so output can be narrowed to one subsystem.
Network rounds run on worker threads, so records include the thread name.

The starting level can be set with the CONNECT4NET_DEBUG environment variable.
"""

import logging
import os
import sys
from enum import Enum
from typing import Iterable, Optional, Set


class DebugLevel(Enum):
    NONE = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5


TRACE_LEVEL = logging.DEBUG - 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

LEVEL_MAP = {
    DebugLevel.NONE: logging.CRITICAL + 10,  # above anything we emit
    DebugLevel.ERROR: logging.ERROR,
    DebugLevel.WARNING: logging.WARNING,
    DebugLevel.INFO: logging.INFO,
    DebugLevel.DEBUG: logging.DEBUG,
    DebugLevel.TRACE: TRACE_LEVEL,
}

LOG_FORMAT = '%(asctime)s %(levelname)-7s %(threadName)s %(name)s: %(message)s'

ENV_DEBUG_LEVEL = "CONNECT4NET_DEBUG"


def parse_level(level_str: str) -> Optional[DebugLevel]:
    """Map a case-insensitive level name to a DebugLevel; None if unknown."""
    try:
        return DebugLevel[level_str.strip().upper()]
    except KeyError:
        return None


class ComponentFilter(logging.Filter):
    """Pass only records whose component is in the allowed set (empty = all)."""

    def __init__(self):
        super().__init__()
        self.allowed: Set[str] = set()

    def filter(self, record: logging.LogRecord) -> bool:
        component = getattr(record, "component", None)
        return not (self.allowed and component and component not in self.allowed)


class DebugManager:
    """Owns the package logger, its handlers and the component filter."""

    def __init__(self, logger_name: str = "connect4net"):
        self._level = DebugLevel.WARNING
        self._enabled = True
        self._filter = ComponentFilter()
        self._file_handler: Optional[logging.FileHandler] = None

        self._logger = logging.getLogger(logger_name)
        self._logger.propagate = False
        self._logger.setLevel(LEVEL_MAP[self._level])
        self._logger.addFilter(self._filter)
        # stderr keeps log lines out of the rendered board on stdout
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        self._logger.addHandler(console)

        env_level = parse_level(os.environ.get(ENV_DEBUG_LEVEL, ""))
        if env_level is not None:
            self.configure(level=env_level)

    @property
    def level(self) -> DebugLevel:
        return self._level

    def configure(self, level: Optional[DebugLevel] = None,
                  enabled: Optional[bool] = None,
                  log_file: Optional[str] = None,
                  components: Optional[Iterable[str]] = None) -> None:
        """
        Change any subset of the settings.

        Args:
            level: Most verbose level that is emitted
            enabled: False silences everything regardless of level
            log_file: Also write to this file; "" stops file logging
            components: Only log these components; empty for all
        """
        if level is not None:
            self._level = level
            self._logger.setLevel(LEVEL_MAP[level])

        if enabled is not None:
            self._enabled = enabled

        if log_file is not None:
            self._set_log_file(log_file)

        if components is not None:
            self._filter.allowed = set(components)

    def _set_log_file(self, path: str) -> None:
        if self._file_handler is not None:
            self._logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None
        if path:
            handler = logging.FileHandler(path)
            handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
            self._logger.addHandler(handler)
            self._file_handler = handler

    def log(self, level: DebugLevel, message: str, component: str = None) -> None:
        """Emit message at level, prefixed with its component if one is given."""
        if not self._enabled or level is DebugLevel.NONE:
            return
        if component:
            message = f"[{component}] {message}"
        self._logger.log(LEVEL_MAP[level], message, extra={"component": component})

    def error(self, message: str, component: str = None):
        self.log(DebugLevel.ERROR, message, component)

    def warning(self, message: str, component: str = None):
        self.log(DebugLevel.WARNING, message, component)

    def info(self, message: str, component: str = None):
        self.log(DebugLevel.INFO, message, component)

    def debug(self, message: str, component: str = None):
        self.log(DebugLevel.DEBUG, message, component)

    def trace(self, message: str, component: str = None):
        self.log(DebugLevel.TRACE, message, component)

    def set_from_string(self, level_str: str) -> bool:
        """Apply a level given by name (command line). Returns False if unknown."""
        level = parse_level(level_str)
        if level is None:
            self.warning(f"Unknown debug level: {level_str}")
            return False
        self.configure(level=level)
        self.info(f"Log level is now {level.name}")
        return True


# Shared instance used throughout the package
debug = DebugManager()
