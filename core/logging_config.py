# core/logging_config.py

"""
Leveled, named logging for the roster and its codec.

Built on the standard `logging` module. Each component owns a `ComponentLogger` with its
own minimum level, and every component also holds a reference to one shared
`LogSettings` object carrying the process-wide minimum level. An event is emitted only
if it clears both thresholds.

Output format:
    [2025-01-31 09:15:02] [INFO] [Roster] message
"""

from __future__ import annotations

import logging
import sys
from enum import Enum


class LogLevel(Enum):
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR
    FATAL = logging.CRITICAL

    @classmethod
    def from_name(cls, name: str, default: LogLevel | None = None) -> LogLevel:
        """
        Resolves a level from its name, accepting `WARNING` and `CRITICAL` as aliases.

        Raises:
            ValueError: If the name is unknown and no default is given.
        """
        key = name.strip().upper()
        aliases = {"WARNING": "WARN", "CRITICAL": "FATAL"}
        key = aliases.get(key, key)

        try:
            return cls[key]

        except KeyError:
            if default is not None:
                return default
            raise ValueError(f"Unknown log level: {name}")


# stdlib level numbers -> names printed in the log line
_LEVEL_LABELS = {level.value: level.name for level in LogLevel}


class LogSettings:
    """
    Shared process-wide logging settings.

    A single instance is created at startup and passed to every component that logs.
    Changing `global_level` affects all of them at once.
    """

    def __init__(self, global_level: LogLevel = LogLevel.INFO):
        self.global_level: LogLevel = global_level


class LogFormatter(logging.Formatter):

    def __init__(self):
        super().__init__(
            fmt="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        # relabel a copy so other handlers see the stdlib level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = _LEVEL_LABELS.get(record.levelno, record.levelname)
        record.name = record.name.removeprefix(f"{ROOT_LOGGER_NAME}.")
        return super().format(record)


ROOT_LOGGER_NAME = "student_records"


def setup_logging(stream=None) -> logging.Logger:
    """
    Configures the package root logger with a single stream handler.

    Level filtering is done by `ComponentLogger`, so the root logger and its handler
    let everything through.

    Args:
        stream: The output stream. Defaults to stdout.

    Returns:
        The configured root logger for the package.
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(LogFormatter())

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers = [handler]
    root_logger.propagate = False

    return root_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class ComponentLogger:
    """
    A named logger with its own minimum level plus the shared process-wide level.

    Args:
        name: The component name printed with each event.
        settings: The shared `LogSettings` instance.
        level: This component's own minimum level.
    """

    def __init__(
        self,
        name: str,
        settings: LogSettings,
        level: LogLevel = LogLevel.INFO,
    ):
        self._name = name
        self._settings = settings
        self._level = level
        self._logger = get_logger(name)
        # thresholds are applied by should_log()
        self._logger.setLevel(logging.DEBUG)

    @property
    def name(self) -> str:
        return self._name

    @property
    def level(self) -> LogLevel:
        return self._level

    @level.setter
    def level(self, level: LogLevel) -> None:
        self._level = level

    @property
    def settings(self) -> LogSettings:
        return self._settings

    def should_log(self, level: LogLevel) -> bool:
        return (
            level.value >= self._settings.global_level.value
            and level.value >= self._level.value
        )

    def log(self, level: LogLevel, message: str) -> None:
        if self.should_log(level):
            self._logger.log(level.value, message)

    def debug(self, message: str) -> None:
        self.log(LogLevel.DEBUG, message)

    def info(self, message: str) -> None:
        self.log(LogLevel.INFO, message)

    def warn(self, message: str) -> None:
        self.log(LogLevel.WARN, message)

    def error(self, message: str) -> None:
        self.log(LogLevel.ERROR, message)

    def fatal(self, message: str) -> None:
        """
        Emits a FATAL event and terminates the process.

        Raises:
            SystemExit: Always, with exit status 1.
        """
        self.log(LogLevel.FATAL, message)
        raise SystemExit(1)

    def child(self, sub_name: str) -> ComponentLogger:
        return ComponentLogger(f"{self._name}.{sub_name}", self._settings, self._level)
