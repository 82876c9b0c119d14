from typing import NotRequired, TypedDict
import logging
from jtl.utils import resolve_config


class LoggerConfig(TypedDict):
    name: NotRequired[str]
    is_enabled: NotRequired[bool]
    level: NotRequired[int]
    format: NotRequired[str]


class LoggerConfigRequired(TypedDict):
    name: str
    is_enabled: bool
    level: int
    format: str


DEFAULT_LOGGER_CONFIG: LoggerConfigRequired = {
    "name": "jtl",
    "is_enabled": True,
    "level": logging.DEBUG,
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}

# used by every disabled Logger
_SILENT_LOGGER = logging.getLogger("jtl.silent")
_SILENT_LOGGER.addHandler(logging.NullHandler())
_SILENT_LOGGER.propagate = False
_SILENT_LOGGER.disabled = True


class LevelAdapter(logging.LoggerAdapter):
    """Filters records at a per-instance level on top of a shared named logger."""

    def __init__(self, logger: logging.Logger, level: int):
        super().__init__(logger, {})
        self.level = level

    def isEnabledFor(self, level: int) -> bool:
        return level >= self.level and self.logger.isEnabledFor(level)


class Logger:
    def __init__(self, config: LoggerConfig | None = None):
        self.config = resolve_config(config or {}, DEFAULT_LOGGER_CONFIG)
        self.logger = self.set_configuration()

    def set_configuration(self) -> logging.Logger | LevelAdapter:
        if not self.config["is_enabled"]:
            return _SILENT_LOGGER

        logger = logging.getLogger(self.config["name"])
        if logger.level == logging.NOTSET:
            logger.setLevel(logging.DEBUG)
        if not logger.handlers:
            self.formatter = logging.Formatter(self.config["format"])
            self.ch = logging.StreamHandler()
            self.ch.setFormatter(self.formatter)
            logger.addHandler(self.ch)
        return LevelAdapter(logger, self.config["level"])
