# src/vmoperator/logging_config.py
"""
Logging setup for vmoperator.

Library modules only create loggers (``logging.getLogger(__name__)``);
handlers are installed once by the embedding process through
``configure_logging``. Settings come from the ``logging`` section of the
vmoperator configuration (see vmoperator.config).

Supports:
- Console logging to stderr at a configurable level
- File logging, either one timestamped file per run or a single rotating file
- Per-component log level overrides

Usage:
    from vmoperator.config import load_config
    from vmoperator.logging_config import configure_logging

    config = load_config()
    configure_logging(config=config.logging)
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from .config.models import LoggingConfig

CONSOLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)-30s - %(message)s (%(filename)s:%(lineno)d)"


def _level(value: str | int, default: int) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else default


class LoggingManager:
    """
    Singleton owning the handlers vmoperator installs on the root logger.

    Logging is configured once; later calls are no-ops unless
    ``force_reconfigure`` is set.
    """

    _instance: Optional["LoggingManager"] = None

    def __new__(cls) -> "LoggingManager":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._configured = False
            instance._log_file_path = None
            instance._console_handler = None
            instance._file_handler = None
            cls._instance = instance
        return cls._instance

    @classmethod
    def get_instance(cls) -> "LoggingManager":
        """Get the singleton instance."""
        return cls()

    @property
    def configured(self) -> bool:
        """Check if logging has been configured."""
        return self._configured

    @property
    def log_file_path(self) -> Path | None:
        """Get the current log file path, if file logging is active."""
        return self._log_file_path

    def configure(
        self,
        app_name: str = "vmoperator",
        config: LoggingConfig | dict[str, Any] | None = None,
        force_reconfigure: bool = False,
    ) -> Path | None:
        """
        Install console and file handlers on the root logger.

        Args:
            app_name: Used in the log file name
            config: Logging settings; defaults are used when omitted
            force_reconfigure: Replace handlers installed by an earlier call

        Returns:
            Path to the log file, or None if file logging is disabled
        """
        if self._configured and not force_reconfigure:
            return self._log_file_path

        if config is None:
            config = LoggingConfig()
        elif isinstance(config, dict):
            config = LoggingConfig.model_validate(config)

        root_logger = logging.getLogger()
        self._remove_handlers(root_logger)
        root_logger.setLevel(logging.DEBUG)

        if config.console_enabled:
            self._console_handler = logging.StreamHandler(sys.stderr)
            self._console_handler.setLevel(_level(config.console_level, logging.WARNING))
            self._console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
            root_logger.addHandler(self._console_handler)

        if config.file_enabled:
            self._file_handler, self._log_file_path = self._create_file_handler(config, app_name)
            if self._file_handler is not None:
                root_logger.addHandler(self._file_handler)

        for component, level in config.components.items():
            logging.getLogger(component).setLevel(_level(level, logging.INFO))

        self._configured = True
        if self._log_file_path:
            logging.getLogger(__name__).debug(f"Logging configured. Log file: {self._log_file_path}")
        return self._log_file_path

    def _remove_handlers(self, root_logger: logging.Logger) -> None:
        for handler in (self._console_handler, self._file_handler):
            if handler is not None:
                root_logger.removeHandler(handler)
                handler.close()
        self._console_handler = None
        self._file_handler = None
        self._log_file_path = None

    def _create_file_handler(
        self, config: LoggingConfig, app_name: str
    ) -> tuple[logging.Handler | None, Path | None]:
        """Create the file handler; returns (None, None) if the file cannot be opened."""
        log_dir = Path(os.path.expanduser(config.file_directory))
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            sys.stderr.write(f"Warning: Cannot create log directory {log_dir}: {e}\n")
            return None, None

        handler: logging.Handler
        try:
            if config.file_mode == "single":
                log_file_path = log_dir / f"{app_name}.log"
                handler = RotatingFileHandler(
                    log_file_path,
                    maxBytes=config.rotation_max_bytes,
                    backupCount=config.rotation_backup_count,
                    encoding="utf-8",
                )
            else:
                timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
                log_file_path = log_dir / f"{app_name}_{timestamp}.log"
                handler = logging.FileHandler(log_file_path, encoding="utf-8")
        except OSError as e:
            sys.stderr.write(f"Warning: Cannot create log file in {log_dir}: {e}\n")
            return None, None

        handler.setLevel(_level(config.file_level, logging.DEBUG))
        handler.setFormatter(logging.Formatter(FILE_FORMAT))
        return handler, log_file_path

    def set_console_level(self, level: str | int) -> None:
        """Change the console handler's log level at runtime."""
        if self._console_handler is not None:
            self._console_handler.setLevel(_level(level, logging.WARNING))

    def set_component_level(self, component: str, level: str | int) -> None:
        """Change a specific component's log level at runtime."""
        logging.getLogger(component).setLevel(_level(level, logging.INFO))

    def reset(self) -> None:
        """Remove installed handlers and mark logging as unconfigured."""
        self._remove_handlers(logging.getLogger())
        self._configured = False


def configure_logging(
    app_name: str = "vmoperator",
    config: LoggingConfig | dict[str, Any] | None = None,
    force_reconfigure: bool = False,
) -> Path | None:
    """
    Configure logging for a process embedding vmoperator.

    Example:
        configure_logging(config={"console_enabled": True, "console_level": "DEBUG"})
    """
    return LoggingManager.get_instance().configure(
        app_name=app_name, config=config, force_reconfigure=force_reconfigure
    )


def get_log_file_path() -> Path | None:
    """Get the current log file path."""
    return LoggingManager.get_instance().log_file_path


def set_console_level(level: str | int) -> None:
    """Change console log level at runtime."""
    LoggingManager.get_instance().set_console_level(level)


def set_component_level(component: str, level: str | int) -> None:
    """Change a specific component's log level at runtime."""
    LoggingManager.get_instance().set_component_level(component, level)
