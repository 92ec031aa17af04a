# src/geminirag/logging_config.py
"""
Logging configuration for geminirag applications.

Library modules only create module-level loggers; applications (such as the
example script) call `configure_logging` once at startup to attach handlers.

Configuration comes from the `config` argument or from the `[logging]` table
of a TOML file (`config_file_path`, or the file named by `GEMINIRAG_CONFIG`),
merged over `DEFAULT_LOGGING_CONFIG`.

Key concepts:

    **Display filter**: When ``console_enabled=False`` (the default), the
    console handler still exists but only passes through log records that
    carry ``extra={"display": True}``.  Progress messages such as
    "Indexing 3 documents..." reach the user while debug chatter stays
    out of the terminal.

    **File logging**: off by default. ``file_mode="per_run"`` creates a new
    timestamped file per invocation; ``file_mode="single"`` uses a
    ``RotatingFileHandler``.

Usage:
    from geminirag.logging_config import configure_logging, log_display

    configure_logging(app_name="gemini_rag_example")

    logger = logging.getLogger("gemini_rag_example")
    log_display(logger, logging.INFO, "Indexed %d passages", count)
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from .config.gemini import CONFIG_FILE_ENV_VAR, load_config_file

DEFAULT_LOGGING_CONFIG: dict[str, Any] = {
    "console_enabled": False,
    "console_level": "WARNING",
    "console_format": "%(levelname)s - %(message)s",
    "file_enabled": False,
    "file_level": "DEBUG",
    "file_directory": "~/.local/share/geminirag/logs",
    "file_mode": "per_run",
    "file_name_pattern": "{app}_{timestamp:%Y%m%d_%H%M%S}.log",
    "file_single_name": "{app}.log",
    "file_format": "%(asctime)s [%(levelname)-8s] %(name)-30s - %(message)s (%(filename)s:%(lineno)d)",
    "rotation_max_bytes": 10 * 1024 * 1024,
    "rotation_backup_count": 5,
    "display_min_level": "INFO",
    "components": {
        "geminirag": "INFO",
        "google_genai": "WARNING",
        "httpx": "WARNING",
        "httpcore": "WARNING",
        "chromadb": "WARNING",
    },
}


def _level(value: str | int, default: int) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).upper())
    return level if isinstance(level, int) else default


class DisplayFilter(logging.Filter):
    """Controls which log records pass through to the console handler.

    With the console globally enabled every record passes and the handler
    level does the filtering. Otherwise only records flagged
    ``display=True`` at or above ``display_min_level`` pass.
    """

    def __init__(self, console_globally_enabled: bool = False, display_min_level: int = logging.INFO) -> None:
        super().__init__()
        self.console_globally_enabled = console_globally_enabled
        self.display_min_level = display_min_level

    def filter(self, record: logging.LogRecord) -> bool:
        if self.console_globally_enabled:
            return True
        if getattr(record, "display", False):
            return record.levelno >= self.display_min_level
        return False


class LoggingManager:
    """
    Singleton holding the handlers installed by `configure_logging`.

    Logging is configured once per process unless reconfiguration is forced.
    """

    _instance: Optional["LoggingManager"] = None
    _configured: bool = False
    _log_file_path: Path | None = None
    _console_handler: logging.Handler | None = None
    _file_handler: logging.Handler | None = None

    def __new__(cls) -> "LoggingManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def is_configured(cls) -> bool:
        return cls._configured

    @classmethod
    def get_log_file_path(cls) -> Path | None:
        return cls._log_file_path

    def configure(
        self,
        app_name: str = "geminirag",
        config: dict[str, Any] | None = None,
        config_file_path: str | Path | None = None,
        force_reconfigure: bool = False,
    ) -> Path | None:
        """
        Install console and file handlers on the root logger.

        Returns:
            Path to the log file, or None when file logging is disabled.

        Raises:
            ConfigError: If a named config file is missing or invalid.
        """
        if LoggingManager._configured and not force_reconfigure:
            return LoggingManager._log_file_path

        log_config = self._load_config(config, config_file_path)

        root_logger = logging.getLogger()
        for handler in (self._console_handler, self._file_handler):
            if handler is not None:
                root_logger.removeHandler(handler)
                handler.close()
        LoggingManager._console_handler = None
        LoggingManager._file_handler = None
        LoggingManager._log_file_path = None
        root_logger.setLevel(logging.DEBUG)

        console_globally_enabled = bool(log_config.get("console_enabled", False))
        display_filter = DisplayFilter(
            console_globally_enabled=console_globally_enabled,
            display_min_level=_level(log_config.get("display_min_level", "INFO"), logging.INFO),
        )
        console_handler = logging.StreamHandler(sys.stderr)
        # When the console is off the filter is the only gate
        console_handler.setLevel(
            _level(log_config.get("console_level", "WARNING"), logging.WARNING)
            if console_globally_enabled else logging.DEBUG
        )
        console_handler.setFormatter(logging.Formatter(log_config["console_format"]))
        console_handler.addFilter(display_filter)
        root_logger.addHandler(console_handler)
        LoggingManager._console_handler = console_handler

        if log_config.get("file_enabled", False):
            file_handler, log_file_path = self._create_file_handler(log_config, app_name)
            if file_handler is not None:
                root_logger.addHandler(file_handler)
                LoggingManager._file_handler = file_handler
                LoggingManager._log_file_path = log_file_path

        components = log_config.get("components", DEFAULT_LOGGING_CONFIG["components"])
        for component_name, level_str in components.items():
            logging.getLogger(component_name).setLevel(_level(level_str, logging.INFO))

        LoggingManager._configured = True
        if LoggingManager._log_file_path:
            logging.getLogger(__name__).debug(f"Logging configured. Log file: {LoggingManager._log_file_path}")
        return LoggingManager._log_file_path

    def _load_config(self, config: dict[str, Any] | None, config_file_path: str | Path | None) -> dict[str, Any]:
        if config is not None:
            return {**DEFAULT_LOGGING_CONFIG, **config}
        path = config_file_path or os.environ.get(CONFIG_FILE_ENV_VAR)
        if path:
            return {**DEFAULT_LOGGING_CONFIG, **load_config_file(path, section="logging")}
        return dict(DEFAULT_LOGGING_CONFIG)

    def _create_file_handler(
        self, config: dict[str, Any], app_name: str
    ) -> tuple[logging.Handler | None, Path | None]:
        log_dir = Path(os.path.expanduser(config.get("file_directory", DEFAULT_LOGGING_CONFIG["file_directory"])))
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            sys.stderr.write(f"Warning: Cannot create log directory {log_dir}: {e}\n")
            return None, None

        handler: logging.Handler
        if config.get("file_mode", "per_run") == "single":
            try:
                filename = config.get("file_single_name", "{app}.log").format(app=app_name)
            except (KeyError, ValueError):
                filename = f"{app_name}.log"
            log_file_path = log_dir / filename
            try:
                handler = RotatingFileHandler(
                    log_file_path,
                    maxBytes=config.get("rotation_max_bytes", 10 * 1024 * 1024),
                    backupCount=config.get("rotation_backup_count", 5),
                    encoding="utf-8",
                )
            except OSError as e:
                sys.stderr.write(f"Warning: Cannot create log file {log_file_path}: {e}\n")
                return None, None
        else:
            timestamp = datetime.now()
            try:
                filename = config.get("file_name_pattern", DEFAULT_LOGGING_CONFIG["file_name_pattern"]).format(
                    app=app_name, timestamp=timestamp
                )
            except (KeyError, ValueError):
                filename = f"{app_name}_{timestamp.strftime('%Y%m%d_%H%M%S')}.log"
            log_file_path = log_dir / filename
            try:
                handler = logging.FileHandler(log_file_path, encoding="utf-8")
            except OSError as e:
                sys.stderr.write(f"Warning: Cannot create log file {log_file_path}: {e}\n")
                return None, None

        handler.setLevel(_level(config.get("file_level", "DEBUG"), logging.DEBUG))
        handler.setFormatter(logging.Formatter(config.get("file_format", DEFAULT_LOGGING_CONFIG["file_format"])))
        return handler, log_file_path

    def set_console_level(self, level: str | int) -> None:
        """Change the console handler's level at runtime."""
        if self._console_handler is not None:
            self._console_handler.setLevel(_level(level, self._console_handler.level))

    def set_component_level(self, component: str, level: str | int) -> None:
        component_logger = logging.getLogger(component)
        component_logger.setLevel(_level(level, component_logger.level))


def configure_logging(
    app_name: str = "geminirag",
    config: dict[str, Any] | None = None,
    config_file_path: str | Path | None = None,
    force_reconfigure: bool = False,
) -> Path | None:
    """
    Configure logging for the application.

    Args:
        app_name: Name of the application (used in the log filename)
        config: Logging settings merged over `DEFAULT_LOGGING_CONFIG`
        config_file_path: TOML file with a `[logging]` table (if config not provided)
        force_reconfigure: If True, reconfigure even if already configured

    Returns:
        Path to the log file, or None when file logging is disabled.

    Example:
        configure_logging(
            app_name="gemini_rag_example",
            config={"console_enabled": True, "console_level": "INFO"},
        )
    """
    return LoggingManager().configure(
        app_name=app_name,
        config=config,
        config_file_path=config_file_path,
        force_reconfigure=force_reconfigure,
    )


def log_display(logger: logging.Logger, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
    """Log a message that also reaches the console when it is otherwise quiet.

    The caller's ``extra`` mapping is merged, not replaced.
    """
    extra = dict(kwargs.pop("extra", None) or {})
    extra["display"] = True
    kwargs["extra"] = extra
    logger.log(level, msg, *args, **kwargs)


def get_log_file_path() -> Path | None:
    return LoggingManager.get_log_file_path()


def set_console_level(level: str | int) -> None:
    LoggingManager().set_console_level(level)


def set_component_level(component: str, level: str | int) -> None:
    LoggingManager().set_component_level(component, level)
