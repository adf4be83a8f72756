"""
Centralized logging configuration for TAC.

All loggers live under the `tac` namespace, one per subsystem
(`tac.auction`, `tac.events`, `tac.scenario`, ...). Console output is
colorized and goes to stderr so command output on stdout stays clean.

Levels are given as a spec string, either on the command line or in the
TAC_LOG_LEVEL environment variable:

    WARNING                         everything at WARNING
    INFO,auction=DEBUG              INFO, with the auction subsystem at DEBUG
    events=ERROR                    default level, events quieter
"""

import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import colorlog

ROOT_NAME = "tac"
LOG_LEVEL_ENV = "TAC_LOG_LEVEL"
LOG_FILE_NAME = "tac.log"

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)-8s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def parse_level(value: Union[int, str]) -> int:
    """Turn a level name ("debug", "WARNING") or number into a logging level."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        name = value.strip().upper()
        if name.isdigit():
            return int(name)
        level = logging.getLevelName(name)
        if isinstance(level, int):
            return level
    raise ValueError(f"Unknown log level: {value!r}")


def parse_level_spec(spec: str, default: int = logging.INFO) -> Tuple[int, Dict[str, int]]:
    """
    Parse "LEVEL,subsystem=LEVEL,..." into a base level and per-subsystem levels.

    Returns:
        (base_level, {subsystem: level})
    """
    base = default
    subsystems: Dict[str, int] = {}

    for part in spec.split(","):
        part = part.strip()
        if not part:
            continue
        if "=" in part:
            name, _, level = part.partition("=")
            name = name.strip()
            if not name:
                raise ValueError(f"Missing subsystem name in {part!r}")
            subsystems[name] = parse_level(level)
        else:
            base = parse_level(part)

    return base, subsystems


class TACLogger:
    """Configures the `tac` logger tree once per process (or per reset)."""

    _initialized = False
    _log_dir: Optional[Path] = None
    _subsystem_levels: Dict[str, int] = {}

    @classmethod
    def setup(
        cls,
        level: Optional[int] = None,
        log_dir: Optional[str] = None,
        log_to_file: bool = False,
        subsystem_levels: Optional[Dict[str, int]] = None,
    ):
        """
        Setup logging configuration.

        Args:
            level: Base level; read from TAC_LOG_LEVEL (else INFO) if None
            log_dir: Directory for tac.log. If None, uses ./logs
            log_to_file: Whether to write logs to file
            subsystem_levels: Overrides such as {"auction": logging.DEBUG}
        """
        if cls._initialized:
            return

        levels = dict(subsystem_levels or {})
        if level is None:
            level, env_levels = parse_level_spec(os.getenv(LOG_LEVEL_ENV, ""))
            levels = {**env_levels, **levels}

        root_logger = logging.getLogger(ROOT_NAME)
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        # Handlers pass everything; logger levels decide per subsystem
        console_handler = colorlog.StreamHandler(sys.stderr)
        console_handler.setFormatter(colorlog.ColoredFormatter(
            "%(log_color)s" + LOG_FORMAT.replace(" %(message)s", "%(reset)s %(message)s"),
            datefmt=DATE_FORMAT,
            log_colors=LOG_COLORS,
        ))
        root_logger.addHandler(console_handler)

        if log_to_file:
            cls._log_dir = Path(log_dir) if log_dir else Path("logs")
            cls._log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(cls._log_dir / LOG_FILE_NAME)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
            root_logger.addHandler(file_handler)

        for name, sub_level in levels.items():
            logging.getLogger(f"{ROOT_NAME}.{name}").setLevel(sub_level)
        cls._subsystem_levels = levels

        cls._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Drop handlers and subsystem levels so setup() can run again."""
        root_logger = logging.getLogger(ROOT_NAME)
        for handler in list(root_logger.handlers):
            handler.close()
            root_logger.removeHandler(handler)
        for name in cls._subsystem_levels:
            logging.getLogger(f"{ROOT_NAME}.{name}").setLevel(logging.NOTSET)
        cls._subsystem_levels = {}
        cls._initialized = False
        cls._log_dir = None

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Get a logger for a specific subsystem.

        Args:
            name: Subsystem name (e.g., 'auction', 'events', 'scenario')
        """
        if not cls._initialized:
            cls.setup()

        return logging.getLogger(f"{ROOT_NAME}.{name}")


def get_logger(name: str) -> logging.Logger:
    return TACLogger.get_logger(name)


def setup_logging(
    level: Optional[int] = None,
    log_dir: Optional[str] = None,
    log_to_file: bool = False,
    subsystem_levels: Optional[Dict[str, int]] = None,
):
    """Setup logging configuration"""
    TACLogger.setup(
        level=level,
        log_dir=log_dir,
        log_to_file=log_to_file,
        subsystem_levels=subsystem_levels,
    )
