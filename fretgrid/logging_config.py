"""Centralized logging configuration for fretgrid.

Every module logs through ``logging.getLogger(__name__)``; this module decides
where those records go and at which level.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

# Environment override for every fretgrid logger (e.g. FRETGRID_LOG_LEVEL=DEBUG)
LOG_LEVEL_ENV = "FRETGRID_LOG_LEVEL"

MODULE_LOG_LEVELS: Dict[str, int] = {
    "fretgrid": logging.INFO,
    "fretgrid.pipeline": logging.INFO,
    # Per-stage candidate counts are logged at DEBUG
    "fretgrid.video": logging.INFO,
    "fretgrid.video.frame_worker": logging.INFO,
    "fretgrid.video.hand_tracker": logging.WARNING,
    # Third-party libraries
    "cv2": logging.ERROR,
    "absl": logging.ERROR,  # mediapipe
}

_console_handler: Optional[logging.Handler] = None
_file_handler: Optional[logging.Handler] = None


def _resolve_level(level: Optional[str]) -> Optional[int]:
    level = level or os.getenv(LOG_LEVEL_ENV)
    if not level:
        return None
    numeric_level = logging.getLevelName(level.upper())
    if isinstance(numeric_level, int):
        return numeric_level
    logging.getLogger(__name__).error(f"Invalid log level: {level}")
    return None


def setup_logging(level: Optional[str] = None,
                  log_to_console: bool = True,
                  log_file: Optional[str] = None) -> Dict[str, int]:
    """
    Set up logging for the application.

    Args:
        level: Override every ``fretgrid`` logger with this level name
            (falls back to the FRETGRID_LOG_LEVEL environment variable)
        log_to_console: Attach the shared stdout handler
        log_file: Optional path of a log file to write as well

    Returns:
        The module-to-level table that was applied
    """
    global _console_handler, _file_handler

    formatter = logging.Formatter(LOG_FORMAT)

    handlers = []
    if log_to_console:
        if _console_handler is None:
            _console_handler = logging.StreamHandler(sys.stdout)
            _console_handler.setFormatter(formatter)
        handlers.append(_console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        if _file_handler is not None:
            _file_handler.close()
        _file_handler = logging.FileHandler(log_file, mode="w")
        _file_handler.setFormatter(formatter)
        handlers.append(_file_handler)

    log_levels = MODULE_LOG_LEVELS.copy()
    override = _resolve_level(level)
    if override is not None:
        for module_name in log_levels:
            if module_name.startswith("fretgrid"):
                log_levels[module_name] = override

    for module_name, module_level in log_levels.items():
        logging.getLogger(module_name).setLevel(module_level)

    # Handlers live on the package root; submodules propagate to it
    root = logging.getLogger("fretgrid")
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.propagate = False

    root.info("Logging configuration complete")
    return log_levels


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a fretgrid module (typically ``__name__``)."""
    return logging.getLogger(name)
