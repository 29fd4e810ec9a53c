from __future__ import annotations

"""Central logging configuration for atlas_toolkit.

Library modules only create module loggers. Applications (``run.py``) call
:func:`setup_logging` once at start-up.
"""

import logging
import logging.config
import os

from atlas_toolkit.config import ConfigManager

__all__ = ["setup_logging"]


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application using the ``logging.yml`` config."""
    log_dir = os.environ.get("ATLAS_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "atlas.log")

    logging_config = ConfigManager().get_logging_config()
    if logging_config and isinstance(logging_config, dict) and logging_config.get("version"):
        # Update the filename dynamically
        if "handlers" in logging_config and "file" in logging_config["handlers"]:
            logging_config["handlers"]["file"]["filename"] = log_file
        try:
            logging.config.dictConfig(logging_config)
            logging.getLogger(__name__).debug("===== Logging initialised from config files =====")
        except (ValueError, TypeError, AttributeError, ImportError) as exc:
            _setup_minimal_logging()
            logging.getLogger(__name__).error("Invalid logging config, using fallback: %s", exc)
    else:
        _setup_minimal_logging()

    if verbose:
        _raise_console_level(logging.INFO)

    _apply_debug_overrides()


def _setup_minimal_logging() -> None:
    """Set up minimal console-only logging when config is unavailable."""
    minimal_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'level': 'WARNING',
            },
        },
        'root': {
            'level': 'INFO',
            'handlers': ['console'],
        },
    }

    logging.config.dictConfig(minimal_config)


def _raise_console_level(level: int) -> None:
    """Let console handlers show messages down to *level*."""
    for name in ("", "atlas_toolkit"):
        for handler in logging.getLogger(name).handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                if handler.level > level:
                    handler.setLevel(level)


def _apply_debug_overrides() -> None:
    """Apply environment-driven module-specific debug overrides.

    Supports ``ATLAS_DEBUG_MODULES=comma,separated,logger,names`` which
    switches the listed loggers to DEBUG.
    """
    extra_modules = os.environ.get('ATLAS_DEBUG_MODULES', '').strip()
    targets = [m.strip() for m in extra_modules.split(',') if m.strip()]
    for name in targets:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        # Ensure at least one handler emits DEBUG for this logger
        has_debug_handler = any(h.level <= logging.DEBUG for h in logger.handlers)
        if not has_debug_handler:
            h = logging.StreamHandler()
            h.setLevel(logging.DEBUG)
            fmt = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            h.setFormatter(fmt)
            logger.addHandler(h)
        logger.info("Debug override active for logger '%s'", name)
