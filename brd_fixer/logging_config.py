from __future__ import annotations

"""Central logging configuration for the BRD fixer.

Import and call :func:`setup_logging` at application start-up.
"""

import logging
import logging.config
import os
from typing import Optional

from brd_fixer.config import ConfigManager

__all__ = ["setup_logging"]


def setup_logging(console_level: Optional[str] = None) -> None:
    """Configure logging for the application using configuration from YAML files.

    *console_level* (e.g. ``"DEBUG"``) overrides the level of the console
    handler declared in ``logging.yml``.
    """
    log_dir = os.environ.get("BRD_FIXER_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "app.log")

    try:
        config_manager = ConfigManager()
        logging_config = config_manager.get_logging_config()

        if logging_config and isinstance(logging_config, dict) and logging_config.get("version"):
            # Update the filename dynamically
            if "handlers" in logging_config and "file" in logging_config["handlers"]:
                logging_config["handlers"]["file"]["filename"] = log_file
            if console_level and "console" in logging_config.get("handlers", {}):
                logging_config["handlers"]["console"]["level"] = console_level.upper()

            logging.config.dictConfig(logging_config)
            logging.getLogger("brd_fixer").info("===== Logging initialised from config files =====")
        else:
            _setup_minimal_logging(console_level)
    except (ValueError, TypeError, AttributeError, ImportError) as exc:
        # dictConfig rejects a bad user override; keep the tool usable.
        print(f"Error loading logging config: {exc}")
        _setup_minimal_logging(console_level)

    _apply_debug_overrides()


def _setup_minimal_logging(console_level: Optional[str] = None) -> None:
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
                'level': (console_level or 'INFO').upper(),
            },
        },
        'root': {
            'level': 'INFO',
            'handlers': ['console'],
        },
    }

    logging.config.dictConfig(minimal_config)
    logging.warning("===== Logging initialised with minimal fallback (no config) =====")


def _apply_debug_overrides() -> None:
    """Apply environment-driven module-specific debug overrides.

    ``BRD_FIXER_DEBUG_MODULES=comma,separated,logger,names`` switches the
    listed loggers to DEBUG, e.g. ``brd_fixer.core.merge``.
    """
    extra_modules = os.environ.get('BRD_FIXER_DEBUG_MODULES', '').strip()
    targets = [m.strip() for m in extra_modules.split(',') if m.strip()]
    for name in targets:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        # Ensure at least one handler emits DEBUG for this logger
        has_debug_handler = any(
            h.level == logging.NOTSET or h.level <= logging.DEBUG for h in logger.handlers
        )
        if not has_debug_handler:
            h = logging.StreamHandler()
            h.setLevel(logging.DEBUG)
            h.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            logger.addHandler(h)
        logger.info("Debug override active for logger '%s'", name)
