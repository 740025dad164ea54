# logger.py
import logging
import os
import sys

import colorlog

from .. import constants

CONSOLE_FORMAT = '[%(levelname).4s] %(name)s: %(message)s'
FILE_FORMAT = '%(asctime)s [%(levelname).4s] %(name)s: %(message)s'
LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}


def setup_logger(debug: bool = False, verbose: bool = False, module_levels: dict | None = None, log_file: str | None = None):
    """
    Configures the root logger. Output goes to stderr so the wrapped tool
    keeps stdout to itself.

    The default level is WARNING: a passthrough ``tgo build`` prints nothing
    of its own unless something is wrong.

    Args:
        debug: Log everything (DEBUG)
        verbose: Log progress (INFO)
        module_levels: Per-module log levels, e.g. ``{"mirror": "DEBUG"}``
        log_file: Optional path; when given, a plain-text copy of the log is written there
    """
    root = logging.getLogger()
    root.setLevel(_root_level(debug, verbose))

    # Called again (tests, embedding): only module levels are re-applied
    if not root.handlers:
        root.addHandler(_console_handler())
        if log_file:
            _attach_file_handler(root, log_file)

    _apply_module_levels(module_levels)


def _root_level(debug: bool, verbose: bool) -> int:
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    # NO_COLOR: https://no-color.org/
    if sys.stderr.isatty() and not os.environ.get("NO_COLOR"):
        handler.setFormatter(colorlog.ColoredFormatter(
            '%(log_color)s[%(levelname).4s]%(reset)s %(cyan)s%(name)s%(reset)s: %(message)s',
            log_colors=LOG_COLORS,
            reset=True,
        ))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _attach_file_handler(root: logging.Logger, log_file: str):
    try:
        handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
    except OSError as e:
        root.error(f"Cannot open log file '{log_file}': {e}")
        return
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    root.addHandler(handler)
    root.info(f"Logging to file: {log_file}")


def parse_module_levels(text: str | None) -> dict:
    """Parse ``name=LEVEL,name=LEVEL``; pairs without ``=`` are dropped."""
    levels = {}
    for pair in (text or '').split(','):
        name, sep, lvl = pair.partition('=')
        if sep and name.strip():
            levels[name.strip()] = lvl.strip().upper()
    return levels


def _apply_module_levels(module_levels: dict | None):
    """Set per-module levels from ``module_levels`` or, if None, from TGO_LOG_LEVELS.

    Keys may be aliases (``run``), short names (``mirror``) or full logger
    names (``tgo.cache``); see ``_normalize_module_name``.
    """
    if module_levels is None:
        module_levels = parse_module_levels(os.environ.get(constants.LOG_LEVELS_ENV))

    for name, lvl_str in module_levels.items():
        lvl = logging.getLevelName(lvl_str.upper())
        if not isinstance(lvl, int):
            logging.getLogger(__name__).warning(f"Ignoring unknown log level '{lvl_str}' for '{name}'")
            continue
        logging.getLogger(_normalize_module_name(name)).setLevel(lvl)


def _normalize_module_name(name: str) -> str:
    """Map a user-supplied module name to a logger name.

    ``run`` -> ``tgo.runner`` (alias), ``io.*`` -> ``tgo.io``,
    ``mirror`` -> ``tgo.mirror``. Foreign names pass through.
    """
    if name in constants.LOG_ALIAS_MAP:
        return constants.LOG_ALIAS_MAP[name]
    name = name.removesuffix('.*')
    head = name.partition('.')[0]
    if head != 'tgo' and head in constants.KNOWN_TOP_MODULES:
        return f'tgo.{name}'
    return name
