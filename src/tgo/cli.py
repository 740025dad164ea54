import functools
import logging
import os
import shutil
import traceback
from typing import Sequence

import click

from . import constants
from .cache import MirrorCache
from .utils import setup_logger, parse_module_levels
from .exceptions import (
    TgoError,
    ConfigError,
    TgoIOError,
    EnumerationError,
    ExternalProcessError,
    ScopeViolationError,
)
from . import __version__

logger = logging.getLogger(__name__)


def setup_logging(debug: bool, verbose: bool = False, log_levels: str = None, log_file: str = None):
    """Setup logger with debug and module-level configuration"""
    module_levels = parse_module_levels(log_levels) if log_levels else None
    setup_logger(debug=debug, verbose=verbose, module_levels=module_levels, log_file=log_file)


def exit_code_of(error: ExternalProcessError) -> int:
    """Shell convention: a child killed by signal N exits 128+N"""
    if error.exit_code < 0:
        return 128 - error.exit_code
    return error.exit_code


ERROR_KINDS = (
    (ConfigError, "Config"),
    (EnumerationError, "Enumeration"),
    (ScopeViolationError, "Scope"),
    (TgoIOError, "IO"),
)


def error_kind(error: TgoError) -> str:
    for cls, kind in ERROR_KINDS:
        if isinstance(error, cls):
            return kind
    return "Internal"


def handle_errors(func):
    """Decorator to map tgo exceptions onto process exit"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()
        try:
            return func(*args, **kwargs)
        except ExternalProcessError as e:
            logger.debug(str(e))
            ctx.exit(exit_code_of(e))
        except TgoError as e:
            logger.error(f"{error_kind(e)} error: {e}")
            if ctx.obj.get('debug'):
                traceback.print_exc()
            raise click.Abort()
    return wrapper


def workspace_dir() -> str:
    """
    The current directory as the user's shell names it.

    `go list` reports package directories under $PWD when it points at the
    working directory, so the workspace must use the same spelling even if
    it goes through a symlink.
    """
    pwd = os.environ.get("PWD")
    if pwd and os.path.isabs(pwd):
        try:
            if os.path.samefile(pwd, "."):
                return pwd
        except OSError:
            logger.debug(f"Ignoring stale PWD '{pwd}'")
    return os.getcwd()


def go_binary() -> str:
    return os.environ.get(constants.GO_BINARY_ENV) or constants.GO_BINARY


def dispatch(cache: MirrorCache, args: Sequence[str]) -> int:
    """
    Decide what to run in the cache for the given command line.

    Go subcommands are forwarded to `go`; a bare `clean` also removes the
    cache; any other program is run in the cache after a `go build ./...`.
    Returns an exit status for conditions that are not errors of a child.
    """
    args = list(args)
    go = go_binary()
    if not args:
        cache.run_args(go, *constants.DEFAULT_BUILD_ARGS)
        return 0

    command = args[0]
    if command in constants.GO_SUBCOMMANDS:
        cache.run_args(go, *args)
        return 0

    if command == "clean":
        cache.run_args(go, *args)
        if len(args) == 1:
            cache.clean()
        return 0

    cache.run_args(go, *constants.DEFAULT_BUILD_ARGS)
    if shutil.which(command) is None:
        logger.error(f"'{command}' not found in PATH")
        return 1
    cache.run_args(command, *args[1:])
    return 0


@click.command(context_settings={
    'ignore_unknown_options': True,
    'allow_interspersed_args': False,
})
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('-v', '--verbose', is_flag=True, help='Enable info logging')
@click.option('-l', '--log-levels', help="Comma-separated per-module log levels (e.g., 'mirror=DEBUG,run=INFO')")
@click.option('-f', '--log-file', help='Path to log file')
@click.version_option(version=__version__, prog_name='tgo')
@click.argument('args', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(ctx, debug, verbose, log_levels, log_file, args):
    """tgo - run go (or any tool) against a mirrored, permission-normalized cache

    \b
    Examples:
      tgo                      go build ./... in the cache
      tgo test ./...           any go subcommand runs in the cache
      tgo clean                go clean, then remove the .tgo directory
      tgo dlv debug            go build ./..., then run dlv in the cache
    """
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    setup_logging(debug, verbose, log_levels, log_file)
    status = run_dispatch(args)
    if status:
        ctx.exit(status)


@handle_errors
def run_dispatch(args: Sequence[str]) -> int:
    cache = MirrorCache(workspace_dir())
    return dispatch(cache, args)
