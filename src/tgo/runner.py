import logging
import shlex
import subprocess
from typing import IO, Mapping, Optional, Sequence, Union

from .exceptions import ExternalProcessError, ProcessStartError

logger = logging.getLogger(__name__)

Command = Union[str, Sequence[str]]


class ProcessRunner:
    """
    Launch-and-wait boundary for child processes.

    Standard streams are inherited unless a caller passes its own, and no
    output is captured, so interactive tools behave as if launched directly.
    """

    def run(
        self,
        command: Command,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None,
        stdin: Optional[IO] = None,
        stdout: Optional[IO] = None,
        stderr: Optional[IO] = None,
    ) -> int:
        """
        Run ``command`` to completion.

        A string is split shell-style (no shell is involved); a sequence is
        used as argv. Raises ``ExternalProcessError`` on nonzero exit and
        ``ProcessStartError`` if the command cannot be started.
        """
        try:
            argv = shlex.split(command) if isinstance(command, str) else list(command)
        except ValueError as e:
            raise ProcessStartError(f"Cannot parse {command!r}: {e}") from e
        if not argv:
            raise ProcessStartError("Empty command")
        display = command if isinstance(command, str) else shlex.join(argv)
        logger.debug(f"Running {display}")
        try:
            process = subprocess.run(
                argv,
                env=dict(env) if env is not None else None,
                cwd=cwd,
                stdin=stdin,
                stdout=stdout,
                stderr=stderr,
            )
        except OSError as e:
            raise ProcessStartError(f"Cannot start {display}: {e}", path=argv[0]) from e
        if process.returncode != 0:
            raise ExternalProcessError(display, process.returncode)
        return process.returncode
