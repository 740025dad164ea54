import enum
import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class State(enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class InitGuard:
    """
    Exactly-once initialization.

    The first caller of ``run`` executes the initializer; concurrent callers
    block until it finishes and then share its outcome. ``READY`` and
    ``FAILED`` are terminal: a failure is re-raised to every later caller.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._state = State.UNINITIALIZED
        self._error: Optional[BaseException] = None

    @property
    def state(self) -> State:
        with self._cond:
            return self._state

    def run(self, initializer: Callable[[], None]):
        with self._cond:
            while self._state is State.INITIALIZING:
                self._cond.wait()
            if self._state is State.READY:
                return
            if self._state is State.FAILED:
                raise self._error
            self._state = State.INITIALIZING

        error: Optional[BaseException] = None
        try:
            initializer()
        except BaseException as e:
            error = e

        with self._cond:
            if error is None:
                self._state = State.READY
            else:
                logger.debug(f"Initialization failed: {error!r}")
                self._state = State.FAILED
                self._error = error
            self._cond.notify_all()
        if error is not None:
            raise error
