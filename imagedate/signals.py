"""
Turns SIGINT/SIGTERM into exceptions so the CLI reports them like any
other abort.
"""
import signal

from .exceptions import ProgramInterruptedError, TerminatedError


def _handle_signal(signum, frame):
    if signum == signal.SIGINT:
        raise ProgramInterruptedError("Program interrupted by user")
    raise TerminatedError(signum)


def install_signal_handlers() -> dict:
    """Registers the handlers and returns the previous ones for restore_signal_handlers()."""
    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        previous[sig] = signal.signal(sig, _handle_signal)
    return previous


def restore_signal_handlers(previous: dict):
    for sig, handler in previous.items():
        # None means the handler was not installed from Python
        signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
