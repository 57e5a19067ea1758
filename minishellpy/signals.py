"""Signal handling for the prompt and for heredoc input."""

from __future__ import annotations

import signal
import sys
from types import FrameType


class _SigintFlag:
    __slots__ = ("raised",)

    def __init__(self) -> None:
        self.raised = False


_SIGINT = _SigintFlag()


def sigint_received() -> bool:
    """True when an interrupt arrived since the flag was last cleared."""
    return _SIGINT.raised


def clear_sigint() -> None:
    """Forget any interrupt received so far."""
    _SIGINT.raised = False


def handle_sigint(signum: int, frame: FrameType | None) -> None:
    """Prompt handler: record the interrupt and move to a fresh line."""
    _SIGINT.raised = True
    sys.stdout.write("\n")
    sys.stdout.flush()


def handle_heredoc_sigint(signum: int, frame: FrameType | None) -> None:
    """Heredoc handler: record the interrupt and abort the pending read."""
    _SIGINT.raised = True
    raise KeyboardInterrupt


def _ignore_sigquit() -> None:
    if hasattr(signal, "SIGQUIT"):
        signal.signal(signal.SIGQUIT, signal.SIG_IGN)


def setup_signals() -> None:
    """Install the prompt handler for SIGINT and ignore SIGQUIT."""
    signal.signal(signal.SIGINT, handle_sigint)
    _ignore_sigquit()


def setup_heredoc_signals() -> None:
    """Install the heredoc handler for SIGINT and ignore SIGQUIT."""
    signal.signal(signal.SIGINT, handle_heredoc_sigint)
    _ignore_sigquit()


def reset_signals() -> None:
    """Restore default handling of SIGINT and SIGQUIT."""
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    if hasattr(signal, "SIGQUIT"):
        signal.signal(signal.SIGQUIT, signal.SIG_DFL)