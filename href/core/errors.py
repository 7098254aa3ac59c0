"""
Exception types for HREF replay.
"""

from typing import Iterable, List, Optional


class HrefError(Exception):
    """Base class for all HREF errors."""
    pass


class LoadError(HrefError):
    """
    Raised when a document cannot be loaded.

    Covers JSON parse failures, closed-schema violations and non-monotonic
    event times. Nothing is partially loaded when this is raised.
    """

    def __init__(self, message: str, problems: Optional[Iterable[str]] = None) -> None:
        self.problems: List[str] = list(problems or [])
        if self.problems:
            message = f"{message}: " + "; ".join(self.problems)
        super().__init__(message)


class OperationError(HrefError):
    """Raised when a playback operation is invalid in the current state."""
    pass
