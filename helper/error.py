"""
Error handling utilities for the session connection store.
Errors carry a trace of the functions they passed through, and the
error kinds callers match on are subclasses of SessionError.
"""

import inspect
from types import FrameType
from typing import Optional, Type


class SessionError(Exception):
    """
    Enhanced error class with trace information.
    Wrapping a SessionError keeps its original error and extends its trace.
    """

    def __init__(self, trace: str, original: Exception):
        """Initialize SessionError with original error and trace."""
        traceWithFunction = trace
        current_frame = inspect.currentframe()

        frame: Optional[FrameType] = None
        if current_frame is not None:
            frame = current_frame.f_back

        if frame:
            traceWithFunction = f"{frame.f_code.co_name} - {trace}"

        if isinstance(original, SessionError):
            self.original = original.original
            self.trace = original.trace + [traceWithFunction]
            self.wrapped: Optional[SessionError] = original
        else:
            self.original = original
            self.trace = [traceWithFunction]
            self.wrapped = None

        super().__init__(str(self.original))

    def __str__(self) -> str:
        """Return formatted error message with trace."""
        return f"{str(self.original)} | Trace: {', '.join(self.trace)}"


class InvalidParameterError(SessionError, ValueError):
    """A required parameter is missing, zero or rejected by a storage constraint."""


class RecordNotFoundError(SessionError, LookupError):
    """No record matches the requested public id."""


class AlreadyExistsError(SessionError):
    """A record with the same public id is already stored."""


def is_error(error: Optional[BaseException], kind: Type[BaseException]) -> bool:
    """
    Report whether an error is of the given kind.
    Follows SessionError wrapping, so a kind stays detectable after
    a caller adds its own trace.

    :param error: The error to inspect.
    :param kind: The error class to match.
    :returns: True if the error or an error it wraps is an instance of kind.
    """
    current = error
    while current is not None:
        if isinstance(current, kind):
            return True
        if isinstance(getattr(current, "original", None), kind):
            return True
        current = getattr(current, "wrapped", None)
    return False
