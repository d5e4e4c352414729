"""
Error taxonomy shared by the note assistant core.

Every error carries a machine-readable kind and a human-readable message
that front ends can show as-is.
"""

from enum import Enum


class ErrorKind(str, Enum):
    INPUT = "input"
    TRANSIENT_IO = "transient_io"
    CONFIGURATION = "configuration"
    DECODING = "decoding"


class NoteCoreError(Exception):
    """Base exception for the note assistant core."""

    kind: ErrorKind = ErrorKind.TRANSIENT_IO

    def __init__(
        self,
        message: str,
        kind: ErrorKind | None = None,
        recoverable: bool | None = None,
        user_message: str | None = None,
    ):
        super().__init__(message)
        if kind is not None:
            self.kind = kind
        # Only transient failures are worth retrying
        self.recoverable = (
            recoverable if recoverable is not None else self.kind == ErrorKind.TRANSIENT_IO
        )
        self.user_message = user_message or message

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": str(self),
            "user_message": self.user_message,
            "recoverable": self.recoverable,
        }
