"""Failure values returned by resource providers.

Providers report expected failures by returning a `ResourceFailure` instead of
raising. Only the router turns failures (and stray exceptions) into error
envelopes.
"""

from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    NOT_A_DIRECTORY = "not_a_directory"
    NOT_A_FILE = "not_a_file"
    PARAMETER_MISSING = "parameter_missing"
    PROVIDER_FAILURE = "provider_failure"


@dataclass(frozen=True)
class ResourceFailure:
    kind: FailureKind
    message: str

    def __str__(self) -> str:
        return self.message

    @classmethod
    def access_denied(cls, message: str) -> "ResourceFailure":
        return cls(FailureKind.ACCESS_DENIED, message)

    @classmethod
    def not_found(cls, message: str) -> "ResourceFailure":
        return cls(FailureKind.NOT_FOUND, message)

    @classmethod
    def parameter_missing(cls, message: str) -> "ResourceFailure":
        return cls(FailureKind.PARAMETER_MISSING, message)

    @classmethod
    def from_exception(cls, error: BaseException) -> "ResourceFailure":
        """Wrap an unexpected exception, keeping its message verbatim."""
        if isinstance(error, FileNotFoundError):
            return cls(FailureKind.NOT_FOUND, _os_error_message(error))
        if isinstance(error, OSError):
            return cls(FailureKind.PROVIDER_FAILURE, _os_error_message(error))
        return cls(FailureKind.PROVIDER_FAILURE, str(error))


def _os_error_message(error: OSError) -> str:
    if error.strerror and error.filename:
        return f"{error.strerror}: {error.filename}"
    return str(error)
