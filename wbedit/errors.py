from __future__ import annotations

from wbedit.schema.models import ErrorPayload


class AppError(Exception):
    """Base error for every failure surfaced to the caller.

    `kind` is the tag the UI layer switches on; the message carries the
    underlying diagnostic (parser output, OS error text).
    """

    kind = "Internal"
    label = "Internal error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.label}: {self.message}"

    def to_payload(self) -> ErrorPayload:
        return ErrorPayload(type=self.kind, message=self.message)


class FileIOError(AppError):
    kind = "Io"
    label = "IO error"


class ConfigError(AppError):
    kind = "Config"
    label = "Configuration error"


class ParseError(AppError):
    kind = "Parse"
    label = "Parse error"


class ConfigValidationError(AppError):
    kind = "Validation"
    label = "Validation error"


class NotFoundError(AppError):
    kind = "NotFound"
    label = "Not found"


class PermissionDeniedError(AppError):
    kind = "PermissionDenied"
    label = "Permission denied"


class AlreadyExistsError(AppError):
    kind = "AlreadyExists"
    label = "Already exists"


class InternalError(AppError):
    pass


def from_os_error(exc: OSError, context: str | None = None) -> AppError:
    """Map an `OSError` onto the matching typed error.

    **Example**
    - `from_os_error(FileNotFoundError(2, "No such file"), "style.css")`
      -> `NotFoundError("style.css: [Errno 2] No such file")`
    """

    message = f"{context}: {exc}" if context else str(exc)
    if isinstance(exc, FileNotFoundError):
        return NotFoundError(message)
    if isinstance(exc, PermissionError):
        return PermissionDeniedError(message)
    if isinstance(exc, FileExistsError):
        return AlreadyExistsError(message)
    return FileIOError(message)
