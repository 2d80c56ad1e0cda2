from __future__ import annotations

from typing import Optional


class ConversionError(Exception):
    """Base class for every error that aborts a conversion run."""

    kind = "conversion_error"

    def __init__(self, message: str, line_index: Optional[int] = None, line: Optional[str] = None):
        self.message = message
        self.line_index = line_index
        self.line = line
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.line_index is None:
            return self.message
        return f"line {self.line_index}: {self.message}"

    def as_dict(self) -> dict:
        return {"error": self.kind, "line": self.line_index, "message": self.message}


class InputNotFound(ConversionError):
    kind = "input_not_found"


class OutputWriteFailure(ConversionError):
    kind = "output_write_failure"


class FormatError(ConversionError):
    """A bundle could not be decoded from its three source lines."""

    kind = "format_error"


class MalformedBundle(FormatError):
    kind = "malformed_bundle"


class InvalidTimestamp(FormatError):
    kind = "invalid_timestamp"


class UnrecognizedTimeUnit(FormatError):
    kind = "unrecognized_time_unit"
