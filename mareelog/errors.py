"""
Error types for telemetry log loading.

Only file-structural failures are raised; malformed content inside a file is
carried downstream as NaN fields and invalid timestamps.
"""


class LogFormatError(ValueError):
    """Base class for a log file that cannot be processed at all."""


class EmptyInputError(LogFormatError):
    """The input is empty, whitespace-only, or has no data rows."""


class UnrecognizedFormatError(LogFormatError):
    """No header row could be located and the fallback row does not exist."""

    def __init__(self, line_count: int, header_index: int):
        self.line_count = line_count
        self.header_index = header_index
        super().__init__(
            f"Header row not found: file has {line_count} line(s), "
            f"fallback header index is {header_index}"
        )
