"""Error types for the ffprobe shim.

Everything except SubprocessFailure is recoverable: the orchestrator
answers it by handing the call to the real ffprobe.
"""


class ShimError(Exception):
    """Base exception for all shim failures."""
    pass


class ParseError(ShimError):
    """Raised when a filename carries no recognizable release naming."""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"Cannot parse {filename!r}: {reason}")


class ClassificationMiss(ShimError):
    """Raised when no template category matches a filename."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"No template matches {filename!r}")


class SerializationError(ShimError):
    """Raised when a report cannot be encoded."""
    pass


class UnsupportedFormatRequest(ShimError):
    """Raised when the caller asks for a writer the shim does not produce."""

    def __init__(self, output_format: str):
        self.output_format = output_format
        super().__init__(f"Unsupported output format: {output_format}")


class ArgumentScanError(ShimError):
    """Raised when the argument vector cannot be scanned."""
    pass


class SubprocessFailure(ShimError):
    """Raised when the real ffprobe cannot be run or times out."""
    pass
