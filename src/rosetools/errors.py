"""
Codec error types.

Every decode/encode failure surfaces as one of these. Nothing in the codecs
recovers locally: a failure aborts the whole call and no partial record is
handed back.

  RoseError
    StreamExhaustedError    - short read / truncated data (also an EOFError)
    UnsupportedVersionError - unknown format identifier (also a ValueError)
    SequenceTooLargeError   - count does not fit its on-disk prefix (also a ValueError)
    ValueOutOfRangeError    - value does not fit its on-disk field (also a ValueError)

Underlying OSErrors raised by the stream itself (write/seek failures) are
not wrapped.
"""

from typing import Optional


class RoseError(Exception):
    """Base class for codec failures."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class StreamExhaustedError(RoseError, EOFError):
    """A read needed more bytes than the stream had left."""

    def __init__(self, operation: str, requested: int, available: int, position: int):
        super().__init__(
            f"{operation}: unexpected end of stream at offset {position} "
            f"(needed {requested} bytes, got {available})",
            operation,
        )
        self.requested = requested
        self.available = available
        self.position = position


class UnsupportedVersionError(RoseError, ValueError):
    """Identifier string did not match any known format version."""

    def __init__(self, identifier: str, operation: str = "read_identifier"):
        super().__init__(f"Unsupported version identifier: {identifier!r}", operation)
        self.identifier = identifier


class SequenceTooLargeError(RoseError, ValueError):
    """A sequence is longer than its count/length prefix can express."""

    def __init__(self, operation: str, length: int, limit: int):
        super().__init__(
            f"{operation}: {length} elements exceeds the encodable maximum of {limit}",
            operation,
        )
        self.length = length
        self.limit = limit


class ValueOutOfRangeError(RoseError, ValueError):
    """A value can't be packed into its on-disk field (e.g. 70000 as int16)."""

    def __init__(self, operation: str, value, reason: str = ""):
        message = f"{operation}: cannot encode {value!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, operation)
        self.value = value
