"""Exceptions raised by the NUT client."""


class NUTError(Exception):
    """Base class for every error raised by nut_client."""


class TransportError(NUTError, ConnectionError):
    """The byte stream failed: I/O error, closed connection or timed-out read.

    Never retried internally; the caller decides whether to reconnect.
    """


class ProtocolError(NUTError):
    """A line arrived that does not fit the expected response shape.

    ``expected`` and ``actual`` hold the lines involved when known, so that
    an identifier mismatch can be spotted from the message alone.
    """

    def __init__(self, message: str, expected: str | None = None,
                 actual: str | None = None):
        if expected is not None:
            message = f"{message}: expected {expected!r}, got {actual!r}"
        elif actual is not None:
            message = f"{message}: {actual!r}"
        super().__init__(message)
        self.expected = expected
        self.actual = actual
