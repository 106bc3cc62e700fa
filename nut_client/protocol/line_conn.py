"""Thin pyserial wrapper that frames a TCP byte stream as LF-terminated lines."""

import logging
import threading
import serial

from nut_client.protocol.constants import (
    DEFAULT_PORT, TIMEOUT, WRITE_TIMEOUT, LINE_TERMINATOR, ENCODING,
    ENCODING_ERRORS,
)
from nut_client.protocol.errors import TransportError, ProtocolError

logger = logging.getLogger(__name__)


def parse_address(address: str) -> tuple[str, int]:
    """Split ``host[:port]`` into (host, port), defaulting to port 3493.

    Accepts ``host``, ``host:port``, ``[v6addr]``, ``[v6addr]:port`` and a
    bare IPv6 literal (more than one colon, no brackets).
    """
    address = address.strip()
    if address.startswith("["):
        host, sep, rest = address[1:].partition("]")
        if not sep or (rest and not rest.startswith(":")):
            raise ValueError(f"Malformed address: {address!r}")
        port = rest[1:]
    elif address.count(":") == 1:
        host, port = address.split(":")
    else:
        host, port = address, ""

    if not host:
        raise ValueError(f"Missing host in address: {address!r}")
    if not port:
        return host, DEFAULT_PORT
    try:
        port_num = int(port)
    except ValueError:
        raise ValueError(f"Invalid port in address: {address!r}") from None
    if not 0 < port_num < 65536:
        raise ValueError(f"Port out of range in address: {address!r}")
    return host, port_num


def socket_url(host: str, port: int) -> str:
    """Build the pyserial ``socket://`` URL for host and port."""
    if ":" in host:
        host = f"[{host}]"
    return f"socket://{host}:{port}"


class LineConnection:
    """Line-oriented channel over a pyserial ``socket://`` port.

    Writes are serialised by an internal lock. Reads are not: one session
    owns the connection and alternates strictly between request and reply.
    Bytes already received past the current line are kept for the next read.
    """

    def __init__(self):
        self._port: serial.SerialBase | None = None
        self._lock = threading.Lock()
        self._rx_buffer = bytearray()
        self.address = ""

    @property
    def is_open(self) -> bool:
        return self._port is not None and self._port.is_open

    def open(self, address: str, timeout: float | None = TIMEOUT) -> None:
        """Connect to a upsd instance at ``address``.

        ``timeout`` becomes the stream's read timeout; None blocks forever.
        """
        host, port = parse_address(address)
        url = socket_url(host, port)
        with self._lock:
            if self._port and self._port.is_open:
                self._close_port_locked()
            try:
                self._port = serial.serial_for_url(
                    url, timeout=timeout, write_timeout=WRITE_TIMEOUT)
            except (OSError, serial.SerialException) as e:
                self._port = None
                raise TransportError(f"Could not connect to {host}:{port}: {e}") from e
        self.address = f"{host}:{port}"
        logger.debug("Opened %s", url)

    def close(self) -> None:
        """Close the stream. Safe to call more than once."""
        with self._lock:
            self._close_port_locked()

    def _close_port_locked(self) -> None:
        """Internal close: must be called while holding self._lock."""
        self._rx_buffer.clear()
        if not self._port:
            return
        try:
            self._port.close()
        except (OSError, serial.SerialException) as e:
            logger.debug("Error while closing %s: %s", self.address, e)
        self._port = None

    def _require_open(self) -> serial.SerialBase:
        if not self._port or not self._port.is_open:
            raise TransportError("Connection is not open")
        return self._port

    def write_line(self, text: str) -> None:
        """Send ``text`` followed by a single LF."""
        if "\n" in text:
            raise ValueError(f"Line must not contain a newline: {text!r}")
        data = text.encode(ENCODING, errors=ENCODING_ERRORS) + LINE_TERMINATOR
        with self._lock:
            port = self._require_open()
            try:
                port.write(data)
            except (OSError, serial.SerialException) as e:
                raise TransportError(f"Write failed: {e}") from e

    def read_line(self) -> str:
        """Block until a full line arrives and return it without the LF.

        A trailing CR is dropped as well.
        """
        port = self._require_open()
        while LINE_TERMINATOR not in self._rx_buffer:
            try:
                # Take whatever is waiting, or block for one byte
                chunk = port.read(port.in_waiting or 1)
            except (OSError, serial.SerialException) as e:
                raise TransportError(f"Read failed: {e}") from e
            if not chunk:
                partial = bytes(self._rx_buffer)
                self._rx_buffer.clear()
                if partial:
                    raise ProtocolError(
                        "Unterminated line",
                        actual=partial.decode(ENCODING, errors=ENCODING_ERRORS))
                raise TransportError(
                    "Timed out or connection closed while waiting for a line")
            self._rx_buffer += chunk

        end = self._rx_buffer.index(LINE_TERMINATOR)
        raw = bytes(self._rx_buffer[:end])
        del self._rx_buffer[:end + len(LINE_TERMINATOR)]

        line = raw.decode(ENCODING, errors=ENCODING_ERRORS)
        if line.endswith("\r"):
            line = line[:-1]
        return line
