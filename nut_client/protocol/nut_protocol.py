"""NUT session: login, UPS discovery, variable listing and fetch."""

import logging
from typing import Callable

from nut_client.core.var_store import VarStore
from nut_client.protocol.line_conn import LineConnection
from nut_client.protocol.constants import TIMEOUT, AUTH_ACK_PREFIX, MARKER_VAR
from nut_client.protocol.commands import (
    ResponseKind, build_command, classify, begin_variants, row_prefixes,
    describe_error,
)
from nut_client.protocol.errors import ProtocolError
from nut_client.protocol.tokens import (
    split_tokens, unquote, unquote_join, token_width,
)

logger = logging.getLogger(__name__)

IOCallback = Callable[[str, str], None]  # (direction "TX"/"RX", data)


def _mask_secret(line: str) -> str:
    """Hide the PASSWORD argument from logs."""
    if line.startswith("PASSWORD "):
        return 'PASSWORD "****"'
    return line


class NUTSession:
    """One conversation with upsd over a single LineConnection.

    Holds the established UPS identifier together with its token width,
    which is how far the identifier pushes every later token in a VAR row.
    Not safe for concurrent use: every operation assumes the next line on
    the stream answers the command it just sent.
    """

    def __init__(self, conn: LineConnection, store: VarStore | None = None,
                 io_callback: IOCallback | None = None):
        self._conn = conn
        self.store = store if store is not None else VarStore()
        self._io_callback = io_callback
        self._ups_id: str | None = None
        self._ups_id_width = 0
        self._authenticated = False

    def __enter__(self) -> "NUTSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def connection(self) -> LineConnection:
        return self._conn

    @property
    def ups_id(self) -> str | None:
        return self._ups_id

    @property
    def ups_id_width(self) -> int:
        return self._ups_id_width

    @property
    def authenticated(self) -> bool:
        return self._authenticated

    def close(self) -> None:
        """Release the transport."""
        self._conn.close()

    # --- Line I/O ---

    def _send(self, line: str) -> None:
        display = _mask_secret(line)
        logger.debug("TX: %s", display)
        if self._io_callback:
            self._io_callback("TX", display)
        self._conn.write_line(line)

    def _receive(self) -> str:
        line = self._conn.read_line()
        logger.debug("RX: %s", line)
        if self._io_callback:
            self._io_callback("RX", line)
        return line

    # --- Identifier ---

    def set_identifier(self, ups_id: str) -> None:
        """Use ``ups_id`` for later LIST VAR / GET VAR without asking upsd."""
        if not ups_id:
            raise ValueError("UPS identifier must not be empty")
        self._ups_id = ups_id
        self._ups_id_width = token_width(ups_id)

    def _resolve_id(self, ups_id: str | None) -> tuple[str, int]:
        """Return (identifier, width) for an explicit id or the session's."""
        if ups_id is None:
            if self._ups_id is None:
                raise ValueError("No UPS identifier established; "
                                 "call identify() or set_identifier() first")
            return self._ups_id, self._ups_id_width
        if not ups_id:
            raise ValueError("UPS identifier must not be empty")
        if ups_id == self._ups_id:
            return ups_id, self._ups_id_width
        return ups_id, token_width(ups_id)

    # --- Operations ---

    def authenticate(self, username: str, password: str, plain_ok: bool = False) -> None:
        """Send USERNAME and PASSWORD and wait for the login acknowledgement.

        The exchange ends on a line starting with ``OK L`` and every line
        before it is discarded. Servers that only ever answer each command
        with a plain ``OK`` need ``plain_ok``, which ends the exchange after
        one ``OK`` per command instead. An ERR reply raises ProtocolError.
        """
        commands = [build_command("USERNAME", username),
                    build_command("PASSWORD", password)]
        for cmd in commands:
            self._send(cmd)

        acks = 0
        while True:
            line = self._receive()
            kind = classify(line)
            if line.startswith(AUTH_ACK_PREFIX):
                break
            if kind is ResponseKind.ERR:
                raise ProtocolError(f"Login rejected: {describe_error(line)}",
                                    actual=line)
            if plain_ok and kind is ResponseKind.OK:
                acks += 1
                if acks == len(commands):
                    break
            else:
                logger.debug("Discarding line during login: %r", line)
        self._authenticated = True

    def list_ups(self) -> dict[str, str]:
        """Return ``{identifier: description}`` for every UPS upsd knows."""
        self._send(build_command("LIST UPS"))
        units: dict[str, str] = {}
        while True:
            line = self._receive()
            kind = classify(line)
            if kind is ResponseKind.END:
                break
            if kind is ResponseKind.ERR:
                raise ProtocolError(f"LIST UPS failed: {describe_error(line)}",
                                    actual=line)
            if kind is ResponseKind.UPS:
                ups_id, description = _parse_ups_row(line)
                units[ups_id] = description
        return units

    def identify(self) -> str:
        """Detect the UPS identifier with LIST UPS and make it current.

        Meant for servers with a single UPS; when more are listed the last
        row wins.
        """
        units = self.list_ups()
        if not units:
            raise ProtocolError("No UPS registered on the server (LIST UPS was empty)")
        ups_id = next(reversed(units))
        if len(units) > 1:
            logger.warning("Server lists %d UPS units, using %r", len(units), ups_id)
        self.set_identifier(ups_id)
        return ups_id

    def list_var(self, ups_id: str | None = None) -> int:
        """Refresh the store with every variable of the UPS.

        Entries are written as rows arrive, so an error part way through
        leaves the rows read so far in the store. Returns the number of
        rows read.
        """
        ups_id, width = self._resolve_id(ups_id)
        self._send(build_command("LIST VAR", ups_id))

        line = self._receive()
        headers = begin_variants("LIST VAR", ups_id)
        if line not in headers:
            raise ProtocolError("Unexpected LIST VAR header (check the UPS identifier)",
                                expected=headers[0], actual=line)

        prefixes = row_prefixes(MARKER_VAR, ups_id)
        count = 0
        while True:
            line = self._receive()
            if not line.startswith(prefixes):
                if classify(line) is not ResponseKind.END:
                    logger.warning("LIST VAR ended on unexpected line: %r", line)
                break
            tokens = split_tokens(line)
            name = unquote(tokens[1 + width])
            self.store.set(name, unquote_join(tokens, 2 + width))
            count += 1
        return count

    def get_var(self, var_name: str, *, ups_id: str | None = None) -> str:
        """Fetch one variable's current value."""
        ups_id, width = self._resolve_id(ups_id)
        self._send(build_command("GET VAR", ups_id, var_name))

        line = self._receive()
        kind = classify(line)
        if kind is ResponseKind.ERR:
            raise ProtocolError(f"GET VAR {var_name} failed: {describe_error(line)}",
                                actual=line)
        tokens = split_tokens(line)
        # VAR + identifier tokens + name + value
        if kind is not ResponseKind.VAR or len(tokens) < 3 + width:
            raise ProtocolError("Invalid response to GET VAR (check the UPS identifier)",
                                actual=line)
        return unquote_join(tokens, 2 + width)


def _parse_ups_row(line: str) -> tuple[str, str]:
    """Split ``UPS <id> "<description>"`` into (id, description).

    The identifier may contain spaces; the description is the last field
    starting with a quote.
    """
    tokens = split_tokens(line)
    if len(tokens) < 2:
        raise ProtocolError("Malformed UPS row", actual=line)

    desc_index = len(tokens)
    for i in range(len(tokens) - 1, 1, -1):
        if tokens[i].startswith('"'):
            desc_index = i
            break

    ups_id = unquote(" ".join(tokens[1:desc_index]))
    if not ups_id:
        raise ProtocolError("Malformed UPS row", actual=line)
    return ups_id, unquote_join(tokens, desc_index)


def open_session(address: str, timeout: float | None = TIMEOUT,
                 store: VarStore | None = None,
                 io_callback: IOCallback | None = None) -> NUTSession:
    """Connect to upsd at ``address`` (default port 3493) and start a session."""
    conn = LineConnection()
    conn.open(address, timeout=timeout)
    return NUTSession(conn, store=store, io_callback=io_callback)
