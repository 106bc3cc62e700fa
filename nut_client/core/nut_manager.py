"""High-level NUT orchestrator: connect, identify, poll variables."""

import threading
import logging
from datetime import datetime
from typing import Callable

from nut_client.core.var_store import VarStore
from nut_client.protocol.constants import TIMEOUT, POLL_INTERVAL
from nut_client.protocol.errors import NUTError
from nut_client.protocol.nut_protocol import NUTSession, open_session

logger = logging.getLogger(__name__)

MessageCallback = Callable[[str, str], None]  # (timestamp, message)


class NUTManager:
    """Keeps one NUT session alive and refreshes its variables."""

    def __init__(self, store: VarStore | None = None, timeout: float | None = TIMEOUT):
        self.store = store if store is not None else VarStore()
        self.timeout = timeout
        self._session: NUTSession | None = None

        # Connection state
        self.connected = False
        self.address = ""
        self.ups_id: str | None = None
        self.last_error = ""
        self._credentials: tuple[str, str] | None = None
        self._manual_id: str | None = None
        self._plain_ok = False

        # Polling control
        self._poll_thread: threading.Thread | None = None
        self._poll_stop = threading.Event()

        # Serialises session use between the poller and callers
        self._cmd_lock = threading.Lock()

        self._message_callback: MessageCallback | None = None
        self._io_logging = False

    @property
    def session(self) -> NUTSession | None:
        return self._session

    def set_message_callback(self, callback: MessageCallback) -> None:
        self._message_callback = callback

    def set_io_logging(self, enabled: bool) -> None:
        """Route TX/RX lines through the message callback."""
        self._io_logging = enabled

    def _log_message(self, message: str) -> None:
        ts = datetime.now().strftime("%H:%M:%S")
        logger.info("[%s] %s", ts, message)
        if self._message_callback:
            self._message_callback(ts, message)

    def _handle_io(self, direction: str, data: str) -> None:
        """Handle protocol IO logging (called from the session)."""
        if self._io_logging:
            self._log_message(f"{direction}: {data}")

    def connect(self, address: str, username: str | None = None,
                password: str | None = None, ups_id: str | None = None,
                plain_ok: bool = False) -> bool:
        """Open a session, log in if credentials are given, settle the UPS id
        and read every variable once.

        ``plain_ok`` is passed to NUTSession.authenticate.

        Returns True on success.
        """
        self._close_session()
        self._credentials = (username, password) if username is not None else None
        self._manual_id = ups_id
        self._plain_ok = plain_ok
        try:
            with self._cmd_lock:
                self._session = open_session(address, timeout=self.timeout,
                                             store=self.store,
                                             io_callback=self._handle_io)
                self.address = self._session.connection.address
                if self._credentials:
                    self._session.authenticate(username, password or "", plain_ok=plain_ok)
                    self._log_message(f"Logged in as {username}")
                if ups_id:
                    self._session.set_identifier(ups_id)
                else:
                    ups_id = self._session.identify()
                    self._log_message(f"Detected UPS {ups_id!r}")
                self.ups_id = ups_id
                count = self._session.list_var()

            self.connected = True
            self.last_error = ""
            self._log_message(f"Connected to {self.address}, {count} variables")
            return True

        except (NUTError, ValueError) as e:
            self._log_message(f"Connection error: {e}")
            self.last_error = str(e)
            self._close_session()
            return False

    def disconnect(self) -> None:
        """Stop polling and close the session."""
        self.connected = False
        self.stop_polling()
        self._close_session()
        self._log_message("Disconnected")

    def _close_session(self) -> None:
        self.connected = False
        if self._session:
            self._session.close()
            self._session = None

    def reconnect(self) -> bool:
        """Reconnect to the last address with the last credentials."""
        address = self.address
        if not address:
            return False
        username, password = self._credentials or (None, None)
        manual_id = self._manual_id
        plain_ok = self._plain_ok
        self.disconnect()
        return self.connect(address, username, password, manual_id, plain_ok=plain_ok)

    def refresh(self) -> bool:
        """Run one LIST VAR pass into the store. Returns True on success."""
        if not self._session:
            return False
        try:
            with self._cmd_lock:
                self._session.list_var()
            return True
        except NUTError as e:
            logger.error("Refresh failed: %s", e)
            self.last_error = str(e)
            return False

    def get_var(self, name: str) -> str | None:
        """Fetch one variable directly. Returns None on error."""
        if not self._session:
            return None
        try:
            with self._cmd_lock:
                return self._session.get_var(name)
        except NUTError as e:
            logger.error("Error reading %r: %s", name, e)
            self.last_error = str(e)
            return None

    # --- Polling ---

    def start_polling(self, interval: float = POLL_INTERVAL) -> None:
        """Start the background polling thread."""
        if self._poll_thread and self._poll_thread.is_alive():
            return
        self._poll_stop.clear()
        self._poll_thread = threading.Thread(target=self._poll_loop, args=(interval,),
                                             daemon=True)
        self._poll_thread.start()

    def stop_polling(self) -> None:
        """Stop the background polling thread."""
        self._poll_stop.set()
        if self._poll_thread:
            self._poll_thread.join(timeout=5.0)
            self._poll_thread = None

    def _poll_loop(self, interval: float) -> None:
        """Refresh the store every ``interval`` seconds until stopped."""
        while not self._poll_stop.wait(timeout=interval):
            if not self.connected:
                continue
            if not self.refresh():
                self._log_message(f"Poll error: {self.last_error}")
