import socket
import logging
import time
from enum import Enum
from typing import Callable, Optional

from treeftp.config import DEFAULT_TIMEOUT, RetryPolicy
from treeftp.core.errors import AuthenticationError, FTPConnectionError, ProtocolIOError
from treeftp.core.parser import Parser

logger = logging.getLogger(__name__)


class SessionState(Enum):
    DISCONNECTED = "DISCONNECTED"
    CONNECTED = "CONNECTED"
    AUTHENTICATED = "AUTHENTICATED"


class RetryState:
    """Counts the attempts spent by the current (or last) read operation."""

    def __init__(self, max_attempts: int):
        self.max_attempts = max_attempts
        self.attempts = 0

    def reset(self):
        self.attempts = 0

    def next_attempt(self) -> bool:
        """Registra un intento nuevo; False si ya se agotaron."""
        if self.attempts >= self.max_attempts:
            return False
        self.attempts += 1
        return True

    def exhausted(self) -> bool:
        return self.attempts >= self.max_attempts


class _Transport:
    """Socket of the control connection plus its buffered reader."""

    def __init__(self, sock):
        self.sock = sock
        self.reader = sock.makefile('rb')

    def close(self):
        try:
            self.reader.close()
        except OSError:
            pass
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self.sock.close()


class ControlConnectionManager:
    """
    Control connection of an FTP session.

    Owns a single transport at a time. Reads that fail with an I/O error
    trigger `reconnect()` and are retried up to `retry.max_retries` times.
    Reconnecting restores the socket only: the server sees a new,
    unauthenticated session.

    `connector(address, timeout)` opens the socket; it defaults to
    `socket.create_connection` and is replaced by fakes in tests, together
    with `sleep`.
    """

    def __init__(self, host: str, port: int, timeout: float = DEFAULT_TIMEOUT,
                 retry: Optional[RetryPolicy] = None, connector: Optional[Callable] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.retry = retry or RetryPolicy()
        self.connector = connector or socket.create_connection
        self._sleep = sleep
        self._transport: Optional[_Transport] = None
        self.state = SessionState.DISCONNECTED
        self.retry_state = RetryState(self.retry.max_retries)
        self.parser = Parser()

    def is_connected(self) -> bool:
        return self._transport is not None

    # ----------------- transport lifecycle -----------------
    def _open_transport(self) -> _Transport:
        logger.debug("Connecting to %s:%s (timeout=%ss)", self.host, self.port, self.timeout)
        try:
            sock = self.connector((self.host, self.port), self.timeout)
        except OSError as e:
            raise FTPConnectionError(f"Failed to connect to {self.host}:{self.port} - {e}") from e
        return _Transport(sock)

    def connect(self):
        if self._transport is not None:
            raise RuntimeError("Connection already established.")
        self._transport = self._open_transport()
        self.state = SessionState.CONNECTED
        self.retry_state.reset()
        logger.info("Connected to %s:%s", self.host, self.port)

        try:
            greeting = self._read_raw_line()
        except OSError as e:
            self.disconnect()
            raise FTPConnectionError(f"No greeting from {self.host}:{self.port} - {e}") from e
        logger.info("%s", greeting)

    def disconnect(self):
        if self._transport is not None:
            transport, self._transport = self._transport, None
            try:
                transport.close()
            except OSError as e:
                logger.debug("Error closing control socket: %s", e)
            logger.info("Disconnected from %s:%s", self.host, self.port)
        self.state = SessionState.DISCONNECTED

    def reconnect(self):
        """Reabre el transporte; no repite el login."""
        self.disconnect()
        last_error = None
        for attempt in range(1, self.retry.max_retries + 1):
            try:
                self._transport = self._open_transport()
            except FTPConnectionError as e:
                last_error = e
                logger.warning("Reconnection attempt %d/%d to %s:%s failed: %s",
                               attempt, self.retry.max_retries, self.host, self.port, e)
                if attempt < self.retry.max_retries:
                    self._sleep(self.retry.retry_interval)
                continue
            self.state = SessionState.CONNECTED
            logger.info("Reconnected to %s:%s", self.host, self.port)
            return

        logger.error("Reconnection to %s:%s failed after %d attempts",
                     self.host, self.port, self.retry.max_retries)
        raise FTPConnectionError(f"Could not reconnect to {self.host}:{self.port}") from last_error

    # ----------------- commands -----------------
    def send_command(self, command: str):
        if self._transport is None:
            raise FTPConnectionError("No connection established.")
        if not command.endswith('\r\n'):
            command += '\r\n'
        shown = "PASS ****" if command.upper().startswith("PASS ") else command.strip()
        logger.debug("→ SEND: %s", shown)
        try:
            self._transport.sock.sendall(command.encode('utf-8'))
        except OSError as e:
            raise FTPConnectionError(f"Failed to send command to {self.host}:{self.port} - {e}") from e

    def login(self, username: str, password: str):
        self.send_command(f"USER {username}")
        user_response = self.read_line()
        logger.info("%s", user_response)
        if not self.parser.is_login_accepted(user_response):
            raise AuthenticationError(f"Authentication failed: {user_response or 'no reply to USER'}")

        self.send_command(f"PASS {password}")
        pass_response = self.read_line()
        logger.info("%s", pass_response)
        if not self.parser.is_login_accepted(pass_response):
            raise AuthenticationError(f"Authentication failed: {pass_response or 'no reply to PASS'}")

        self.state = SessionState.AUTHENTICATED

    # ----------------- replies -----------------
    def _readline_bytes(self) -> bytes:
        if self._transport is None:
            raise ConnectionResetError("control connection is closed")
        return self._transport.reader.readline()

    @staticmethod
    def _decode(data: bytes) -> str:
        return data.decode('utf-8', errors='replace').rstrip('\r\n')

    def _read_raw_line(self) -> str:
        # EOF comes back as ""
        return self._decode(self._readline_bytes())

    def _read_until_completion(self) -> str:
        lines = []
        while True:
            data = self._readline_bytes()
            if not data:
                break
            line = self._decode(data)
            lines.append(line + "\n")
            if self.parser.is_completion_line(line):
                break
        return "".join(lines)

    def _with_retry(self, operation: Callable[[], str]) -> str:
        self.retry_state.reset()
        while self.retry_state.next_attempt():
            try:
                response = operation()
            except OSError as e:
                if self.retry_state.exhausted():
                    logger.error("Reading response failed: %s", e)
                    break
                logger.warning("Reading response failed (%s); attempting to reconnect...", e)
                try:
                    self.reconnect()
                except FTPConnectionError as exc:
                    raise ProtocolIOError(
                        "Reading response from server failed: reconnection impossible") from exc
                continue
            logger.debug("← RECV: %s", response.strip())
            return response
        raise ProtocolIOError(
            f"Reading response from server failed after {self.retry_state.attempts} attempts.")

    def read_line(self) -> str:
        return self._with_retry(self._read_raw_line)

    def read_multiline(self) -> str:
        return self._with_retry(self._read_until_completion)
