import logging
from datetime import datetime, timezone
from typing import Optional

from treeftp.core.connection import ControlConnectionManager
from treeftp.core.data_connection import DataConnectionManager
from treeftp.core.errors import ProtocolParseError, TreeFTPError
from treeftp.core.parser import PASV_ACCEPTED_CODE, MessageStructure, Parser

logger = logging.getLogger(__name__)


class ClientCommandHandler:
    """
    Client surface used by the traversal: login, directory listings and
    the session plumbing of the underlying control connection.
    """

    def __init__(self, connection: ControlConnectionManager, parser: Optional[Parser] = None):
        self.conn = connection
        self.parser = parser or Parser()
        self.data_addr = None
        # history as list of dicts: {"time":..., "command":..., "raw":..., "parsed":..., "error":bool}
        self.history = []

    def _record(self, command: str, raw: str, parsed: Optional[MessageStructure], **extra):
        entry = {
            "time": datetime.now(timezone.utc),
            "command": command,
            "raw": raw,
            "parsed": parsed,
            "error": parsed is None or parsed.type in ("error", "unknown"),
        }
        entry.update(extra)
        self.history.append(entry)

    # ----------------- session -----------------
    def login(self, username: str, password: str):
        try:
            self.conn.login(username, password)
        except TreeFTPError:
            self._record(f"LOGIN {username}", "login rejected", None)
            raise
        self._record(f"LOGIN {username}", "logged in", MessageStructure("230", "logged in", "success"))

    def reconnect(self):
        self.conn.reconnect()

    def send_command(self, command: str):
        self.conn.send_command(command)

    def read_line(self) -> str:
        return self.conn.read_line()

    def read_multiline(self) -> str:
        return self.conn.read_multiline()

    def disconnect(self):
        self.conn.disconnect()

    # ----------------- data channel -----------------
    def open_data_channel(self) -> Optional[DataConnectionManager]:
        """
        Negotiates a passive-mode data connection.

        Returns None when the server does not answer 227; raises
        ProtocolParseError when the 227 payload is malformed.
        """
        self.conn.send_command("PASV")
        response = self.conn.read_line()
        parsed = self.parser.parse_data(response)
        self._record("PASV", response, parsed)
        if parsed.code != PASV_ACCEPTED_CODE:
            logger.warning("Passive mode refused: %s", response or "no reply")
            return None

        ip, port = self.parser.parse_pasv_response(parsed.message)
        self.data_addr = (ip, port)
        data_conn = DataConnectionManager(ip, port, timeout=self.conn.timeout, connector=self.conn.connector)
        data_conn.connect()
        return data_conn

    def list_directory(self, path: str) -> str:
        """Returns the raw LIST output for `path`, or "" when no data channel is available."""
        try:
            data_conn = self.open_data_channel()
        except ProtocolParseError as e:
            logger.warning("Skipping listing of %s: %s", path, e)
            return ""
        if data_conn is None:
            return ""

        try:
            self.conn.send_command(f"LIST {path}")
            listing = data_conn.receive_list()
        finally:
            data_conn.close()

        response = self.conn.read_multiline()
        parsed = self.parser.parse_data(response.strip().splitlines()[-1] if response.strip() else "")
        self._record(f"LIST {path}", response, parsed, data=listing)
        return listing

    # Helpers for UI
    def get_history(self):
        """Return a copy of the history list."""
        return list(self.history)

    def clear_history(self):
        self.history.clear()
