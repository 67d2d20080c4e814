"""
Core FTP client logic.
Includes connection managers, parser, and command handler.
"""

from .connection import ControlConnectionManager, SessionState
from .data_connection import DataConnectionManager
from .commands import ClientCommandHandler
from .parser import Entry, Parser, MessageStructure
from .errors import (
    AuthenticationError,
    ExportWriteError,
    FTPConnectionError,
    ProtocolIOError,
    ProtocolParseError,
    TreeFTPError,
)

__all__ = [
    "ControlConnectionManager",
    "SessionState",
    "DataConnectionManager",
    "ClientCommandHandler",
    "Entry",
    "Parser",
    "MessageStructure",
    "TreeFTPError",
    "FTPConnectionError",
    "ProtocolIOError",
    "AuthenticationError",
    "ProtocolParseError",
    "ExportWriteError",
]
