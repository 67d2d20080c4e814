"""Excepciones del cliente treeftp."""


class TreeFTPError(Exception):
    """Base exception for every treeftp failure."""


class FTPConnectionError(TreeFTPError, ConnectionError):
    """A control or data transport could not be opened or used."""


class ProtocolIOError(TreeFTPError):
    """Reading from the control connection failed after every reconnection attempt."""


class AuthenticationError(TreeFTPError):
    """The server rejected USER or PASS."""


class ProtocolParseError(TreeFTPError):
    """A PASV reply did not carry a valid h1,h2,h3,h4,p1,p2 payload."""


class ExportWriteError(TreeFTPError):
    """The exported tree could not be written to its destination."""
