import socket
import logging
from typing import Callable, Optional

from treeftp.config import DEFAULT_TIMEOUT
from treeftp.core.errors import FTPConnectionError

logger = logging.getLogger(__name__)


class DataConnectionManager:
    def __init__(self, ip: str, port: int, timeout: float = DEFAULT_TIMEOUT,
                 connector: Optional[Callable] = None):
        """
        Maneja la conexión de datos PASV del cliente FTP.
        """
        self.ip = ip
        self.port = port
        self.timeout = timeout
        self.connector = connector or socket.create_connection
        self.data_socket = None

    def connect(self):
        """
        Establece la conexión TCP con el servidor en el canal de datos.
        """
        try:
            self.data_socket = self.connector((self.ip, self.port), self.timeout)
        except OSError as e:
            raise FTPConnectionError(f"Failed to open data connection to {self.ip}:{self.port} - {e}") from e
        logger.debug("[DATA] Connected to %s:%s", self.ip, self.port)

    def close(self):
        """
        Cierra la conexión de datos.
        """
        if self.data_socket:
            try:
                self.data_socket.close()
            except OSError as e:
                logger.debug("[DATA] Error closing data socket: %s", e)
            self.data_socket = None
            logger.debug("[DATA] Disconnected from %s:%s", self.ip, self.port)

    def receive_list(self) -> str:
        """
        Recibe el listado del servidor hasta que cierra la conexión.
        """
        if self.data_socket is None:
            raise FTPConnectionError("Data connection is not open.")
        buffer = []
        try:
            while True:
                data = self.data_socket.recv(4096)
                if not data:
                    break
                buffer.append(data)
        except OSError as e:
            raise FTPConnectionError(f"Data transfer from {self.ip}:{self.port} failed - {e}") from e
        return b''.join(buffer).decode('utf-8', errors='replace')
