"""
Connection Module - One Unix stream socket to the p0f daemon.

Thin synchronous wrapper: no retries, no read looping, no timeouts.
Query semantics live in core.client.
"""

import os
import socket
import logging
from typing import Optional

from .errors import SetupError

logger = logging.getLogger(__name__)


class Connection:
    """
    An open connection to a p0f API socket.

    Usage:
        conn = Connection.open("/var/run/p0f.sock")
        conn.write(data)
        reply = conn.read(232)
        conn.close()
    """

    def __init__(self, sock: socket.socket, path: str = ""):
        self._sock: Optional[socket.socket] = sock
        self.path = path

    @classmethod
    def open(cls, path: str) -> "Connection":
        """
        Dial the p0f socket at path.

        The path is stat'ed before dialing. It can still vanish in between;
        that case is reported as a dial failure.

        Raises:
            SetupError: If the path does not exist or cannot be connected to
        """
        try:
            os.stat(path)
        except OSError as e:
            raise SetupError(f"could not stat file: {e}") from e

        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(path)
        except OSError as e:
            sock.close()
            raise SetupError(f"could not open socket: {e}") from e

        logger.debug(f"Connected to p0f socket {path}")
        return cls(sock, path)

    @property
    def closed(self) -> bool:
        return self._sock is None

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise OSError("connection is closed")
        return self._sock

    def write(self, data: bytes) -> None:
        """Send all of data. Raises OSError on failure."""
        self._socket().sendall(data)

    def read(self, max_len: int) -> bytes:
        """Single recv of up to max_len bytes. Returns b'' at EOF."""
        return self._socket().recv(max_len)

    def close(self) -> None:
        """Close the socket. Closing twice is a no-op."""
        if self._sock is None:
            logger.debug(f"Connection to {self.path} already closed")
            return
        sock, self._sock = self._sock, None
        sock.close()
        logger.debug(f"Connection to {self.path} closed")
