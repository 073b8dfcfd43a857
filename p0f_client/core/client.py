"""
P0f Query Client - Request/response exchanges over one shared connection.

The p0f API has no request identifiers: a reply is matched to its query
only by ordering on the socket. Every exchange therefore holds the
client lock from the write until the full reply has been read.

Typical usage:

    client = P0fClient("/var/run/p0f.sock")
    client.connect()

    resp = client.query_ip("1.2.3.4")
    if resp.status == Status.NO_MATCH:
        print("No match found")
    else:
        print(f"OS: {resp.os_name}")

    client.stop()

On CommunicationError the connection may be broken. Reconnecting and
retrying is up to the caller.
"""

import threading
import logging
from typing import Callable, Optional

from .connection import Connection
from .errors import CommunicationError, ProtocolError, QueryError
from .protocol import (
    P0F_RESPONSE_MAGIC,
    RESPONSE_SIZE,
    IPInput,
    Response,
    Status,
    create_query_for_ip,
    decode_response,
    encode_query,
)

logger = logging.getLogger(__name__)


class P0fClient:
    """
    Thread-safe client for the p0f query socket.

    Remember to call connect() before doing any queries.

    Attributes:
        socket_file: Path of the p0f API socket
    """

    def __init__(self, socket_file: str,
                 connection_factory: Callable[[str], Connection] = Connection.open):
        """
        Args:
            socket_file: Path of the p0f API socket
            connection_factory: Opens a connection for a path
        """
        self.socket_file = socket_file
        self._connection_factory = connection_factory
        self._connection: Optional[Connection] = None
        self._lock = threading.Lock()

    def set_socket(self, socket_file: str) -> None:
        """Change the socket path used by the next connect()."""
        self.socket_file = socket_file

    @property
    def connected(self) -> bool:
        return self._connection is not None

    def connect(self) -> None:
        """
        Open a connection to the p0f socket, replacing any open one.

        Raises:
            SetupError: If the socket file is missing or cannot be dialed
        """
        connection = self._connection_factory(self.socket_file)
        with self._lock:
            old, self._connection = self._connection, connection
        if old is not None:
            old.close()

    def query_ip(self, address: IPInput) -> Response:
        """
        Query p0f for an IPv4 or IPv6 address.

        A returned Response only means the exchange with the daemon
        succeeded. Check resp.status (or resp.found) to see whether
        there was a fingerprint match.

        Raises:
            ConstructionError: If the address is not IPv4 or IPv6
            CommunicationError: If writing to or reading from the socket fails
            ProtocolError: If the reply is short, has bad magic or an unknown status
            QueryError: If the daemon rejected the query
        """
        query = create_query_for_ip(address)
        payload = encode_query(query)

        with self._lock:
            if self._connection is None:
                raise CommunicationError("not connected to p0f socket")

            try:
                self._connection.write(payload)
            except OSError as e:
                raise CommunicationError(f"writing to socket: {e}") from e

            try:
                data = self._read_reply(self._connection)
            except OSError as e:
                raise CommunicationError(f"reading from socket: {e}") from e

        logger.debug(f"Queried {query.ip}, got {len(data)} bytes")

        resp = decode_response(data)

        if resp.magic != P0F_RESPONSE_MAGIC:
            raise ProtocolError(f"got bad magic: {resp.magic:#x}")

        if resp.status in (Status.OK, Status.NO_MATCH):
            return resp
        if resp.status == Status.BAD_QUERY:
            raise QueryError(f"daemon rejected the query for {query.ip} as malformed")
        raise ProtocolError(f"got unknown response status: {resp.status:#x}")

    @staticmethod
    def _read_reply(connection: Connection) -> bytes:
        # EOF before any byte means the daemon dropped us; EOF mid-reply
        # leaves a short buffer for the decoder to reject.
        data = b''
        while len(data) < RESPONSE_SIZE:
            chunk = connection.read(RESPONSE_SIZE - len(data))
            if not chunk:
                if not data:
                    raise CommunicationError("reading from socket: connection closed by p0f")
                break
            data += chunk
        return data

    def close(self) -> None:
        """Close the connection. Waits for any exchange in progress."""
        with self._lock:
            connection, self._connection = self._connection, None
            if connection is not None:
                connection.close()

    stop = close

    def __enter__(self) -> "P0fClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
