"""
Shared fixtures: reply builders, a scripted transport and a fake p0f
daemon listening on a real Unix socket.
"""

import os
import shutil
import socket
import sys
import tempfile
import threading
from dataclasses import replace
from typing import Callable, List, Optional

import pytest

# Add project root to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from p0f_client.core.protocol import (  # noqa: E402
    P0F_RESPONSE_MAGIC,
    QUERY_SIZE,
    MatchQuality,
    Query,
    Response,
    Status,
    decode_query,
    encode_response,
)


def make_response(**overrides) -> Response:
    fields = dict(
        magic=P0F_RESPONSE_MAGIC,
        status=Status.OK,
        first_seen=1700000000,
        last_seen=1700003600,
        total_count=12,
        uptime_minutes=3 * 24 * 60 + 125,
        up_mod_days=49,
        last_nat=0,
        last_chg=0,
        distance=7,
        bad_sw=0,
        os_match_q=MatchQuality.FUZZY,
        os_name="Linux",
        os_flavor="3.11 and newer",
        http_name="Firefox",
        http_flavor="10.x or newer",
        link_type="Ethernet or modem",
        language="English",
    )
    fields.update(overrides)
    return Response(**fields)


@pytest.fixture
def ok_response() -> Response:
    return make_response()


@pytest.fixture
def no_match_response() -> Response:
    return replace(
        make_response(status=Status.NO_MATCH),
        os_name="", os_flavor="", http_name="", http_flavor="",
        link_type="", language="", os_match_q=0,
    )


class ScriptedConnection:
    """Stand-in for core.connection.Connection that replays canned replies."""

    def __init__(self, replies: Optional[List[bytes]] = None,
                 write_error: Optional[Exception] = None,
                 read_error: Optional[Exception] = None):
        self.replies = list(replies or [])
        self.write_error = write_error
        self.read_error = read_error
        self.written: List[bytes] = []
        self.close_calls = 0

    def write(self, data: bytes) -> None:
        if self.write_error:
            raise self.write_error
        self.written.append(data)

    def read(self, max_len: int) -> bytes:
        if self.read_error:
            raise self.read_error
        if not self.replies:
            return b''
        chunk = self.replies[0][:max_len]
        rest = self.replies[0][max_len:]
        if rest:
            self.replies[0] = rest
        else:
            self.replies.pop(0)
        return chunk

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def scripted_connection():
    return ScriptedConnection


class FakeP0fDaemon:
    """
    Minimal p0f API server on a Unix socket.

    handler receives each decoded Query and returns the reply bytes, or
    None to hang up without replying.
    """

    def __init__(self, path: str, handler: Callable[[Query], Optional[bytes]]):
        self.path = path
        self.handler = handler
        self.queries: List[Query] = []
        self._server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._server.bind(path)
        self._server.listen(4)
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        while True:
            try:
                conn, _ = self._server.accept()
            except OSError:
                return
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        with conn:
            while True:
                data = b''
                while len(data) < QUERY_SIZE:
                    chunk = conn.recv(QUERY_SIZE - len(data))
                    if not chunk:
                        return
                    data += chunk
                query = decode_query(data)
                self.queries.append(query)
                reply = self.handler(query)
                if reply is None:
                    return
                conn.sendall(reply)

    def close(self) -> None:
        self._server.close()


@pytest.fixture
def socket_dir():
    # AF_UNIX paths are limited to ~108 bytes; pytest's tmp_path can be longer.
    path = tempfile.mkdtemp(prefix="p0f")
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def p0f_daemon(socket_dir, ok_response):
    daemon = FakeP0fDaemon(os.path.join(socket_dir, "p0f.sock"),
                           lambda query: encode_response(ok_response))
    yield daemon
    daemon.close()
