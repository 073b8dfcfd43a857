"""
p0f-client - Client for the p0f passive fingerprinting daemon
=============================================================

Queries a running p0f daemon over its local API socket and returns
what it knows about an IP address (OS, uptime, distance, language, ...).

Usage:
    from p0f_client import P0fClient, Status

    with P0fClient("/var/run/p0f.sock") as client:
        resp = client.query_ip("1.2.3.4")
        if resp.status == Status.OK:
            print(resp)
"""

__version__ = "1.0.0"

from p0f_client.core.client import P0fClient
from p0f_client.core.errors import (
    ErrorKind,
    P0fError,
    SetupError,
    CommunicationError,
    ProtocolError,
    DecodeError,
    QueryError,
    ConstructionError,
)
from p0f_client.core.protocol import (
    AddressType,
    MatchQuality,
    Query,
    Response,
    Status,
)

__all__ = [
    'P0fClient',
    'ErrorKind',
    'P0fError',
    'SetupError',
    'CommunicationError',
    'ProtocolError',
    'DecodeError',
    'QueryError',
    'ConstructionError',
    'AddressType',
    'MatchQuality',
    'Query',
    'Response',
    'Status',
    '__version__',
]
