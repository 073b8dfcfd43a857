"""
Error Taxonomy - Exceptions raised by the p0f client.

Every failure carries an ErrorKind so callers can branch on the kind
without matching message strings:

- SETUP: socket path missing or not connectable
- COMMUNICATION: read/write on an established connection failed,
  the connection may be broken and is worth re-establishing
- PROTOCOL: short reply, bad magic or unknown status
- QUERY: the daemon rejected the query as malformed
- CONSTRUCTION: the address is neither IPv4 nor IPv6
"""

from enum import Enum


class ErrorKind(Enum):
    """Kinds of failure reported by the client."""
    SETUP = "setup"
    COMMUNICATION = "communication"
    PROTOCOL = "protocol"
    QUERY = "query"
    CONSTRUCTION = "construction"


class P0fError(Exception):
    """Base class for all p0f client errors."""
    kind: ErrorKind = ErrorKind.PROTOCOL


class SetupError(P0fError):
    """Raised when the p0f socket cannot be stat'ed or dialed."""
    kind = ErrorKind.SETUP


class CommunicationError(P0fError):
    """Raised when writing to or reading from the p0f socket fails."""
    kind = ErrorKind.COMMUNICATION


class ProtocolError(P0fError):
    """Raised when the daemon's reply does not follow the protocol."""
    kind = ErrorKind.PROTOCOL


class DecodeError(ProtocolError):
    """Raised when a buffer is too short to hold a full message."""
    pass


class QueryError(P0fError):
    """Raised when the daemon answers with the bad-query status."""
    kind = ErrorKind.QUERY


class ConstructionError(P0fError):
    """Raised when an address cannot be turned into a query."""
    kind = ErrorKind.CONSTRUCTION


class ConfigError(Exception):
    """Raised when a configuration file cannot be parsed or validated."""
    pass


__all__ = [
    'ErrorKind',
    'P0fError',
    'SetupError',
    'CommunicationError',
    'ProtocolError',
    'DecodeError',
    'QueryError',
    'ConstructionError',
    'ConfigError',
]
