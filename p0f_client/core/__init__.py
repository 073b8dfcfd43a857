"""
Core module: wire codec, connection and query client.
"""

from .connection import Connection
from .client import P0fClient
from .protocol import (
    P0F_REQUEST_MAGIC,
    P0F_RESPONSE_MAGIC,
    QUERY_SIZE,
    RESPONSE_SIZE,
    create_query_for_ip,
    encode_query,
    decode_query,
    decode_response,
    encode_response,
)

__all__ = [
    'Connection',
    'P0fClient',
    'P0F_REQUEST_MAGIC',
    'P0F_RESPONSE_MAGIC',
    'QUERY_SIZE',
    'RESPONSE_SIZE',
    'create_query_for_ip',
    'encode_query',
    'decode_query',
    'decode_response',
    'encode_response',
]
