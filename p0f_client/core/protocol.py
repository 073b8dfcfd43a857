"""
Protocol Codec - Fixed-size binary messages of the p0f query API.

Request (21 bytes, little-endian):
    [ 4 bytes magic ][ 1 byte address type ][ 16 bytes address ]

Response (232 bytes, little-endian):
    [ magic ][ status ][ first_seen ][ last_seen ][ total_count ]
    [ uptime_minutes ][ up_mod_days ][ last_nat ][ last_chg ]   (u32 each)
    [ distance (i16) ][ bad_sw (u8) ][ os_match_q (u8) ]
    [ os_name ][ os_flavor ][ http_name ][ http_flavor ]
    [ link_type ][ language ]                                   (32 bytes each)

The field layout is documented in section 4 of the p0f README.

Encoding and decoding here is purely mechanical. Checking the magic and
status of a reply is left to the caller (see core.client).
"""

import ipaddress
import struct
from dataclasses import dataclass, asdict
from enum import IntEnum
from typing import Any, Dict, Optional, Union

from .errors import ConstructionError, DecodeError


P0F_REQUEST_MAGIC = 0x50304601
P0F_RESPONSE_MAGIC = 0x50304602

ADDRESS_SIZE = 16
STRING_SIZE = 32

QUERY_FORMAT = struct.Struct('<IB16s')
RESPONSE_FORMAT = struct.Struct('<IIIIIIIIIhBB32s32s32s32s32s32s')

QUERY_SIZE = QUERY_FORMAT.size        # 21
RESPONSE_SIZE = RESPONSE_FORMAT.size  # 232


class Status(IntEnum):
    """Status codes sent back by the daemon."""
    BAD_QUERY = 0x00
    OK = 0x10
    NO_MATCH = 0x20


class AddressType(IntEnum):
    """Address family tags used in queries."""
    IPV4 = 0x04
    IPV6 = 0x06


class MatchQuality(IntEnum):
    """OS match quality flags."""
    FUZZY = 0x01
    GENERIC = 0x02


IPInput = Union[str, bytes, ipaddress.IPv4Address, ipaddress.IPv6Address]


@dataclass(frozen=True)
class Query:
    """A single p0f query. address is always 16 bytes."""
    address_type: int
    address: bytes
    magic: int = P0F_REQUEST_MAGIC

    @property
    def ip(self) -> Union[ipaddress.IPv4Address, ipaddress.IPv6Address]:
        """The queried address as an ipaddress object."""
        if self.address_type == AddressType.IPV4:
            return ipaddress.IPv4Address(self.address[:4])
        return ipaddress.IPv6Address(self.address)


@dataclass(frozen=True)
class Response:
    """
    A decoded p0f reply.

    The six string fields are already cut at their first NUL byte.
    """
    magic: int
    status: int
    first_seen: int
    last_seen: int
    total_count: int
    uptime_minutes: int
    up_mod_days: int
    last_nat: int
    last_chg: int
    distance: int
    bad_sw: int
    os_match_q: int
    os_name: str
    os_flavor: str
    http_name: str
    http_flavor: str
    link_type: str
    language: str

    @property
    def found(self) -> bool:
        """True when the daemon had a fingerprint for the address."""
        return self.status == Status.OK

    @property
    def match_quality(self) -> Optional[MatchQuality]:
        try:
            return MatchQuality(self.os_match_q)
        except ValueError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data = asdict(self)
        try:
            data['status'] = Status(self.status).name.lower()
        except ValueError:
            pass
        quality = self.match_quality
        data['os_match_q'] = quality.name.lower() if quality else self.os_match_q
        return data

    def __str__(self) -> str:
        return describe(self)


def describe(response: Response) -> str:
    """
    One-line summary of a matched response.

    Meant for responses with status OK; for a no-match response the
    result is only cosmetic.
    """
    ret = f"{response.os_name} {response.os_flavor}"
    if response.os_match_q == MatchQuality.FUZZY:
        ret += " (fuzzy)"
    else:
        ret += " (generic)"
    return ret


def _decode_string(raw: bytes) -> str:
    return raw.split(b'\x00', 1)[0].decode('ascii', errors='replace')


def _encode_string(value: str, field: str) -> bytes:
    raw = value.encode('ascii')
    if len(raw) > STRING_SIZE:
        raise ValueError(f"{field} must be at most {STRING_SIZE} bytes, got {len(raw)}")
    return raw


def create_query_for_ip(address: IPInput) -> Query:
    """
    Build a query for an IPv4 or IPv6 address.

    IPv4 is tried first: IPv4 addresses and IPv4-mapped IPv6 addresses
    (::ffff:a.b.c.d) are sent as IPv4, everything else as IPv6.

    Args:
        address: Address string, 4 or 16 packed bytes, or an ipaddress object

    Returns:
        Query ready for encoding

    Raises:
        ConstructionError: If the address is neither IPv4 nor IPv6
    """
    if isinstance(address, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        ip = address
    elif isinstance(address, (str, bytes)):
        try:
            ip = ipaddress.ip_address(address)
        except ValueError as e:
            raise ConstructionError(f"could not convert IP to bytes: {address!r}") from e
    else:
        raise ConstructionError(f"unsupported address type: {type(address).__name__}")

    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped

    if ip.version == 4:
        address_type = AddressType.IPV4
    else:
        address_type = AddressType.IPV6

    return Query(
        address_type=address_type,
        address=ip.packed.ljust(ADDRESS_SIZE, b'\x00'),
    )


def encode_query(query: Query) -> bytes:
    """Pack a query into its 21-byte wire form."""
    if len(query.address) != ADDRESS_SIZE:
        raise ConstructionError(f"address must be {ADDRESS_SIZE} bytes, got {len(query.address)}")
    return QUERY_FORMAT.pack(query.magic, query.address_type, query.address)


def decode_query(data: bytes) -> Query:
    """Unpack a query from its wire form. Raises DecodeError if data is short."""
    if len(data) < QUERY_SIZE:
        raise DecodeError(f"query too short: got {len(data)} bytes, need {QUERY_SIZE}")
    magic, address_type, address = QUERY_FORMAT.unpack_from(data)
    return Query(address_type=address_type, address=address, magic=magic)


def decode_response(data: bytes) -> Response:
    """
    Unpack a reply from the daemon.

    Magic and status are not checked here.

    Args:
        data: Raw bytes read from the socket

    Returns:
        Decoded Response

    Raises:
        DecodeError: If data is shorter than RESPONSE_SIZE
    """
    if len(data) < RESPONSE_SIZE:
        raise DecodeError(f"could not convert response: got {len(data)} bytes, need {RESPONSE_SIZE}")

    fields = RESPONSE_FORMAT.unpack_from(data)
    numbers, strings = fields[:12], fields[12:]
    return Response(*numbers, *(_decode_string(s) for s in strings))


def encode_response(response: Response) -> bytes:
    """Pack a Response into its 232-byte wire form."""
    return RESPONSE_FORMAT.pack(
        response.magic,
        response.status,
        response.first_seen,
        response.last_seen,
        response.total_count,
        response.uptime_minutes,
        response.up_mod_days,
        response.last_nat,
        response.last_chg,
        response.distance,
        response.bad_sw,
        response.os_match_q,
        _encode_string(response.os_name, 'os_name'),
        _encode_string(response.os_flavor, 'os_flavor'),
        _encode_string(response.http_name, 'http_name'),
        _encode_string(response.http_flavor, 'http_flavor'),
        _encode_string(response.link_type, 'link_type'),
        _encode_string(response.language, 'language'),
    )


__all__ = [
    'P0F_REQUEST_MAGIC',
    'P0F_RESPONSE_MAGIC',
    'QUERY_SIZE',
    'RESPONSE_SIZE',
    'Status',
    'AddressType',
    'MatchQuality',
    'Query',
    'Response',
    'describe',
    'create_query_for_ip',
    'encode_query',
    'decode_query',
    'decode_response',
    'encode_response',
]
