"""Parsing and building of the packets exchanged with a backend server."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .constants import (
    MIN_PROTOCOL_VERSION,
    Capability,
    Command,
    PacketHeader,
    ServerStatus,
)

_BASE_CLIENT_CAPABILITY = (
    Capability.PROTOCOL_41
    | Capability.SECURE_CONNECTION
    | Capability.LONG_PASSWORD
    | Capability.TRANSACTIONS
    | Capability.LONG_FLAG
)


class MalformedPacketError(ValueError):
    """A packet is too short or has unexpected contents."""


@dataclass(frozen=True)
class Handshake:
    """What the server announces in its initial handshake packet."""

    protocol_version: int
    server_version: str
    connection_id: int
    salt: bytes
    capability: int
    status: int = 0


@dataclass(frozen=True)
class OkResult:
    """The contents of an OK packet."""

    affected_rows: int = 0
    insert_id: int = 0
    status: int = 0


class ServerError(Exception):
    """An error packet sent by the server."""

    def __init__(self, code: int, message: str, state: str = "") -> None:
        super().__init__(code, message, state)
        self.code = code
        self.message = message
        self.state = state

    def __str__(self) -> str:
        if self.state:
            return f"ERROR {self.code} ({self.state}): {self.message}"
        return f"ERROR {self.code}: {self.message}"


def _uint16(data: bytes, pos: int) -> int:
    if len(data) < pos + 2:
        raise MalformedPacketError("packet too short")
    return struct.unpack_from("<H", data, pos)[0]


def _read_length_encoded_int(data: bytes, pos: int) -> tuple[int, int]:
    """Return the value at ``pos`` and the number of bytes it takes."""
    if len(data) <= pos:
        raise MalformedPacketError("packet too short")
    first = data[pos]
    if first < 0xFB:
        return first, 1
    if first == 0xFB:
        return 0, 1
    widths = {0xFC: 2, 0xFD: 3, 0xFE: 8}
    width = widths.get(first)
    if width is None:
        raise MalformedPacketError("invalid length-encoded integer")
    raw = data[pos + 1:pos + 1 + width]
    if len(raw) != width:
        raise MalformedPacketError("packet too short")
    return int.from_bytes(raw, "little"), 1 + width


def parse_initial_handshake(data: bytes) -> Handshake:
    """Parse the server's initial handshake packet."""
    if not data:
        raise MalformedPacketError("empty handshake packet")
    if data[0] == PacketHeader.ERR:
        raise MalformedPacketError("read initial handshake error")
    if data[0] < MIN_PROTOCOL_VERSION:
        raise MalformedPacketError(
            f"invalid protocol version {data[0]}, must >= {MIN_PROTOCOL_VERSION}"
        )

    end = data.find(b"\x00", 1)
    if end < 0:
        raise MalformedPacketError("unterminated server version")
    server_version = data[1:end].decode("utf-8", errors="replace")
    pos = end + 1

    if len(data) < pos + 4 + 8 + 1 + 2:
        raise MalformedPacketError("handshake packet too short")
    connection_id = struct.unpack_from("<I", data, pos)[0]
    pos += 4

    salt = bytes(data[pos:pos + 8])
    pos += 8 + 1  # salt and filler

    capability = _uint16(data, pos)
    pos += 2

    status = 0
    if len(data) > pos:
        pos += 1  # server charset
        status = _uint16(data, pos)
        pos += 2
        capability |= _uint16(data, pos) << 16
        pos += 2
        pos += 10 + 1  # auth data length and reserved bytes
        tail = data[pos:pos + 12]
        if len(tail) != 12:
            raise MalformedPacketError("handshake salt too short")
        salt += bytes(tail)

    return Handshake(
        protocol_version=data[0],
        server_version=server_version,
        connection_id=connection_id,
        salt=salt,
        capability=capability,
        status=status,
    )


def parse_ok_packet(data: bytes, capability: int) -> OkResult:
    """Parse an OK packet under the negotiated capability flags."""
    if not data or data[0] != PacketHeader.OK:
        raise MalformedPacketError("invalid ok packet")
    pos = 1
    affected_rows, n = _read_length_encoded_int(data, pos)
    pos += n
    insert_id, n = _read_length_encoded_int(data, pos)
    pos += n

    status = 0
    if capability & (Capability.PROTOCOL_41 | Capability.TRANSACTIONS):
        status = _uint16(data, pos)
    return OkResult(affected_rows=affected_rows, insert_id=insert_id, status=status)


def parse_error_packet(data: bytes, capability: int) -> ServerError:
    """Turn an error packet into a ServerError (returned, not raised)."""
    if not data or data[0] != PacketHeader.ERR:
        raise MalformedPacketError("invalid error packet")
    pos = 1
    code = _uint16(data, pos)
    pos += 2
    state = ""
    if capability & Capability.PROTOCOL_41:
        pos += 1  # '#'
        state = data[pos:pos + 5].decode("ascii", errors="replace")
        pos += 5
    message = data[pos:].decode("utf-8", errors="replace")
    return ServerError(code, message, state)


def is_eof_packet(data: bytes) -> bool:
    """Tell whether ``data`` is an EOF packet."""
    return bool(data) and data[0] == PacketHeader.EOF and len(data) <= 5


def is_autocommit(status: int) -> bool:
    """Tell whether the server status has autocommit on."""
    return bool(status & ServerStatus.AUTOCOMMIT)


def is_in_transaction(status: int) -> bool:
    """Tell whether the server status shows an open transaction."""
    return bool(status & ServerStatus.IN_TRANS)


def client_capability(server_capability: int, db: str = "") -> Capability:
    """Return the capability flags the client announces to the server."""
    capability = _BASE_CLIENT_CAPABILITY & server_capability
    if db:
        capability |= Capability.CONNECT_WITH_DB
    return Capability(capability)


def _as_bytes(arg: bytes | str) -> bytes:
    return arg.encode("utf-8") if isinstance(arg, str) else bytes(arg)


def command_packet(command: Command | int, arg: bytes | str = b"") -> bytes:
    """Build the payload of a command with an optional argument."""
    return bytes([int(command)]) + _as_bytes(arg)


def command_uint32_packet(command: Command | int, arg: int) -> bytes:
    """Build the payload of a command with a 32-bit argument."""
    return bytes([int(command)]) + struct.pack("<I", arg & 0xFFFFFFFF)


def command_str_str_packet(command: Command | int, arg1: bytes | str, arg2: bytes | str) -> bytes:
    """Build the payload of a command with two arguments split by a zero byte."""
    return bytes([int(command)]) + _as_bytes(arg1) + b"\x00" + _as_bytes(arg2)