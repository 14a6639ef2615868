import struct

import pytest

from shardproxy.constants import Capability, Command, PacketHeader, ServerStatus
from shardproxy.protocol import (
    Handshake,
    MalformedPacketError,
    OkResult,
    ServerError,
    client_capability,
    command_packet,
    command_str_str_packet,
    command_uint32_packet,
    is_autocommit,
    is_eof_packet,
    is_in_transaction,
    parse_error_packet,
    parse_initial_handshake,
    parse_ok_packet,
)

SALT1 = b"abcdefgh"
SALT2 = b"ijklmnopqrst"


def _handshake(version=10, full=True, cap_low=0xF7FF, cap_high=0x000F, status=0x0002):
    data = bytes([version]) + b"5.6.20\x00" + struct.pack("<I", 77) + SALT1 + b"\x00"
    data += struct.pack("<H", cap_low)
    if full:
        data += b"\x21" + struct.pack("<H", status) + struct.pack("<H", cap_high)
        data += b"\x15" + b"\x00" * 10 + SALT2 + b"\x00"
    return data


def test_parse_full_handshake():
    hs = parse_initial_handshake(_handshake())
    assert hs == Handshake(
        protocol_version=10,
        server_version="5.6.20",
        connection_id=77,
        salt=SALT1 + SALT2,
        capability=(0x000F << 16) | 0xF7FF,
        status=0x0002,
    )


def test_parse_short_handshake_keeps_first_salt_only():
    hs = parse_initial_handshake(_handshake(full=False))
    assert hs.salt == SALT1
    assert hs.capability == 0xF7FF
    assert hs.status == 0


def test_handshake_error_packet_rejected():
    with pytest.raises(MalformedPacketError, match="initial handshake"):
        parse_initial_handshake(bytes([PacketHeader.ERR]) + b"\x00\x00")


def test_handshake_old_protocol_rejected():
    with pytest.raises(MalformedPacketError, match="invalid protocol version 9"):
        parse_initial_handshake(_handshake(version=9))


def test_parse_ok_packet_protocol41():
    data = bytes([PacketHeader.OK, 3, 42]) + struct.pack("<HH", ServerStatus.AUTOCOMMIT, 0)
    result = parse_ok_packet(data, Capability.PROTOCOL_41)
    assert result == OkResult(affected_rows=3, insert_id=42, status=ServerStatus.AUTOCOMMIT)


def test_parse_ok_packet_large_insert_id():
    data = bytes([PacketHeader.OK, 1, 0xFC]) + struct.pack("<H", 1000) + struct.pack("<H", 3)
    result = parse_ok_packet(data, Capability.TRANSACTIONS)
    assert result.insert_id == 1000
    assert result.status == 3


def test_parse_ok_packet_without_status_capability():
    data = bytes([PacketHeader.OK, 5, 6])
    result = parse_ok_packet(data, 0)
    assert result == OkResult(affected_rows=5, insert_id=6, status=0)


def test_parse_ok_packet_rejects_other_header():
    with pytest.raises(MalformedPacketError):
        parse_ok_packet(bytes([PacketHeader.ERR, 0, 0]), Capability.PROTOCOL_41)


def test_parse_error_packet_protocol41():
    data = bytes([PacketHeader.ERR]) + struct.pack("<H", 1146) + b"#42S02" + b"Table missing"
    err = parse_error_packet(data, Capability.PROTOCOL_41)
    assert isinstance(err, ServerError)
    assert (err.code, err.state, err.message) == (1146, "42S02", "Table missing")


def test_parse_error_packet_old_protocol():
    data = bytes([PacketHeader.ERR]) + struct.pack("<H", 1045) + b"denied"
    err = parse_error_packet(data, 0)
    assert (err.code, err.state, err.message) == (1045, "", "denied")


def test_parse_error_packet_syntax_error():
    data = bytes([PacketHeader.ERR]) + struct.pack("<H", 1064) + b"#42000" + b"syntax"
    err = parse_error_packet(data, Capability.PROTOCOL_41)
    assert err.code == 1064
    assert err.state == "42000"
    assert err.message == "syntax"


def test_is_eof_packet():
    assert is_eof_packet(bytes([PacketHeader.EOF, 0, 0, 2, 0]))
    assert not is_eof_packet(bytes([PacketHeader.EOF]) + b"\x00" * 8)
    assert not is_eof_packet(bytes([PacketHeader.OK, 0, 0]))


def test_status_helpers():
    assert is_autocommit(ServerStatus.AUTOCOMMIT)
    assert not is_autocommit(ServerStatus.IN_TRANS)
    assert is_in_transaction(ServerStatus.IN_TRANS | ServerStatus.AUTOCOMMIT)
    assert not is_in_transaction(ServerStatus.AUTOCOMMIT)


def test_client_capability_masks_server_flags():
    base = (
        Capability.PROTOCOL_41
        | Capability.SECURE_CONNECTION
        | Capability.LONG_PASSWORD
        | Capability.TRANSACTIONS
        | Capability.LONG_FLAG
    )
    assert client_capability(0xFFFFFFFF) == base
    assert client_capability(0xFFFFFFFF, "kingshard") == base | Capability.CONNECT_WITH_DB
    assert client_capability(0) == 0
    assert client_capability(Capability.PROTOCOL_41 | Capability.SSL) == Capability.PROTOCOL_41


def test_command_packet():
    assert command_packet(Command.PING) == bytes([Command.PING])
    assert command_packet(Command.QUERY, "select 1") == bytes([Command.QUERY]) + b"select 1"
    assert command_packet(Command.INIT_DB, b"db") == bytes([Command.INIT_DB]) + b"db"


def test_command_uint32_packet():
    packet = command_uint32_packet(Command.STMT_CLOSE, 0x01020304)
    assert packet == bytes([Command.STMT_CLOSE, 4, 3, 2, 1])
    assert struct.unpack("<I", command_uint32_packet(Command.STMT_CLOSE, 99)[1:])[0] == 99


def test_command_str_str_packet():
    packet = command_str_str_packet(Command.FIELD_LIST, "users", "%")
    assert packet[0] == Command.FIELD_LIST
    assert packet[1:].split(b"\x00") == [b"users", b"%"]