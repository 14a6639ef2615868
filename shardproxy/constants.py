"""Protocol constants and SQL keyword tables."""

from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Mapping, Optional

MIN_PROTOCOL_VERSION = 10
MAX_PAYLOAD_LEN = (1 << 24) - 1
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
SERVER_VERSION = "5.6.20-shardproxy"
AUTH_NAME = "mysql_native_password"


class PacketHeader(enum.IntEnum):
    """First byte of a server response packet."""

    OK = 0x00
    ERR = 0xFF
    EOF = 0xFE
    LOCAL_IN_FILE = 0xFB


class ServerStatus(enum.IntFlag):
    """Server status flags."""

    IN_TRANS = 0x0001
    AUTOCOMMIT = 0x0002
    MORE_RESULTS_EXISTS = 0x0008
    NO_GOOD_INDEX_USED = 0x0010
    NO_INDEX_USED = 0x0020
    CURSOR_EXISTS = 0x0040
    LAST_ROW_SEND = 0x0080
    DB_DROPPED = 0x0100
    NO_BACKSLASH_ESCAPED = 0x0200
    METADATA_CHANGED = 0x0400
    QUERY_WAS_SLOW = 0x0800
    PS_OUT_PARAMS = 0x1000


class Command(enum.IntEnum):
    """Client command bytes."""

    SLEEP = 0
    QUIT = 1
    INIT_DB = 2
    QUERY = 3
    FIELD_LIST = 4
    CREATE_DB = 5
    DROP_DB = 6
    REFRESH = 7
    SHUTDOWN = 8
    STATISTICS = 9
    PROCESS_INFO = 10
    CONNECT = 11
    PROCESS_KILL = 12
    DEBUG = 13
    PING = 14
    TIME = 15
    DELAYED_INSERT = 16
    CHANGE_USER = 17
    BINLOG_DUMP = 18
    TABLE_DUMP = 19
    CONNECT_OUT = 20
    REGISTER_SLAVE = 21
    STMT_PREPARE = 22
    STMT_EXECUTE = 23
    STMT_SEND_LONG_DATA = 24
    STMT_CLOSE = 25
    STMT_RESET = 26
    SET_OPTION = 27
    STMT_FETCH = 28
    DAEMON = 29
    BINLOG_DUMP_GTID = 30
    RESET_CONNECTION = 31


class Capability(enum.IntFlag):
    """Client/server capability flags."""

    LONG_PASSWORD = 1 << 0
    FOUND_ROWS = 1 << 1
    LONG_FLAG = 1 << 2
    CONNECT_WITH_DB = 1 << 3
    NO_SCHEMA = 1 << 4
    COMPRESS = 1 << 5
    ODBC = 1 << 6
    LOCAL_FILES = 1 << 7
    IGNORE_SPACE = 1 << 8
    PROTOCOL_41 = 1 << 9
    INTERACTIVE = 1 << 10
    SSL = 1 << 11
    IGNORE_SIGPIPE = 1 << 12
    TRANSACTIONS = 1 << 13
    RESERVED = 1 << 14
    SECURE_CONNECTION = 1 << 15
    MULTI_STATEMENTS = 1 << 16
    MULTI_RESULTS = 1 << 17
    PS_MULTI_RESULTS = 1 << 18
    PLUGIN_AUTH = 1 << 19
    CONNECT_ATTRS = 1 << 20
    PLUGIN_AUTH_LENENC_CLIENT_DATA = 1 << 21


class FieldType(enum.IntEnum):
    """Column types of the wire protocol."""

    DECIMAL = 0
    TINY = 1
    SHORT = 2
    LONG = 3
    FLOAT = 4
    DOUBLE = 5
    NULL = 6
    TIMESTAMP = 7
    LONGLONG = 8
    INT24 = 9
    DATE = 10
    TIME = 11
    DATETIME = 12
    YEAR = 13
    NEWDATE = 14
    VARCHAR = 15
    BIT = 16

    NEWDECIMAL = 0xF6
    ENUM = 0xF7
    SET = 0xF8
    TINY_BLOB = 0xF9
    MEDIUM_BLOB = 0xFA
    LONG_BLOB = 0xFB
    BLOB = 0xFC
    VAR_STRING = 0xFD
    STRING = 0xFE
    GEOMETRY = 0xFF


class FieldFlag(enum.IntFlag):
    """Column definition flags."""

    NOT_NULL = 1
    PRI_KEY = 2
    UNIQUE_KEY = 4
    BLOB = 16
    UNSIGNED = 32
    ZEROFILL = 64
    BINARY = 128
    ENUM = 256
    AUTO_INCREMENT = 512
    TIMESTAMP = 1024
    SET = 2048
    NUM = 32768
    PART_KEY = 16384
    GROUP = 32768
    UNIQUE = 65536


TK_ID_INSERT = 1
TK_ID_UPDATE = 2
TK_ID_DELETE = 3
TK_ID_REPLACE = 4
TK_ID_SET = 5
TK_ID_BEGIN = 6
TK_ID_COMMIT = 7
TK_ID_ROLLBACK = 8
TK_ID_ADMIN = 9
TK_ID_USE = 10
TK_ID_SELECT = 11
TK_ID_START = 12
TK_ID_TRANSACTION = 13
TK_ID_SHOW = 14
TK_ID_TRUNCATE = 15

PARSE_TOKEN_MAP: Mapping[str, int] = MappingProxyType({
    "insert": TK_ID_INSERT,
    "update": TK_ID_UPDATE,
    "delete": TK_ID_DELETE,
    "replace": TK_ID_REPLACE,
    "set": TK_ID_SET,
    "begin": TK_ID_BEGIN,
    "commit": TK_ID_COMMIT,
    "rollback": TK_ID_ROLLBACK,
    "admin": TK_ID_ADMIN,
    "select": TK_ID_SELECT,
    "use": TK_ID_USE,
    "start": TK_ID_START,
    "transaction": TK_ID_TRANSACTION,
    "show": TK_ID_SHOW,
    "truncate": TK_ID_TRUNCATE,
})

COMMENT_PREFIX = ord("*")
COMMENT_STRING = "*"

TK_STR_SELECT = "select"
TK_STR_FROM = "from"
TK_STR_INTO = "into"
TK_STR_SET = "set"
TK_STR_TRANSACTION = "transaction"
TK_STR_LAST_INSERT_ID = "last_insert_id()"
TK_STR_MASTER_HINT = "*master*"
TK_STR_COLUMNS = "columns"
TK_STR_FIELDS = "fields"

SET_KEY_WORDS = frozenset({
    "names",
    "character_set_results",
    "@@character_set_results",
    "@@session.character_set_results",
    "character_set_client",
    "@@character_set_client",
    "@@session.character_set_client",
    "character_set_connection",
    "@@character_set_connection",
    "@@session.character_set_connection",
    "autocommit",
    "@@autocommit",
    "@@session.autocommit",
})


def token_id(word: str) -> Optional[int]:
    """Return the token id of a leading SQL keyword, or None if it has none."""
    return PARSE_TOKEN_MAP.get(word)


def is_set_keyword(word: str) -> bool:
    """Tell whether ``word`` is a variable the proxy handles in ``SET``."""
    return word in SET_KEY_WORDS