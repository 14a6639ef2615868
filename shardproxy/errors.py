"""Error kinds raised by the proxy."""

from __future__ import annotations

import enum


class ErrorKind(enum.Enum):
    """Every failure the proxy reports, with its message."""

    NO_MASTER_CONN = "no master connection"
    NO_SLAVE_CONN = "no slave connection"
    NO_DEFAULT_NODE = "no default node"
    NO_MASTER_DB = "no master database"
    NO_SLAVE_DB = "no slave database"
    NO_DATABASE = "no database"

    MASTER_DOWN = "master is down"
    SLAVE_DOWN = "slave is down"
    DATABASE_CLOSE = "database is close"
    CONN_IS_NIL = "connection is nil"
    BAD_CONN = "connection was bad"
    IGNORE_SQL = "ignore this sql"

    ADDRESS_NULL = "address is nil"
    INVALID_ARGUMENT = "argument is invalid"
    INVALID_CHARSET = "charset is invalid"
    CMD_UNSUPPORT = "command unsupport"

    LOCATIONS_COUNT = "locations count is not equal"
    NO_CRITERIA = "plan have no criteria"
    NO_ROUTE_NODE = "no route node"
    RESULT_NIL = "result is nil"
    SUM_COLUMN_TYPE = "sum column type error"
    SELECT_IN_INSERT = "select in insert not allowed"
    INSERT_IN_MULTI = "insert in multi node"
    UPDATE_IN_MULTI = "update in multi node"
    DELETE_IN_MULTI = "delete in multi node"
    REPLACE_IN_MULTI = "replace in multi node"
    EXEC_IN_MULTI = "exec in multi node"
    TRANS_IN_MULTI = "transaction in multi node"

    NO_PLAN = "statement have no plan"
    NO_PLAN_RULE = "statement have no plan rule"
    UPDATE_KEY = "routing key in update expression"
    STMT_CONVERT = "statement fail to convert"
    EXPR_CONVERT = "expr fail to convert"
    CONN_NOT_EQUAL = "the length of conns not equal sqls"
    KEY_OUT_OF_RANGE = "shard key not in key range"
    MULTI_SHARD = "insert or replace has multiple shard targets"
    IR_NO_COLUMNS = "insert or replace must specify columns"
    IR_NO_SHARDING_KEY = "insert or replace not contain sharding key"
    COLS_LEN_NOT_MATCH = "insert or replace cols and values length not match"
    DATE_ILLEGAL = "date format illegal"
    DATE_RANGE_ILLEGAL = "date range format illegal"
    DATE_RANGE_COUNT = "date range count is not equal"
    SLAVE_EXIST = "slave has exist"
    SLAVE_NOT_EXIST = "slave has not exist"
    BLACK_SQL_EXIST = "black sql has exist"
    BLACK_SQL_NOT_EXIST = "black sql has not exist"
    INSERT_TOO_COMPLEX = "insert is too complex"
    SQL_NULL = "sql is null"

    INTERNAL_SERVER = "internal server error"


class ProxyError(Exception):
    """An error of a known kind; its text is the kind's message."""

    def __init__(self, kind: ErrorKind) -> None:
        super().__init__(kind.value)
        self.kind = kind

    def __str__(self) -> str:
        return self.kind.value