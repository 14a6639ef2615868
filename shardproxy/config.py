"""The proxy's YAML configuration file."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from typing import Any, Callable, ClassVar, Mapping, Optional, TypeVar

import yaml

_T = TypeVar("_T")

_NULLS = frozenset({"", "~", "null", "Null", "NULL"})

_last_config_file: Optional[str] = None


def _mapping(value: Any, what: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be a mapping")
    return value


def _str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None or value in _NULLS:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a scalar")
    return value


def _to_int(value: Any, key: str) -> int:
    if not isinstance(value, str):
        raise ValueError(f"{key} must be an integer")
    try:
        return int(value)
    except ValueError:
        try:
            return int(value, 0)
        except ValueError:
            raise ValueError(f"{key}: invalid integer {value!r}") from None


def _int(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None or value in _NULLS:
        return 0
    return _to_int(value, key)


def _list(data: Mapping[str, Any], key: str, convert: Callable[[Any], _T]) -> list[_T]:
    value = data.get(key)
    if value is None or value in _NULLS:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{key} must be a list")
    return [convert(item) for item in value]


def _scalar(key: str) -> Callable[[Any], str]:
    def convert(item: Any) -> str:
        if not isinstance(item, str):
            raise ValueError(f"{key} items must be scalars")
        return "" if item in _NULLS else item
    return convert


def _same(value: Any) -> Any:
    return value


def _text(key: Optional[str] = None) -> Any:
    return field(default="", metadata={"key": key, "load": _str, "dump": _same})


def _number(key: Optional[str] = None) -> Any:
    return field(default=0, metadata={"key": key, "load": _int, "dump": _same})


def _text_list(key: Optional[str] = None) -> Any:
    return field(
        default_factory=list,
        metadata={"key": key, "load": lambda d, k: _list(d, k, _scalar(k)), "dump": list},
    )


def _number_list(key: Optional[str] = None) -> Any:
    return field(
        default_factory=list,
        metadata={
            "key": key,
            "load": lambda d, k: _list(d, k, lambda v: _to_int(v, k)),
            "dump": list,
        },
    )


def _section_list(section: type, key: Optional[str] = None) -> Any:
    return field(
        default_factory=list,
        metadata={
            "key": key,
            "load": lambda d, k: _list(d, k, section.from_dict),
            "dump": lambda items: [item.to_dict() for item in items],
        },
    )


class _Section:
    """Loading and dumping driven by each field's YAML key."""

    _WHAT: ClassVar[str] = "entry"

    @classmethod
    def from_dict(cls, data: Any) -> Any:
        data = _mapping(data, cls._WHAT)
        values = {f.name: f.metadata["load"](data, f.metadata["key"] or f.name) for f in fields(cls)}
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return {
            f.metadata["key"] or f.name: f.metadata["dump"](getattr(self, f.name))
            for f in fields(self)
        }


@dataclass
class UserConfig(_Section):
    """A user allowed to connect to the proxy."""

    _WHAT: ClassVar[str] = "user_list entry"

    user: str = _text()
    password: str = _text()


@dataclass
class NodeConfig(_Section):
    """A backend node: a master and its weighted slaves."""

    _WHAT: ClassVar[str] = "nodes entry"

    name: str = _text()
    down_after_noalive: int = _number()
    max_conns_limit: int = _number()
    user: str = _text()
    password: str = _text()
    master: str = _text()
    slave: str = _text()


@dataclass
class ShardConfig(_Section):
    """A sharding rule for one table: range, hash or date."""

    _WHAT: ClassVar[str] = "shard entry"

    db: str = _text()
    table: str = _text()
    key: str = _text()
    nodes: list[str] = _text_list()
    locations: list[int] = _number_list()
    type: str = _text()
    table_row_limit: int = _number()
    date_range: list[str] = _text_list()


@dataclass
class SchemaConfig(_Section):
    """The nodes and sharding rules of one user."""

    _WHAT: ClassVar[str] = "schema_list entry"

    user: str = _text()
    nodes: list[str] = _text_list()
    default: str = _text()
    shard_rule: list[ShardConfig] = _section_list(ShardConfig, "shard")


@dataclass
class Config(_Section):
    """The whole configuration file."""

    _WHAT: ClassVar[str] = "configuration"

    addr: str = _text()
    prometheus_addr: str = _text()
    user_list: list[UserConfig] = _section_list(UserConfig)
    web_addr: str = _text()
    web_user: str = _text()
    web_password: str = _text()
    log_path: str = _text()
    log_level: str = _text()
    log_sql: str = _text()
    slow_log_time: int = _number()
    allow_ips: str = _text()
    bls_file: str = _text("blacklist_sql_file")
    charset: str = _text("proxy_charset")
    nodes: list[NodeConfig] = _section_list(NodeConfig)
    schema_list: list[SchemaConfig] = _section_list(SchemaConfig)

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration keyed as in the YAML file."""
        return super().to_dict()


def parse_config_data(data: bytes | str) -> Config:
    """Parse YAML text into a Config; unknown keys are ignored."""
    # Every scalar is kept as its text, so values such as "on" stay strings.
    loaded = yaml.load(data, Loader=yaml.BaseLoader)
    return Config.from_dict(loaded)


def parse_config_file(file_name: str | os.PathLike[str]) -> Config:
    """Read and parse a configuration file, remembering its path."""
    global _last_config_file
    with open(file_name, "rb") as fh:
        data = fh.read()
    _last_config_file = os.fspath(file_name)
    return parse_config_data(data)


def write_config_file(cfg: Config, file_name: str | os.PathLike[str] | None = None) -> None:
    """Write ``cfg`` as YAML, by default to the file last parsed."""
    target = os.fspath(file_name) if file_name is not None else _last_config_file
    if target is None:
        raise ValueError("no configuration file name")
    text = yaml.safe_dump(cfg.to_dict(), sort_keys=False, allow_unicode=True)
    fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o755)
    with os.fdopen(fd, "w", encoding="utf-8") as fh:
        fh.write(text)