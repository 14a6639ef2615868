# shardproxy

Building blocks for a MySQL sharding proxy, in pure Python:

- **`shardproxy.protocol`**: parse the server's initial handshake and its OK,
  ERR and EOF packets, and build command payloads for the client side of the
  wire protocol.
- **`shardproxy.constants`**: commands, capability flags, server status bits,
  column types and flags, packet headers, plus the SQL keyword lookups used
  when classifying statements (`token_id`, `is_set_keyword`).
- **`shardproxy.charset`**: the charset and collation tables, with
  `default_collation_id`, `collation_name` and `resolve_charset`.
- **`shardproxy.balancer`**: weighted round-robin choice among replicas
  (`RoundRobinBalancer`), plus parsing of `host:port@weight` lists.
- **`shardproxy.config`**: the YAML configuration: users, nodes, schemas and
  shard rules.
- **`shardproxy.filehandler`**: file handlers for log output: a plain file,
  a size-rotated file and a time-rotated file.
- **`shardproxy.errors`**: a single `ProxyError` exception carrying an
  `ErrorKind`.
- **`shardproxy.textutil`**: small SQL text helpers (`is_sql_sep`,
  `array_to_string`).

## Installation

```
pip install shardproxy
```

Only `pyyaml` is required.

## Configuration

```python
from shardproxy.config import parse_config_data, parse_config_file, write_config_file

cfg = parse_config_data(b"""
addr: 0.0.0.0:9696
log_level: error
allow_ips: 127.0.0.1,192.168.0.13
nodes:
  - name: node1
    down_after_noalive: 300
    max_conns_limit: 16
    user: root
    password: password
    master: 127.0.0.1:3306
    slave: 127.0.0.1:4306@2,127.0.0.1:5306@1
""")

print(cfg.addr)             # 0.0.0.0:9696
print(cfg.nodes[0].master)  # 127.0.0.1:3306

write_config_file(cfg, "proxy.yaml")
again = parse_config_file("proxy.yaml")
```

Unknown keys are ignored and missing ones take empty defaults.
`Config.to_dict()` gives back the plain mapping with the YAML key names.
`write_config_file` without a file name writes to the file last read by
`parse_config_file`.

## Balancing reads across replicas

```python
import random
from shardproxy.balancer import parse_slave_list, RoundRobinBalancer

slaves = parse_slave_list("192.168.1.12:3306@2,192.168.1.13:3306@4")
weights = [weight for _, weight in slaves]

balancer = RoundRobinBalancer(weights, random.Random(7))
index = balancer.next_index()   # position in the replica list
```

Weights are reduced by their greatest common divisor (`gcd`) and, when there
is more than one replica, the resulting queue is shuffled once, so each replica
is picked in proportion to its weight. An address without `@weight` has
weight 1. `next_index` raises `ProxyError` with `ErrorKind.NO_DATABASE` when
there are no replicas.

## Wire protocol helpers

```python
from shardproxy.constants import Capability, Command
from shardproxy.protocol import (
    command_packet, parse_ok_packet, is_autocommit,
)

payload = command_packet(Command.QUERY, b"select 1")

ok = parse_ok_packet(b"\x00\x01\x00\x02\x00\x00\x00", Capability.PROTOCOL_41)
print(ok.affected_rows, is_autocommit(ok.status))   # 1 True
```

`parse_initial_handshake` returns a `Handshake` with the server version,
connection id, salt, capabilities and status; `client_capability` derives the
flags to answer with. `parse_ok_packet` returns an `OkResult`.
`parse_error_packet` returns a `ServerError`, an exception you can raise.
Short or unexpected packets raise `MalformedPacketError`.

## Charsets

```python
from shardproxy.charset import resolve_charset, collation_name

resolve_charset("'gb2312'")   # ('gb2312', 24)
collation_name(33)            # 'utf8_general_ci'
```

## Log files

```python
from shardproxy.filehandler import RotatingFileHandler, TimeRotatingFileHandler, When

with RotatingFileHandler("logs/sys.log", 1024 * 1024, 2) as handler:
    handler.write(b"started\n")

with TimeRotatingFileHandler("logs/sql.log", When.DAY, 1) as handler:
    handler.write("select 1\n")
```

A `RotatingFileHandler` moves a full file to `<file>.1`, shifting older
backups up to `<file>.<backup_count>`. A `TimeRotatingFileHandler` renames the
file to the base name followed by the rotation time once each period is over.

## What it does not do

This package holds the parts a proxy is built from, not a running proxy. It
opens no network connections, has no server, connection pool or SQL router,
and no command to start. There is no leveled logger: the handlers above write
whatever bytes or text they are given.

## Running the tests

```
pip install -e ".[test]"
pytest
```