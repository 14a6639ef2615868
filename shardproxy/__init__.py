"""Building blocks for a MySQL sharding proxy: protocol helpers, charset
tables, replica balancing, configuration and rotating log files."""

__version__ = "0.1.0"