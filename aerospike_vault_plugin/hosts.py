# -*- coding: utf-8 -*-
"""Parsing of the ``host`` connection string.

The format is the one understood by the aerospike command line tools, a comma separated
list of ``name[:tls_name][:port]`` entries::

    host1,host2:3100,host3:tls.example.com:4333

Two components always mean ``name:port``, a tls name can only be given together
with an explicit port.
"""

import re
from dataclasses import dataclass

from .exceptions import EmptyHost, InvalidHostSpec, InvalidPort

DEFAULT_PORT = 3000

# ascii digits with an optional sign, no whitespace or underscores
PORT_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class Endpoint:
    name: str
    port: int = DEFAULT_PORT
    tls_name: str = None

    def as_tuple(self):
        """The ``(address, port[, tls_name])`` form used in an aerospike client config."""
        if self.tls_name:
            return self.name, self.port, self.tls_name
        return self.name, self.port

    def __str__(self):
        return f"{self.name}:{self.tls_name or ''}:{self.port}"


def _parse_port(index, value):
    if not PORT_PATTERN.fullmatch(value):
        raise InvalidPort(index, ValueError(f"invalid syntax: {value!r}"))
    port = int(value)
    if port < 0:
        raise InvalidPort(index, ValueError(f"port must not be negative: {value!r}"))
    return port


def parse_hosts(spec):
    """Converts a host string into an ordered list of endpoints.

    Args:
        spec (str): Comma separated ``name[:tls_name][:port]`` entries.

    Returns:
        list[Endpoint]: One endpoint per entry, in the order given.

    Raises:
        EmptyHost: If ``spec`` is empty.
        InvalidHostSpec: If an entry has more than 3 components.
        InvalidPort: If a port does not parse as a non negative integer.
    """
    if not spec:
        raise EmptyHost()

    hosts = []
    for i, entry in enumerate(spec.split(","), start=1):
        components = entry.split(":")

        if len(components) > 3:
            raise InvalidHostSpec(i)

        name = components[0]
        port = DEFAULT_PORT
        if len(components) > 1:
            port = _parse_port(i, components[-1])

        tls_name = None
        if len(components) == 3:
            tls_name = components[1]

        hosts.append(Endpoint(name=name, port=port, tls_name=tls_name))

    return hosts
