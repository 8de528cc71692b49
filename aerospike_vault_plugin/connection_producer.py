# -*- coding: utf-8 -*-

import logging
import threading
from dataclasses import dataclass, replace

from .clients import ClientPolicy
from .exceptions import (ConfigDecodeError, EmptyHost, MissingConfigValue, NotInitialized,
                         VerifyConnectionError)
from .hosts import parse_hosts
from .tls import load_tls_material

PASSWORD_PLACEHOLDER = "[password]"


def _weak_str(field, value):
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as e:
            raise ConfigDecodeError(field, "string", value) from e
    raise ConfigDecodeError(field, "string", value)


def _weak_bytes(field, value):
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    raise ConfigDecodeError(field, "bytes", value)


@dataclass(frozen=True)
class ConnectionConfig:
    """Typed view of the configuration mapping stored by the control plane."""

    host: str = ""
    username: str = ""
    password: str = ""
    tls_ca: bytes = b""
    tls_certificate_key: bytes = b""

    @classmethod
    def from_mapping(cls, conf):
        """Decodes ``conf`` loosely, numbers and booleans are accepted for strings
        and ``str`` for PEM data. Unknown keys are ignored."""
        return cls(
            host=_weak_str("host", conf.get("host")),
            username=_weak_str("username", conf.get("username")),
            password=_weak_str("password", conf.get("password")),
            tls_ca=_weak_bytes("tls_ca", conf.get("tls_ca")),
            tls_certificate_key=_weak_bytes(
                "tls_certificate_key", conf.get("tls_certificate_key")),
        )


class AerospikeConnectionProducer:
    """Owns the configuration and the single aerospike client used by the plugin.

    ``initialize`` and ``close`` take ``lock`` themselves. ``connection`` does not,
    callers hold ``lock`` around getting and using the client so both happen in one
    critical section.

    Attributes:
        lock (threading.Lock): Serialises every operation on the shared client.
    """

    def __init__(self, client_factory, connect_timeout=None):
        """
        Args:
            client_factory (ClientFactory): Creates clients from a policy and hosts.
            connect_timeout (float, optional): Seconds to wait when connecting.
        """
        self._client_factory = client_factory
        self._connect_timeout = connect_timeout
        self._lock = threading.Lock()
        self._raw_config = None
        self._config = ConnectionConfig()
        self._hosts = []
        self._client_policy = None
        self._client = None
        self._initialized = False

    @property
    def lock(self):
        return self._lock

    @property
    def initialized(self):
        return self._initialized

    @property
    def config(self):
        return self._config

    @property
    def raw_config(self):
        return self._raw_config

    @property
    def hosts(self):
        return list(self._hosts)

    @property
    def client_policy(self):
        return self._client_policy

    def initialize(self, conf, verify_connection=False):
        """Validates and stores the connection configuration.

        Any previously open client is closed first. On failure the producer is left
        uninitialised.

        Args:
            conf (dict): Configuration mapping with ``host``, ``username``, ``password``
                and optionally ``tls_ca`` and ``tls_certificate_key``.
            verify_connection (bool): Connect straight away and check the client is
                connected.

        Returns:
            dict: ``conf`` unchanged, for the control plane to persist.
        """
        with self._lock:
            self._close_client()
            self._initialized = False
            self._raw_config = dict(conf)

            self._config = ConnectionConfig.from_mapping(conf)

            if not self._config.host:
                raise EmptyHost()

            hosts = parse_hosts(self._config.host)

            if not self._config.username:
                raise MissingConfigValue("username")

            if not self._config.password:
                raise MissingConfigValue("password")

            if self._config.tls_certificate_key and not self._config.tls_ca:
                logging.getLogger(__name__).warning(
                    "tls_certificate_key is ignored as tls_ca is not set")

            tls = load_tls_material(self._config.tls_ca, self._config.tls_certificate_key)

            self._hosts = hosts
            self._client_policy = ClientPolicy(
                user=self._config.username,
                password=self._config.password,
                tls=tls,
                connect_timeout=self._connect_timeout,
            )

            # the connection itself can be established later
            self._initialized = True

            logging.getLogger(__name__).info(
                f"Initialised aerospike connection producer for {len(hosts)} host(s) "
                f"as user {self._config.username}, tls {'enabled' if tls else 'disabled'}"
            )

            if verify_connection:
                self._verify()

            return conf

    def _verify(self):
        try:
            client = self.connection()
            if not client.is_connected():
                raise VerifyConnectionError("not connected")
        except Exception as e:
            self._initialized = False
            self._close_client()
            if isinstance(e, VerifyConnectionError):
                raise
            raise VerifyConnectionError(e) from e

    def connection(self, timeout=None):
        """Returns the live client, creating it if there is none or it disconnected.

        Does not take ``lock``, the caller must hold it.

        Args:
            timeout (float): Seconds allowed for establishing a new connection, overrides
                the producer wide ``connect_timeout``. An already live client is returned
                as is.

        Raises:
            NotInitialized: If ``initialize`` has not succeeded.
        """
        if not self._initialized:
            raise NotInitialized()

        if self._client is not None:
            if self._client.is_connected():
                return self._client
            logging.getLogger(__name__).info("Aerospike client disconnected, reconnecting")
            self._close_client()

        policy = self._client_policy
        if timeout is not None:
            policy = replace(policy, connect_timeout=timeout)

        self._client = self._client_factory.new_client(policy, self._hosts)
        return self._client

    def _close_client(self):
        client, self._client = self._client, None
        if client is None:
            return
        try:
            client.close()
        except Exception:
            logging.getLogger(__name__).warning("Ignoring error closing aerospike client",
                                                exc_info=True)

    def close(self):
        """Closes the client if one is open. Safe to call repeatedly."""
        with self._lock:
            self._close_client()

    def update_password(self, password):
        """Records a new password for the configured user, caller must hold ``lock``."""
        self._raw_config["password"] = password
        self._config = replace(self._config, password=password)
        self._client_policy = replace(self._client_policy, password=password)

    def secret_values(self):
        """Mapping of secret values to the placeholder they are replaced with in errors."""
        if not self._config.password:
            return {}
        return {self._config.password: PASSWORD_PLACEHOLDER}
