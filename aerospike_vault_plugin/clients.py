# -*- coding: utf-8 -*-
"""The admin capabilities the plugin needs from an aerospike client.

``AdminClient`` and ``ClientFactory`` are the seams used by the connection producer,
``AerospikeClientFactory`` is the production implementation on top of the aerospike
python client.
"""

import logging
import shutil
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass

import aerospike


@dataclass
class ClientPolicy:
    user: str
    password: str
    tls: object = None
    connect_timeout: float = None


def _admin_policy(timeout):
    if timeout is None:
        return {}
    return {"policy": {"timeout": int(timeout * 1000)}}


class AdminClient(ABC):
    """User administration operations on a live connection."""

    @abstractmethod
    def is_connected(self):
        pass

    @abstractmethod
    def close(self):
        pass

    @abstractmethod
    def create_user(self, user, password, roles, timeout=None):
        pass

    @abstractmethod
    def drop_user(self, user, timeout=None):
        pass

    @abstractmethod
    def change_password(self, user, password, timeout=None):
        """Changes the password of ``user``, which may be the connected user itself."""
        pass


class ClientFactory(ABC):

    @abstractmethod
    def new_client(self, policy, hosts):
        """Connects to ``hosts`` using ``policy`` and returns an ``AdminClient``."""
        pass


class AerospikeAdminClient(AdminClient):

    def __init__(self, client, user, tls_directory=None):
        self._client = client
        self._user = user
        self._tls_directory = tls_directory

    @property
    def client(self):
        return self._client

    def is_connected(self):
        return self._client.is_connected()

    def close(self):
        try:
            self._client.close()
        finally:
            if self._tls_directory:
                shutil.rmtree(self._tls_directory, ignore_errors=True)
                self._tls_directory = None

    def create_user(self, user, password, roles, timeout=None):
        self._client.admin_create_user(user, password, list(roles), **_admin_policy(timeout))

    def drop_user(self, user, timeout=None):
        self._client.admin_drop_user(user, **_admin_policy(timeout))

    def change_password(self, user, password, timeout=None):
        # a user changes its own password, a user admin sets anyone else's
        if user == self._user:
            self._client.admin_change_password(user, password, **_admin_policy(timeout))
            return
        self._client.admin_set_password(user, password, **_admin_policy(timeout))


class AerospikeClientFactory(ClientFactory):

    def new_client(self, policy, hosts):
        config = {
            "hosts": [h.as_tuple() for h in hosts],
            "user": policy.user,
            "password": policy.password,
        }
        if policy.connect_timeout is not None:
            config["connect_timeout"] = int(policy.connect_timeout * 1000)

        tls_directory = None
        if policy.tls is not None:
            tls_directory = tempfile.mkdtemp(prefix="aerospike-vault-tls-")
            config["tls"] = policy.tls.as_client_config(tls_directory)

        try:
            client = aerospike.client(config)
            if not client.is_connected():
                client.connect()
        except Exception:
            if tls_directory:
                shutil.rmtree(tls_directory, ignore_errors=True)
            raise

        logging.getLogger(__name__).info(
            f"Connected to aerospike cluster {','.join(str(h) for h in hosts)}"
        )
        return AerospikeAdminClient(client, policy.user, tls_directory)
