# -*- coding: utf-8 -*-
"""Vault database plugin operations for aerospike.

Dynamic users are created from a JSON creation statement holding the roles to grant::

    { "roles": ["read", "user-admin"] }

Every operation holds the connection producer's lock for its whole duration and makes
a single call to the cluster.
"""

import json
import logging

from .clients import AerospikeClientFactory
from .connection_producer import AerospikeConnectionProducer
from .credentials import CredentialsProducer, statement_compatibility_helper
from .exceptions import (EmptyCreationStatement, MalformedStatement, RolesRequired,
                         RotationPrerequisiteMissing)
from .middleware import DatabaseErrorSanitizerMiddleware

TYPE_NAME = "aerospike"


def parse_creation_statement(statement):
    """Returns the roles listed in a JSON creation statement."""
    try:
        creation = json.loads(statement)
    except ValueError as e:
        raise MalformedStatement(e) from e

    if not isinstance(creation, dict):
        raise MalformedStatement("creation statement must be a JSON object")

    roles = creation.get("roles") or []
    if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
        raise MalformedStatement("roles must be an array of strings")

    if not roles:
        raise RolesRequired()
    return roles


class AerospikeDatabase:
    """Creates, updates and drops aerospike users on behalf of the control plane.

    Attributes:
        producer (AerospikeConnectionProducer): Owner of the shared client and lock.
        credentials (CredentialsProducer): Policy for generated usernames and passwords.
    """

    def __init__(self, producer, credentials=None):
        self._producer = producer
        self._credentials = credentials or CredentialsProducer(
            display_name_len=15,
            role_name_len=15,
            # aerospike user names are limited to 63 characters
            username_len=63,
            separator="-",
        )

    @property
    def producer(self):
        return self._producer

    @property
    def credentials(self):
        return self._credentials

    def type(self):
        return TYPE_NAME

    def initialize(self, conf, verify_connection=False):
        return self._producer.initialize(conf, verify_connection)

    def close(self):
        self._producer.close()

    def secret_values(self):
        return self._producer.secret_values()

    def create_user(self, statements, username_config, expiration=None, timeout=None):
        """Generates a user and password and creates the user with the statement's roles.

        Only the first creation statement is used. ``expiration`` is accepted for
        interface compatibility, aerospike users do not expire.

        Returns:
            tuple: ``(username, password)`` of the created user.
        """
        with self._producer.lock:
            statements = statement_compatibility_helper(statements)

            if not statements.creation:
                raise EmptyCreationStatement()

            roles = parse_creation_statement(statements.creation[0])

            client = self._producer.connection(timeout=timeout)

            username = self._credentials.generate_username(username_config)
            password = self._credentials.generate_password()

            client.create_user(username, password, roles, timeout=timeout)

            logging.getLogger(__name__).info(
                f"Created aerospike user {username} with roles {','.join(roles)}")
            return username, password

    def set_credentials(self, statements, static_user, timeout=None):
        """Sets the password of an existing user.

        Used for static roles and to roll back a password the control plane failed
        to store.

        Returns:
            tuple: ``(username, password)`` as given.
        """
        with self._producer.lock:
            client = self._producer.connection(timeout=timeout)

            username = static_user.username
            password = static_user.password

            client.change_password(username, password, timeout=timeout)

            logging.getLogger(__name__).info(f"Set password for aerospike user {username}")
            return username, password

    def renew_user(self, statements, username, expiration=None):
        # aerospike users have no expiry to extend
        return None

    def revoke_user(self, statements, username, timeout=None):
        with self._producer.lock:
            client = self._producer.connection(timeout=timeout)
            client.drop_user(username, timeout=timeout)
            logging.getLogger(__name__).info(f"Dropped aerospike user {username}")

    def rotate_root_credentials(self, statements=None, timeout=None):
        """Replaces the password of the configured user with a generated one.

        The new password is only handed back inside the returned configuration.

        Returns:
            dict: The updated configuration for the control plane to persist.
        """
        with self._producer.lock:
            config = self._producer.config
            if not config.username or not config.password:
                raise RotationPrerequisiteMissing()

            client = self._producer.connection(timeout=timeout)

            password = self._credentials.generate_password()

            client.change_password(config.username, password, timeout=timeout)

            self._producer.update_password(password)

            logging.getLogger(__name__).info(
                f"Rotated root credentials for aerospike user {config.username}")
            return dict(self._producer.raw_config)


def new(client_factory=None, credentials=None, connect_timeout=None):
    """Returns a plugin instance wrapped so errors never carry the root password.

    Args:
        client_factory (ClientFactory, optional): Defaults to the aerospike client.
        credentials (CredentialsProducer, optional): Username and password policy.
        connect_timeout (float, optional): Seconds to wait when connecting.
    """
    if client_factory is None:
        client_factory = AerospikeClientFactory()
    producer = AerospikeConnectionProducer(client_factory, connect_timeout=connect_timeout)
    db = AerospikeDatabase(producer, credentials)
    return DatabaseErrorSanitizerMiddleware(db, db.secret_values)
