# -*- coding: utf-8 -*-

import logging

from .exceptions import SanitizedError


class DatabaseErrorSanitizerMiddleware:
    """Wraps a database plugin and scrubs secret values from the errors it raises.

    ``secret_values`` is called when an error is raised and returns a mapping of secret
    to placeholder. Errors whose text holds none of the secrets are raised unchanged,
    any other error is replaced by a ``SanitizedError`` with the secrets substituted.
    """

    def __init__(self, database, secret_values):
        self._database = database
        self._secret_values = secret_values

    @property
    def database(self):
        return self._database

    def _sanitize(self, message):
        for secret, placeholder in self._secret_values().items():
            if secret:
                message = message.replace(secret, placeholder)
        return message

    def _call(self, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            message = self._sanitize(str(e))
            if message == str(e):
                raise
            error = SanitizedError(message, type(e).__name__)
            logging.getLogger(__name__).debug(
                f"Scrubbed secrets from {type(e).__name__} raised by {func.__name__}")
        raise error

    def type(self):
        return self._call(self._database.type)

    def initialize(self, conf, verify_connection=False):
        return self._call(self._database.initialize, conf, verify_connection)

    def close(self):
        return self._call(self._database.close)

    def secret_values(self):
        return self._secret_values()

    def create_user(self, statements, username_config, expiration=None, timeout=None):
        return self._call(self._database.create_user, statements, username_config,
                          expiration=expiration, timeout=timeout)

    def set_credentials(self, statements, static_user, timeout=None):
        return self._call(self._database.set_credentials, statements, static_user,
                          timeout=timeout)

    def renew_user(self, statements, username, expiration=None):
        return self._call(self._database.renew_user, statements, username,
                          expiration=expiration)

    def revoke_user(self, statements, username, timeout=None):
        return self._call(self._database.revoke_user, statements, username, timeout=timeout)

    def rotate_root_credentials(self, statements=None, timeout=None):
        return self._call(self._database.rotate_root_credentials, statements, timeout=timeout)
