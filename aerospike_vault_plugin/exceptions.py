# -*- coding: utf-8 -*-

class AerospikePluginError(Exception):
    """Base Error class."""


class ConfigurationError(AerospikePluginError):
    """Base class for errors raised while initialising the connection producer."""


class MissingConfigValue(ConfigurationError):
    CUSTOM_ERROR_MESSAGE = "{} cannot be empty"

    def __init__(self, field):
        super(MissingConfigValue, self).__init__(self.CUSTOM_ERROR_MESSAGE.format(field))
        self._field = field

    @property
    def field(self):
        return self._field


class EmptyHost(MissingConfigValue):

    def __init__(self):
        super(EmptyHost, self).__init__("host")


class ConfigDecodeError(ConfigurationError):
    CUSTOM_ERROR_MESSAGE = "'{}' expected type '{}', got unconvertible type '{}'"

    def __init__(self, field, expected, value):
        super(ConfigDecodeError, self).__init__(
            self.CUSTOM_ERROR_MESSAGE.format(field, expected, type(value).__name__))
        self._field = field

    @property
    def field(self):
        return self._field


class InvalidHostSpec(ConfigurationError):
    CUSTOM_ERROR_MESSAGE = "too many components for host #{}"

    def __init__(self, index):
        super(InvalidHostSpec, self).__init__(self.CUSTOM_ERROR_MESSAGE.format(index))
        self._index = index

    @property
    def index(self):
        return self._index


class InvalidPort(ConfigurationError):
    CUSTOM_ERROR_MESSAGE = "invalid port number for host #{}: {}"

    def __init__(self, index, error):
        super(InvalidPort, self).__init__(self.CUSTOM_ERROR_MESSAGE.format(index, str(error)))
        self._index = index
        self._error = error

    @property
    def index(self):
        return self._index

    @property
    def error(self):
        return self._error


class InvalidCACertificate(ConfigurationError):
    CUSTOM_ERROR_MESSAGE = "failed to append CA to client policy"

    def __init__(self):
        super(InvalidCACertificate, self).__init__(self.CUSTOM_ERROR_MESSAGE)


class InvalidClientCertificate(ConfigurationError):
    CUSTOM_ERROR_MESSAGE = "unable to load tls_certificate_key_data: {}"

    def __init__(self, error):
        super(InvalidClientCertificate, self).__init__(self.CUSTOM_ERROR_MESSAGE.format(str(error)))
        self._error = error

    @property
    def error(self):
        return self._error


class NotInitialized(AerospikePluginError):
    CUSTOM_ERROR_MESSAGE = "connection has not been initialized"

    def __init__(self):
        super(NotInitialized, self).__init__(self.CUSTOM_ERROR_MESSAGE)


class VerifyConnectionError(AerospikePluginError):
    CUSTOM_ERROR_MESSAGE = "error verifying connection: {}"

    def __init__(self, reason):
        super(VerifyConnectionError, self).__init__(self.CUSTOM_ERROR_MESSAGE.format(str(reason)))


class InvariantError(AerospikePluginError):
    """Local precondition failed before any remote call was attempted."""


class EmptyCreationStatement(InvariantError):
    CUSTOM_ERROR_MESSAGE = "empty creation statements"

    def __init__(self):
        super(EmptyCreationStatement, self).__init__(self.CUSTOM_ERROR_MESSAGE)


class MalformedStatement(InvariantError):
    CUSTOM_ERROR_MESSAGE = "invalid creation statement: {}"

    def __init__(self, error):
        super(MalformedStatement, self).__init__(self.CUSTOM_ERROR_MESSAGE.format(str(error)))
        self._error = error

    @property
    def error(self):
        return self._error


class RolesRequired(InvariantError):
    CUSTOM_ERROR_MESSAGE = "roles array is required in creation statement"

    def __init__(self):
        super(RolesRequired, self).__init__(self.CUSTOM_ERROR_MESSAGE)


class RotationPrerequisiteMissing(InvariantError):
    CUSTOM_ERROR_MESSAGE = "username and password are required to rotate"

    def __init__(self):
        super(RotationPrerequisiteMissing, self).__init__(self.CUSTOM_ERROR_MESSAGE)


class SanitizedError(AerospikePluginError):
    """An error whose message has had secret values replaced.

    The original exception is not chained, its text may hold the secrets that
    were scrubbed.
    """

    def __init__(self, message, original_type):
        super(SanitizedError, self).__init__(message)
        self._original_type = original_type

    @property
    def original_type(self):
        return self._original_type
