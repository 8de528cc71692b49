# -*- coding: utf-8 -*-
"""aerospike_vault_plugin

A Vault database plugin for aerospike. Creates, updates and drops aerospike users and
rotates the plugin's own root credentials over a single shared client connection.

"""

from aerospike_vault_plugin.exceptions import AerospikePluginError, \
    ConfigurationError, \
    MissingConfigValue, \
    EmptyHost, \
    ConfigDecodeError, \
    InvalidHostSpec, \
    InvalidPort, \
    InvalidCACertificate, \
    InvalidClientCertificate, \
    NotInitialized, \
    VerifyConnectionError, \
    InvariantError, \
    EmptyCreationStatement, \
    MalformedStatement, \
    RolesRequired, \
    RotationPrerequisiteMissing, \
    SanitizedError
from aerospike_vault_plugin.hosts import Endpoint, parse_hosts
from aerospike_vault_plugin.tls import TLSMaterial, load_tls_material
from aerospike_vault_plugin.credentials import CredentialsProducer, \
    UsernameConfig, \
    StaticUserConfig, \
    Statements, \
    statement_compatibility_helper
from aerospike_vault_plugin.clients import AdminClient, \
    ClientFactory, \
    ClientPolicy, \
    AerospikeAdminClient, \
    AerospikeClientFactory
from aerospike_vault_plugin.connection_producer import ConnectionConfig, \
    AerospikeConnectionProducer
from aerospike_vault_plugin.middleware import DatabaseErrorSanitizerMiddleware
from aerospike_vault_plugin.database import TYPE_NAME, AerospikeDatabase, new
from ._version import __version__

__all__ = ["__version__",
           "AerospikePluginError",
           "ConfigurationError",
           "MissingConfigValue",
           "EmptyHost",
           "ConfigDecodeError",
           "InvalidHostSpec",
           "InvalidPort",
           "InvalidCACertificate",
           "InvalidClientCertificate",
           "NotInitialized",
           "VerifyConnectionError",
           "InvariantError",
           "EmptyCreationStatement",
           "MalformedStatement",
           "RolesRequired",
           "RotationPrerequisiteMissing",
           "SanitizedError",
           "Endpoint",
           "parse_hosts",
           "TLSMaterial",
           "load_tls_material",
           "CredentialsProducer",
           "UsernameConfig",
           "StaticUserConfig",
           "Statements",
           "statement_compatibility_helper",
           "AdminClient",
           "ClientFactory",
           "ClientPolicy",
           "AerospikeAdminClient",
           "AerospikeClientFactory",
           "ConnectionConfig",
           "AerospikeConnectionProducer",
           "DatabaseErrorSanitizerMiddleware",
           "TYPE_NAME",
           "AerospikeDatabase",
           "new"]
