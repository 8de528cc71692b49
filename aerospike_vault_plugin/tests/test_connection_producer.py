# -*- coding: utf-8 -*-

import logging
import unittest

from aerospike_vault_plugin import (AerospikeConnectionProducer, ConfigDecodeError,
                                    ConfigurationError, ConnectionConfig, Endpoint, NotInitialized,
                                    VerifyConnectionError)
from .certs import certificates
from .mock_clients import MockClientFactory


def setup_module():
    logging.basicConfig(level=logging.DEBUG)


def base_config(**overrides):
    config = {
        "host": "test_host:3000",
        "username": "test_user",
        "password": "test_password",
    }
    config.update(overrides)
    return config


class TestInitialize(unittest.TestCase):

    def init_success(self, config, factory=None, verify=False):
        producer = AerospikeConnectionProducer(factory or MockClientFactory())
        saved = producer.initialize(config, verify)
        self.assertEqual(saved, config)
        self.assertTrue(producer.initialized)
        return producer

    def init_failure(self, config, expected_message, factory=None, verify=False):
        factory = factory or MockClientFactory()
        producer = AerospikeConnectionProducer(factory)
        with self.assertRaises(Exception) as cm:
            producer.initialize(config, verify)
        self.assertIn(expected_message, str(cm.exception))
        self.assertFalse(producer.initialized)
        return producer, cm.exception

    def test_init_does_not_connect(self):
        factory = MockClientFactory()
        self.init_success(base_config(), factory)
        self.assertEqual(factory.clients, [])

    def test_init_with_verify(self):
        policies = []
        factory = MockClientFactory(on_new_client=lambda policy, hosts: policies.append(policy))
        self.init_success(base_config(), factory, verify=True)
        self.assertEqual(len(policies), 1)
        self.assertEqual(policies[0].user, "test_user")
        self.assertEqual(policies[0].password, "test_password")
        self.assertIsNone(policies[0].tls)

    def test_init_passes_hosts_to_client(self):
        created_hosts = []
        factory = MockClientFactory(on_new_client=lambda policy, hosts: created_hosts.extend(hosts))
        self.init_success(
            base_config(host="test_host_1:tls_name_1:3001,test_host_2"), factory, verify=True)
        self.assertEqual(created_hosts, [Endpoint("test_host_1", 3001, "tls_name_1"),
                                         Endpoint("test_host_2", 3000)])

    def test_init_with_tls_ca(self):
        producer = self.init_success(base_config(tls_ca=certificates().ca_pem.decode("ascii")))
        self.assertIsNotNone(producer.client_policy.tls)
        self.assertFalse(producer.client_policy.tls.has_client_keypair)

    def test_init_with_tls_ca_and_client_certificate(self):
        certs = certificates()
        producer = self.init_success(base_config(
            tls_ca=certs.ca_pem,
            tls_certificate_key=certs.rsa_certificate_key.decode("ascii"),
        ))
        self.assertTrue(producer.client_policy.tls.has_client_keypair)

    def test_init_with_missing_host(self):
        config = base_config()
        del config["host"]
        self.init_failure(config, "host cannot be empty")

    def test_init_with_invalid_host(self):
        self.init_failure(base_config(host="a:b:c:d:e:f"), "too many components for host #1")

    def test_init_with_missing_user(self):
        config = base_config()
        del config["username"]
        self.init_failure(config, "username cannot be empty")

    def test_init_with_missing_password(self):
        self.init_failure(base_config(password=""), "password cannot be empty")

    def test_init_with_invalid_ca(self):
        self.init_failure(base_config(tls_ca="invalid_ca"), "failed to append CA to client policy")

    def test_init_with_invalid_client_key(self):
        self.init_failure(
            base_config(tls_ca=certificates().ca_pem, tls_certificate_key="invalid certificate"),
            "unable to load tls_certificate_key_data")

    def test_validation_fails_before_connecting(self):
        factory = MockClientFactory()
        self.init_failure(base_config(username=""), "username cannot be empty", factory,
                          verify=True)
        self.assertEqual(factory.clients, [])

    def test_init_with_verify_not_connected(self):
        factory = MockClientFactory(connected=False)
        producer, error = self.init_failure(base_config(), "error verifying connection: not connected",
                                            factory, verify=True)
        self.assertIsInstance(error, VerifyConnectionError)
        self.assertTrue(factory.clients[0].closed)
        with self.assertRaises(NotInitialized):
            producer.connection()

    def test_init_with_verify_connect_error(self):
        def refuse(policy, hosts):
            raise ConnectionRefusedError("connection refused")

        producer, error = self.init_failure(base_config(), "error verifying connection: connection refused",
                                            MockClientFactory(on_new_client=refuse), verify=True)
        self.assertIsInstance(error.__cause__, ConnectionRefusedError)

    def test_failed_reinitialize_leaves_producer_uninitialized(self):
        factory = MockClientFactory()
        producer = self.init_success(base_config(), factory, verify=True)
        with self.assertRaises(Exception):
            producer.initialize(base_config(host="a:b:c:d"))
        self.assertFalse(producer.initialized)
        self.assertTrue(factory.clients[0].closed)
        with self.assertRaises(NotInitialized):
            producer.connection()

    def test_reinitialize_closes_existing_client(self):
        factory = MockClientFactory()
        producer = self.init_success(base_config(), factory, verify=True)
        producer.initialize(base_config(password="other"), True)
        self.assertEqual(len(factory.clients), 2)
        self.assertTrue(factory.clients[0].closed)
        self.assertFalse(factory.clients[1].closed)
        self.assertEqual(producer.client_policy.password, "other")


class TestConnectionConfig(unittest.TestCase):

    def test_weak_decode(self):
        config = ConnectionConfig.from_mapping({
            "host": "test_host",
            "username": 12345,
            "password": 3.5,
            "tls_ca": "ca",
            "tls_certificate_key": b"key",
            "unknown": object(),
        })
        self.assertEqual(config.username, "12345")
        self.assertEqual(config.password, "3.5")
        self.assertEqual(config.tls_ca, b"ca")
        self.assertEqual(config.tls_certificate_key, b"key")

    def test_missing_values_are_empty(self):
        config = ConnectionConfig.from_mapping({})
        self.assertEqual(config, ConnectionConfig())

    def test_unconvertible(self):
        with self.assertRaises(ConfigDecodeError) as cm:
            ConnectionConfig.from_mapping({"host": ["a", "b"]})
        self.assertEqual(str(cm.exception), "'host' expected type 'string', got unconvertible type 'list'")

    def test_bytes_are_decoded_as_utf8(self):
        config = ConnectionConfig.from_mapping({"host": b"h\xc3\xb6st", "username": bytearray(b"u")})
        self.assertEqual(config.host, "höst")
        self.assertEqual(config.username, "u")

    def test_invalid_utf8(self):
        with self.assertRaises(ConfigDecodeError) as cm:
            ConnectionConfig.from_mapping({"host": b"\xff\xfe"})
        self.assertEqual(str(cm.exception), "'host' expected type 'string', got unconvertible type 'bytes'")
        self.assertIsInstance(cm.exception.__cause__, UnicodeDecodeError)

    def test_init_with_invalid_utf8(self):
        factory = MockClientFactory()
        producer = AerospikeConnectionProducer(factory)
        with self.assertRaises(ConfigurationError):
            producer.initialize({"host": b"\xff\xfe", "username": "u", "password": "p"})
        self.assertFalse(producer.initialized)
        self.assertEqual(factory.clients, [])


class TestConnection(unittest.TestCase):

    def setUp(self):
        self.factory = MockClientFactory()
        self.producer = AerospikeConnectionProducer(self.factory)

    def test_not_initialized(self):
        with self.assertRaises(NotInitialized) as cm:
            self.producer.connection()
        self.assertEqual(str(cm.exception), "connection has not been initialized")

    def test_connection_is_reused(self):
        self.producer.initialize(base_config())
        with self.producer.lock:
            first = self.producer.connection()
            second = self.producer.connection()
        self.assertIs(first, second)
        self.assertEqual(len(self.factory.clients), 1)

    def test_dead_connection_is_replaced(self):
        self.producer.initialize(base_config())
        first = self.producer.connection()
        first.connected = False
        second = self.producer.connection()
        self.assertIsNot(first, second)
        self.assertTrue(first.closed)
        self.assertTrue(second.is_connected())

    def test_close_errors_on_dead_connection_are_ignored(self):
        def fail_close(client):
            raise RuntimeError("close failed")

        self.factory.on_close = fail_close
        self.producer.initialize(base_config())
        first = self.producer.connection()
        first.connected = False
        second = self.producer.connection()
        self.assertIsNot(first, second)

    def test_close(self):
        self.producer.initialize(base_config())
        client = self.producer.connection()
        self.producer.close()
        self.assertTrue(client.closed)
        self.producer.close()
        self.assertIsNot(self.producer.connection(), client)

    def test_close_when_nothing_open(self):
        self.producer.close()
        self.producer.initialize(base_config())
        self.producer.close()
        self.assertEqual(self.factory.clients, [])

    def test_close_ignores_client_errors(self):
        def fail_close(client):
            raise RuntimeError("close failed")

        self.factory.on_close = fail_close
        self.producer.initialize(base_config())
        self.producer.connection()
        self.producer.close()

    def test_connect_timeout_is_passed_to_factory(self):
        producer = AerospikeConnectionProducer(self.factory, connect_timeout=2.5)
        producer.initialize(base_config())
        self.assertEqual(producer.client_policy.connect_timeout, 2.5)

    def test_call_timeout_overrides_connect_timeout(self):
        policies = []
        self.factory.on_new_client = lambda policy, hosts: policies.append(policy)
        producer = AerospikeConnectionProducer(self.factory, connect_timeout=2.5)
        producer.initialize(base_config())

        first = producer.connection(timeout=1)
        first.connected = False
        producer.connection()

        self.assertEqual([p.connect_timeout for p in policies], [1, 2.5])
        self.assertEqual(producer.client_policy.connect_timeout, 2.5)

    def test_call_timeout_is_unused_for_live_client(self):
        policies = []
        self.factory.on_new_client = lambda policy, hosts: policies.append(policy)
        self.producer.initialize(base_config())
        client = self.producer.connection()
        self.assertIs(self.producer.connection(timeout=1), client)
        self.assertEqual([p.connect_timeout for p in policies], [None])


class TestSecretValues(unittest.TestCase):

    def test_secret_values(self):
        producer = AerospikeConnectionProducer(MockClientFactory())
        self.assertEqual(producer.secret_values(), {})
        producer.initialize(base_config())
        self.assertEqual(producer.secret_values(), {"test_password": "[password]"})

    def test_update_password(self):
        config = base_config()
        producer = AerospikeConnectionProducer(MockClientFactory())
        producer.initialize(config)
        snapshot = producer.secret_values()
        with producer.lock:
            producer.update_password("new_password")
        self.assertEqual(producer.raw_config["password"], "new_password")
        self.assertEqual(producer.config.password, "new_password")
        self.assertEqual(producer.client_policy.password, "new_password")
        self.assertEqual(producer.secret_values(), {"new_password": "[password]"})
        self.assertEqual(snapshot, {"test_password": "[password]"})
        self.assertEqual(config["password"], "test_password")


if __name__ == '__main__':
    unittest.main()
