# -*- coding: utf-8 -*-
"""Validation of the PEM material supplied in ``tls_ca`` and ``tls_certificate_key``."""

import logging
import os
import re
from dataclasses import dataclass, field

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

from .exceptions import InvalidCACertificate, InvalidClientCertificate

PEM_BLOCK = re.compile(
    rb"-----BEGIN ([A-Z0-9 ]+)-----\r?\n.*?-----END \1-----", re.DOTALL
)

SUPPORTED_KEY_TYPES = (
    rsa.RSAPrivateKey,
    ec.EllipticCurvePrivateKey,
    ed25519.Ed25519PrivateKey,
)


def _pem_blocks(data):
    return [(m.group(1).decode("ascii"), m.group(0)) for m in PEM_BLOCK.finditer(data)]


def _public_key_der(key):
    return key.public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def _write_private(path, data):
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as f:
        f.write(data)
    return path


@dataclass
class TLSMaterial:
    """Trust anchor plus an optional client keypair for mutual TLS."""

    ca_certificates: list
    certificate_chain: list = field(default_factory=list)
    private_key: object = None

    @property
    def has_client_keypair(self):
        return self.private_key is not None

    def ca_pem(self):
        return b"".join(
            c.public_bytes(serialization.Encoding.PEM) for c in self.ca_certificates
        )

    def as_client_config(self, directory):
        """Writes the material below ``directory`` and returns an aerospike ``tls`` config.

        The aerospike client only reads TLS material from files, so the CA bundle,
        certificate chain and key are written with owner only permissions.
        """
        tls = {
            "enable": True,
            "cafile": _write_private(os.path.join(directory, "ca.pem"), self.ca_pem()),
        }
        if self.has_client_keypair:
            tls["certfile"] = _write_private(
                os.path.join(directory, "client.pem"),
                b"".join(
                    c.public_bytes(serialization.Encoding.PEM)
                    for c in self.certificate_chain
                ),
            )
            tls["keyfile"] = _write_private(
                os.path.join(directory, "client.key"),
                self.private_key.private_bytes(
                    serialization.Encoding.PEM,
                    serialization.PrivateFormat.PKCS8,
                    serialization.NoEncryption(),
                ),
            )
        return tls


def load_ca_certificates(data):
    """Parses every certificate in a PEM bundle, at least one must be valid."""
    certificates = []
    for label, block in _pem_blocks(data):
        if label != "CERTIFICATE":
            continue
        try:
            certificates.append(x509.load_pem_x509_certificate(block))
        except ValueError:
            logging.getLogger(__name__).debug("Skipping unparsable certificate in tls_ca")
    if not certificates:
        raise InvalidCACertificate()
    return certificates


def load_client_keypair(data):
    """Parses a PEM blob holding a certificate chain followed by its unencrypted key.

    Returns:
        tuple: ``(certificate_chain, private_key)`` with the leaf certificate first.
    """
    blocks = _pem_blocks(data)
    certificate_blocks = [b for label, b in blocks if label == "CERTIFICATE"]
    key_blocks = [b for label, b in blocks if label.endswith("PRIVATE KEY")]

    if not certificate_blocks:
        raise InvalidClientCertificate("failed to find any PEM data in certificate input")
    if not key_blocks:
        raise InvalidClientCertificate("failed to find PEM block with type ending in "
                                       "\"PRIVATE KEY\" in key input")

    try:
        chain = [x509.load_pem_x509_certificate(b) for b in certificate_blocks]
        private_key = serialization.load_pem_private_key(key_blocks[0], password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise InvalidClientCertificate(e) from e

    if not isinstance(private_key, SUPPORTED_KEY_TYPES):
        raise InvalidClientCertificate(
            f"unsupported private key type {type(private_key).__name__}")

    if _public_key_der(chain[0].public_key()) != _public_key_der(private_key.public_key()):
        raise InvalidClientCertificate("private key does not match public key")

    return chain, private_key


def load_tls_material(ca_data=None, certificate_key_data=None):
    """Builds the TLS material from raw PEM bytes.

    Args:
        ca_data (bytes): PEM encoded CA certificates, TLS is disabled without them.
        certificate_key_data (bytes): PEM encoded client certificate followed by
            its private key, enables mutual TLS.

    Returns:
        TLSMaterial: The validated material or None when TLS is disabled.
    """
    if not ca_data:
        return None

    material = TLSMaterial(ca_certificates=load_ca_certificates(ca_data))

    if certificate_key_data:
        material.certificate_chain, material.private_key = load_client_keypair(
            certificate_key_data)

    return material
