"""Tests for bootstrap_token.join — join command rendering."""
from __future__ import annotations

import datetime
import hashlib

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from bootstrap_token.join import ca_cert_hash, join_command
from bootstrap_token.tokens.token_string import TokenString


@pytest.fixture(scope="module")
def ca_pem() -> bytes:
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "kubernetes")])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + datetime.timedelta(days=1))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )
    return cert.public_bytes(serialization.Encoding.PEM)


class TestCaCertHash:
    def test_hash_is_sha256_of_spki(self, ca_pem: bytes) -> None:
        cert = x509.load_pem_x509_certificate(ca_pem)
        spki = cert.public_key().public_bytes(
            serialization.Encoding.DER,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        assert ca_cert_hash(ca_pem) == "sha256:" + hashlib.sha256(spki).hexdigest()

    def test_rejects_non_pem(self) -> None:
        with pytest.raises(ValueError):
            ca_cert_hash(b"not a certificate")


class TestJoinCommand:
    def test_with_ca_pin(self, ca_pem: bytes) -> None:
        token = TokenString.parse("abcdef.0123456789abcdef")
        line = join_command("10.0.0.1:6443", token, ca_pem)
        assert line == (
            "kubeadm join 10.0.0.1:6443 --token abcdef.0123456789abcdef "
            f"--discovery-token-ca-cert-hash {ca_cert_hash(ca_pem)}"
        )

    def test_without_ca_skips_verification(self) -> None:
        token = TokenString.parse("abcdef.0123456789abcdef")
        line = join_command("cp.example:6443", token)
        assert line.endswith("--discovery-token-unsafe-skip-ca-verification")
