"""Render the ``kubeadm join`` command a node runs with a bootstrap token.

The joining node pins the cluster CA by the SHA-256 hash of the CA
certificate's DER-encoded SubjectPublicKeyInfo, written as
``sha256:<hex>``.
"""
from __future__ import annotations

import hashlib

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from bootstrap_token.tokens.token_string import TokenString


def ca_cert_hash(ca_cert_pem: bytes) -> str:
    """Return the ``sha256:<hex>`` public-key pin for a PEM CA certificate.

    Raises
    ------
    ValueError
        If *ca_cert_pem* is not a PEM-encoded X.509 certificate.
    """
    cert = x509.load_pem_x509_certificate(ca_cert_pem)
    spki = cert.public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return "sha256:" + hashlib.sha256(spki).hexdigest()


def join_command(endpoint: str, token: TokenString, ca_cert_pem: bytes | None = None) -> str:
    """Return a single-line join command for *endpoint* using *token*.

    Without a CA certificate the command skips CA pinning, which leaves
    the joining node open to a spoofed control plane.
    """
    parts = ["kubeadm", "join", endpoint, "--token", str(token)]
    if ca_cert_pem is not None:
        parts += ["--discovery-token-ca-cert-hash", ca_cert_hash(ca_cert_pem)]
    else:
        parts.append("--discovery-token-unsafe-skip-ca-verification")
    return " ".join(parts)
