#!/usr/bin/env python3
"""Example: Quickstart

Creates a bootstrap token in an in-memory store, lists it, and deletes it.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install bootstrap-token
"""
from __future__ import annotations

import datetime

import bootstrap_token
from bootstrap_token import HUMAN_HEADER, BootstrapToken, InMemoryTokenStore, TokenService


def main() -> None:
    print(f"bootstrap-token version: {bootstrap_token.__version__}")

    service = TokenService(InMemoryTokenStore())

    # Step 1: Create a token for joining worker nodes
    created = service.create_token(
        BootstrapToken(
            description="worker join",
            ttl=datetime.timedelta(hours=2),
            usages=["signing", "authentication"],
            groups=["system:bootstrappers:kubeadm:default-node-token"],
        )
    )
    print(f"Token created: {created.token}")

    # Step 2: List tokens (the secret is masked)
    print(HUMAN_HEADER)
    for result in service.list_tokens():
        if result.token is not None:
            print(service.format_human(result.token))

    # Step 3: Delete by token ID
    assert created.token is not None
    for outcome in service.delete_tokens([created.token.id]):
        print(f"Deleted: {outcome.token_id}")

    print("\nQuickstart complete.")


if __name__ == "__main__":
    main()
