#!/usr/bin/env python3
"""Example: Dry run and partial failures

Wraps a store in DryRunTokenStore so writes are reported instead of
performed, then shows how a partially failing delete batch is reported
item by item.

Usage:
    python examples/02_dry_run.py
"""
from __future__ import annotations

from bootstrap_token import (
    BootstrapToken,
    DeleteTokensError,
    DryRunTokenStore,
    InMemoryTokenStore,
    TokenService,
)


def main() -> None:
    backend = InMemoryTokenStore()

    # Step 1: Dry-run create leaves the backend untouched
    TokenService(DryRunTokenStore(backend)).create_token(BootstrapToken(usages=["signing"]))
    print(f"Records actually stored: {len(backend)}")

    # Step 2: A batch delete keeps going past bad items, then fails overall
    service = TokenService(backend)
    try:
        service.delete_tokens(["not-a-token", "zzzzzz"])
    except DeleteTokensError as exc:
        for result in exc.results:
            print(f"{result.display_target}: {result.error}")


if __name__ == "__main__":
    main()
