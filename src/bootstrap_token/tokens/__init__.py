"""Bootstrap token values, metadata and their stored representation.

Quick start
-----------
::

    from bootstrap_token.tokens import BootstrapToken, TokenCodec, TokenString

    token = BootstrapToken(token=TokenString.generate(), usages=["signing"])
    record = TokenCodec().encode(token)
    assert TokenCodec().decode(record).token == token.token
"""
from __future__ import annotations

from bootstrap_token.tokens.bootstrap_token import (
    KNOWN_USAGES,
    USAGE_AUTHENTICATION,
    USAGE_SIGNING,
    BootstrapToken,
)
from bootstrap_token.tokens.codec import SECRET_TYPE_BOOTSTRAP_TOKEN, TokenCodec, secret_name
from bootstrap_token.tokens.token_string import TokenString, is_valid_id

__all__ = [
    "KNOWN_USAGES",
    "SECRET_TYPE_BOOTSTRAP_TOKEN",
    "USAGE_AUTHENTICATION",
    "USAGE_SIGNING",
    "BootstrapToken",
    "TokenCodec",
    "TokenString",
    "is_valid_id",
    "secret_name",
]
