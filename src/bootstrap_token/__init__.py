"""bootstrap-token — lifecycle management for cluster bootstrap tokens.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import bootstrap_token
>>> bootstrap_token.__version__
'0.1.0'

Quick start
-----------
::

    from bootstrap_token import (
        BootstrapToken, TokenString, TokenService, InMemoryTokenStore,
    )

    service = TokenService(InMemoryTokenStore())
    created = service.create_token(
        BootstrapToken(usages=["signing", "authentication"],
                       groups=["system:bootstrappers:kubeadm:default-node-token"])
    )
    print(created.token)                      # abcdef.0123456789abcdef
    service.delete_tokens([created.token.id])
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------
from bootstrap_token.errors import (
    AlreadyExistsError,
    BootstrapTokenError,
    DeleteFailedError,
    DeleteTokensError,
    InvalidFormatError,
    MalformedRecordError,
    NotFoundError,
    StoreError,
    TokenValidationError,
)

# ------------------------------------------------------------------
# Tokens
# ------------------------------------------------------------------
from bootstrap_token.tokens.bootstrap_token import BootstrapToken
from bootstrap_token.tokens.codec import SECRET_TYPE_BOOTSTRAP_TOKEN, TokenCodec, secret_name
from bootstrap_token.tokens.token_string import TokenString, is_valid_id

# ------------------------------------------------------------------
# Stores
# ------------------------------------------------------------------
from bootstrap_token.store import (
    DryRunTokenStore,
    FileTokenStore,
    InMemoryTokenStore,
    StoredRecord,
    TokenStoreClient,
)

# ------------------------------------------------------------------
# Service and configuration
# ------------------------------------------------------------------
from bootstrap_token.config import TokenDefaults, TokenServiceConfig
from bootstrap_token.service import HUMAN_HEADER, DeleteResult, ListResult, TokenService

__all__ = [
    "__version__",
    # errors
    "AlreadyExistsError",
    "BootstrapTokenError",
    "DeleteFailedError",
    "DeleteTokensError",
    "InvalidFormatError",
    "MalformedRecordError",
    "NotFoundError",
    "StoreError",
    "TokenValidationError",
    # tokens
    "BootstrapToken",
    "SECRET_TYPE_BOOTSTRAP_TOKEN",
    "TokenCodec",
    "TokenString",
    "is_valid_id",
    "secret_name",
    # stores
    "DryRunTokenStore",
    "FileTokenStore",
    "InMemoryTokenStore",
    "StoredRecord",
    "TokenStoreClient",
    # service
    "DeleteResult",
    "HUMAN_HEADER",
    "ListResult",
    "TokenDefaults",
    "TokenService",
    "TokenServiceConfig",
]
