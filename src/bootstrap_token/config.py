"""Configuration models for the token service.

Configuration is explicit: a :class:`TokenServiceConfig` instance is
handed to :class:`~bootstrap_token.service.TokenService` at construction.
There is no process-wide default registry.
"""
from __future__ import annotations

import datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from bootstrap_token.tokens.bootstrap_token import (
    USAGE_AUTHENTICATION,
    USAGE_SIGNING,
    BootstrapToken,
)
from bootstrap_token.tokens.codec import DEFAULT_NAMESPACE
from bootstrap_token.tokens.token_string import TokenString

DEFAULT_TOKEN_TTL = datetime.timedelta(hours=24)
DEFAULT_NODE_TOKEN_GROUP = "system:bootstrappers:kubeadm:default-node-token"


class TokenDefaults(BaseModel):
    """Values applied to tokens built from partial caller input."""

    ttl: datetime.timedelta = DEFAULT_TOKEN_TTL
    usages: list[str] = Field(default_factory=lambda: [USAGE_SIGNING, USAGE_AUTHENTICATION])
    groups: list[str] = Field(default_factory=lambda: [DEFAULT_NODE_TOKEN_GROUP])
    description: str = ""

    def build_token(
        self,
        token: Optional[str] = None,
        ttl: Optional[datetime.timedelta] = None,
        usages: Optional[list[str]] = None,
        groups: Optional[list[str]] = None,
        description: Optional[str] = None,
    ) -> BootstrapToken:
        """Return a BootstrapToken with every unset argument defaulted.

        Raises
        ------
        InvalidFormatError
            If *token* is given but is not a valid token string.
        """
        return BootstrapToken(
            token=TokenString.parse(token) if token is not None else None,
            description=description if description is not None else self.description,
            ttl=ttl if ttl is not None else self.ttl,
            usages=list(usages if usages is not None else self.usages),
            groups=list(groups if groups is not None else self.groups),
        )


class TokenServiceConfig(BaseModel):
    """Settings for a TokenService instance."""

    namespace: str = DEFAULT_NAMESPACE
    defaults: TokenDefaults = Field(default_factory=TokenDefaults)

    @classmethod
    def from_file(cls, path: Path) -> TokenServiceConfig:
        """Load configuration from a JSON document.

        Raises
        ------
        pydantic.ValidationError
            If the document does not match the configuration schema.
        """
        return cls.model_validate_json(path.read_text(encoding="utf-8"))


__all__ = [
    "DEFAULT_NODE_TOKEN_GROUP",
    "DEFAULT_TOKEN_TTL",
    "TokenDefaults",
    "TokenServiceConfig",
]
