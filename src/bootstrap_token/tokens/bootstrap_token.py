"""BootstrapToken — a token string plus the metadata stored alongside it."""
from __future__ import annotations

import datetime
import re
from dataclasses import dataclass, field

from bootstrap_token.durations import to_utc
from bootstrap_token.errors import TokenValidationError
from bootstrap_token.tokens.token_string import TokenString

USAGE_SIGNING: str = "signing"
USAGE_AUTHENTICATION: str = "authentication"

KNOWN_USAGES: frozenset[str] = frozenset({USAGE_SIGNING, USAGE_AUTHENTICATION})

GROUP_PATTERN: str = r"^system:bootstrappers:[a-z0-9:-]{0,255}[a-z0-9]$"
_GROUP_RE = re.compile(GROUP_PATTERN)


@dataclass
class BootstrapToken:
    """A bootstrap token and its metadata.

    Parameters
    ----------
    token:
        The token value. ``None`` asks the service to generate one.
    description:
        Free-text note shown in listings.
    ttl:
        Lifetime from creation. ``None`` or zero means the token never
        expires. Ignored when ``expires`` is set.
    expires:
        Absolute UTC expiry time. ``None`` means no expiry.
    usages:
        What the token may be used for (``signing``, ``authentication``).
    groups:
        Extra groups the token authenticates as. Requires the
        ``authentication`` usage.
    """

    token: TokenString | None = None
    description: str = ""
    ttl: datetime.timedelta | None = None
    expires: datetime.datetime | None = None
    usages: list[str] = field(default_factory=list)
    groups: list[str] = field(default_factory=list)

    @property
    def token_id(self) -> str | None:
        """Return the public token ID, or None if no token is set yet."""
        return self.token.id if self.token is not None else None

    def expiry_from(self, now: datetime.datetime) -> datetime.datetime | None:
        """Return the absolute expiry for a token created at *now*.

        An explicit ``expires`` wins; otherwise a positive ``ttl`` is added
        to *now*; otherwise the token never expires. The result is truncated
        to whole seconds, the resolution of the stored expiration.
        """
        if self.expires is not None:
            expires = to_utc(self.expires)
        elif self.ttl is not None and self.ttl > datetime.timedelta(0):
            expires = to_utc(now) + self.ttl
        else:
            return None
        return expires.replace(microsecond=0)

    def is_expired(self, now: datetime.datetime | None = None) -> bool:
        """Return True if the token has an expiry at or before *now*."""
        if self.expires is None:
            return False
        now = now or datetime.datetime.now(datetime.timezone.utc)
        return to_utc(self.expires) <= to_utc(now)

    def validate(self, now: datetime.datetime | None = None) -> None:
        """Check every invariant a token must satisfy before it is stored.

        Raises
        ------
        TokenValidationError
            On the first violated invariant.
        """
        now = now or datetime.datetime.now(datetime.timezone.utc)
        token_id = self.token_id

        if self.ttl is not None and self.ttl < datetime.timedelta(0):
            raise TokenValidationError(
                f"token TTL must not be negative, got {self.ttl}",
                action="validate",
                token_id=token_id,
            )

        expires = self.expiry_from(now)
        if expires is not None and expires <= to_utc(now):
            raise TokenValidationError(
                f"token expiration {expires.isoformat()} is not in the future",
                action="validate",
                token_id=token_id,
            )

        _reject_duplicates("usage", self.usages, token_id)
        unknown = sorted(set(self.usages) - KNOWN_USAGES)
        if unknown:
            raise TokenValidationError(
                f"invalid bootstrap token usage(s) {', '.join(unknown)}; "
                f"valid options: {', '.join(sorted(KNOWN_USAGES))}",
                action="validate",
                token_id=token_id,
            )

        _reject_duplicates("group", self.groups, token_id)
        for group in self.groups:
            if _GROUP_RE.fullmatch(group) is None:
                raise TokenValidationError(
                    f"group {group!r} does not match pattern {GROUP_PATTERN!r}",
                    action="validate",
                    token_id=token_id,
                )

        if self.groups and USAGE_AUTHENTICATION not in self.usages:
            raise TokenValidationError(
                "token extra groups require the "
                f"{USAGE_AUTHENTICATION!r} usage, got usages {self.usages!r}",
                action="validate",
                token_id=token_id,
            )


def _reject_duplicates(kind: str, values: list[str], token_id: str | None) -> None:
    seen: set[str] = set()
    for value in values:
        if value in seen:
            raise TokenValidationError(
                f"duplicate {kind} {value!r}",
                action="validate",
                token_id=token_id,
            )
        seen.add(value)
