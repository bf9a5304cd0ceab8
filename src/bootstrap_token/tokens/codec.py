"""TokenCodec — map BootstrapToken objects to and from stored records.

Record layout
-------------
A bootstrap token is stored as a secret of type
``bootstrap.kubernetes.io/token`` named ``bootstrap-token-<id>``:

===============================  =======================================
key                              value
===============================  =======================================
``token-id``                     public token ID
``token-secret``                 token secret
``description``                  free text (absent when empty)
``expiration``                   RFC3339 UTC timestamp (absent = never)
``usage-bootstrap-<usage>``      ``"true"`` for every usage
``auth-extra-groups``            comma-separated groups (absent if none)
===============================  =======================================
"""
from __future__ import annotations

import datetime

from bootstrap_token.durations import format_rfc3339, parse_rfc3339
from bootstrap_token.errors import InvalidFormatError, MalformedRecordError
from bootstrap_token.store.base import StoredRecord
from bootstrap_token.tokens.bootstrap_token import BootstrapToken
from bootstrap_token.tokens.token_string import TokenString, is_valid_id

SECRET_TYPE_BOOTSTRAP_TOKEN: str = "bootstrap.kubernetes.io/token"
SECRET_NAME_PREFIX: str = "bootstrap-token-"
DEFAULT_NAMESPACE: str = "kube-system"

KEY_TOKEN_ID: str = "token-id"
KEY_TOKEN_SECRET: str = "token-secret"
KEY_DESCRIPTION: str = "description"
KEY_EXPIRATION: str = "expiration"
KEY_EXTRA_GROUPS: str = "auth-extra-groups"
USAGE_KEY_PREFIX: str = "usage-bootstrap-"


def secret_name(token_id: str) -> str:
    """Return the record name for *token_id*, e.g. ``bootstrap-token-abcdef``."""
    return f"{SECRET_NAME_PREFIX}{token_id}"


class TokenCodec:
    """Bidirectional mapping between BootstrapToken and StoredRecord.

    Parameters
    ----------
    namespace:
        Namespace written into encoded records.
    """

    def __init__(self, namespace: str = DEFAULT_NAMESPACE) -> None:
        self._namespace = namespace

    @property
    def namespace(self) -> str:
        return self._namespace

    # ------------------------------------------------------------------
    # Encode
    # ------------------------------------------------------------------

    def encode(
        self,
        token: BootstrapToken,
        now: datetime.datetime | None = None,
    ) -> StoredRecord:
        """Encode *token* into a record ready to be written to the store.

        A TTL is turned into an absolute ``expiration`` relative to *now*
        (defaults to the current time) unless ``expires`` is already set.

        Raises
        ------
        ValueError
            If *token* has no token string yet.
        """
        if token.token is None:
            raise ValueError("cannot encode a bootstrap token without a token string")

        now = now or datetime.datetime.now(datetime.timezone.utc)
        data: dict[str, bytes] = {
            KEY_TOKEN_ID: token.token.id.encode("utf-8"),
            KEY_TOKEN_SECRET: token.token.secret.encode("utf-8"),
        }

        if token.description:
            data[KEY_DESCRIPTION] = token.description.encode("utf-8")

        expires = token.expiry_from(now)
        if expires is not None:
            data[KEY_EXPIRATION] = format_rfc3339(expires).encode("utf-8")

        for usage in token.usages:
            data[USAGE_KEY_PREFIX + usage] = b"true"

        if token.groups:
            data[KEY_EXTRA_GROUPS] = ",".join(token.groups).encode("utf-8")

        return StoredRecord(
            name=secret_name(token.token.id),
            namespace=self._namespace,
            type=SECRET_TYPE_BOOTSTRAP_TOKEN,
            data=data,
        )

    # ------------------------------------------------------------------
    # Decode
    # ------------------------------------------------------------------

    def decode(self, record: StoredRecord) -> BootstrapToken:
        """Decode a stored record back into a BootstrapToken.

        The decoded token carries ``expires`` but no ``ttl``; usages come
        back sorted.

        Raises
        ------
        MalformedRecordError
            If the record is not a bootstrap-token record or any of its
            fields cannot be decoded.
        """
        if record.type != SECRET_TYPE_BOOTSTRAP_TOKEN:
            raise MalformedRecordError(
                record.name,
                f"type {record.type!r} is not {SECRET_TYPE_BOOTSTRAP_TOKEN!r}",
            )

        token_id = _text(record, KEY_TOKEN_ID)
        token_secret = _text(record, KEY_TOKEN_SECRET)
        if not token_id or not token_secret:
            raise MalformedRecordError(
                record.name,
                f"missing {KEY_TOKEN_ID!r} or {KEY_TOKEN_SECRET!r}",
            )
        if not is_valid_id(token_id):
            raise MalformedRecordError(record.name, f"invalid {KEY_TOKEN_ID!r}")

        try:
            token_string = TokenString.parse(f"{token_id}.{token_secret}")
        except InvalidFormatError as exc:
            raise MalformedRecordError(
                record.name, f"invalid {KEY_TOKEN_SECRET!r}", token_id=token_id
            ) from exc

        if record.name != secret_name(token_id):
            raise MalformedRecordError(
                record.name,
                f"name does not match {KEY_TOKEN_ID!r} (expected {secret_name(token_id)!r})",
                token_id=token_id,
            )

        expires: datetime.datetime | None = None
        raw_expiration = _text(record, KEY_EXPIRATION)
        if raw_expiration:
            try:
                expires = parse_rfc3339(raw_expiration)
            except ValueError as exc:
                raise MalformedRecordError(
                    record.name,
                    f"{KEY_EXPIRATION!r} is not an RFC3339 timestamp",
                    token_id=token_id,
                ) from exc

        usages = sorted(
            key[len(USAGE_KEY_PREFIX):]
            for key in record.data
            if key.startswith(USAGE_KEY_PREFIX) and _text(record, key) == "true"
        )

        raw_groups = _text(record, KEY_EXTRA_GROUPS)
        groups = [g.strip() for g in raw_groups.split(",") if g.strip()] if raw_groups else []

        return BootstrapToken(
            token=token_string,
            description=_text(record, KEY_DESCRIPTION) or "",
            expires=expires,
            usages=usages,
            groups=groups,
        )


def _text(record: StoredRecord, key: str) -> str | None:
    raw = record.data.get(key)
    if raw is None:
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedRecordError(record.name, f"{key!r} is not valid UTF-8") from exc
