"""TokenService — create, list and delete bootstrap tokens in a store.

The service owns validation and orchestration; record layout lives in
:mod:`bootstrap_token.tokens.codec` and persistence behind a
:class:`~bootstrap_token.store.base.TokenStoreClient`.

Example
-------
::

    from bootstrap_token import BootstrapToken, InMemoryTokenStore, TokenService

    service = TokenService(InMemoryTokenStore())
    created = service.create_token(BootstrapToken(usages=["signing"]))
    print(created.token)
    for result in service.list_tokens():
        print(service.format_human(result.token))
"""
from __future__ import annotations

import dataclasses
import datetime
import logging
from dataclasses import dataclass

from bootstrap_token.config import TokenServiceConfig
from bootstrap_token.durations import format_rfc3339, short_human_duration, to_utc
from bootstrap_token.errors import (
    AlreadyExistsError,
    BootstrapTokenError,
    DeleteFailedError,
    DeleteTokensError,
    InvalidFormatError,
    MalformedRecordError,
    NotFoundError,
    StoreError,
)
from bootstrap_token.store.base import TokenStoreClient
from bootstrap_token.tokens.bootstrap_token import BootstrapToken
from bootstrap_token.tokens.codec import (
    SECRET_TYPE_BOOTSTRAP_TOKEN,
    TokenCodec,
    secret_name,
)
from bootstrap_token.tokens.token_string import (
    TOKEN_ID_PATTERN,
    TOKEN_PATTERN,
    TokenString,
    is_valid_id,
)

logger = logging.getLogger(__name__)

HUMAN_HEADER: str = "TOKEN\tTTL\tEXPIRES\tUSAGES\tDESCRIPTION\tEXTRA GROUPS"
HUMAN_COLUMNS: tuple[str, ...] = tuple(HUMAN_HEADER.split("\t"))

_NONE = "<none>"
_FOREVER = "<forever>"
_NEVER = "<never>"


@dataclass
class ListResult:
    """One entry of a token listing.

    Exactly one of ``token`` and ``error`` is set.

    Parameters
    ----------
    record_name:
        Name of the record this entry was decoded from.
    token:
        The decoded token, or None if decoding failed.
    error:
        The decode failure, or None on success.
    """

    record_name: str
    token: BootstrapToken | None = None
    error: MalformedRecordError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class DeleteResult:
    """Outcome of deleting one item of a batch.

    Parameters
    ----------
    target:
        The caller's input (token ID or full token). Full tokens are
        never echoed; see :meth:`display_target`.
    token_id:
        The normalised token ID, or None if the input could not be parsed.
    error:
        The failure for this item, or None if the record was deleted.
    """

    target: str = dataclasses.field(repr=False)
    token_id: str | None = None
    error: BootstrapTokenError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def display_target(self) -> str:
        """Return a printable form of the input that cannot leak a secret."""
        return self.token_id if self.token_id is not None else _redact(self.target)


class TokenService:
    """Lifecycle operations for bootstrap tokens.

    Parameters
    ----------
    store:
        Credential store the tokens are written to and read from.
    config:
        Service settings. Defaults to :class:`TokenServiceConfig()`.
    """

    def __init__(
        self,
        store: TokenStoreClient,
        config: TokenServiceConfig | None = None,
    ) -> None:
        self._store = store
        self._config = config or TokenServiceConfig()
        self._codec = TokenCodec(namespace=self._config.namespace)

    @property
    def config(self) -> TokenServiceConfig:
        return self._config

    @property
    def codec(self) -> TokenCodec:
        return self._codec

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_token(
        self,
        request: BootstrapToken,
        now: datetime.datetime | None = None,
    ) -> BootstrapToken:
        """Validate, encode and store a new bootstrap token.

        A token string is generated when ``request.token`` is unset. The
        store is not contacted if validation fails.

        Do not blindly retry a failed call without a token string: a retry
        generates a different token. Check for the first attempt's record
        or pass an explicit token instead.

        Parameters
        ----------
        request:
            The token to create. Not modified.
        now:
            Creation time used to turn a TTL into an expiry.

        Returns
        -------
        BootstrapToken
            A copy of *request* with ``token`` and ``expires`` filled in.

        Raises
        ------
        TokenValidationError
            If *request* violates a token invariant.
        AlreadyExistsError
            If a token with the same ID is already stored.
        StoreError
            If the store fails the write for any other reason.
        """
        now = now or datetime.datetime.now(datetime.timezone.utc)
        request.validate(now=now)

        token_string = request.token or TokenString.generate()
        created = dataclasses.replace(
            request,
            token=token_string,
            expires=request.expiry_from(now),
            usages=list(request.usages),
            groups=list(request.groups),
        )
        record = self._codec.encode(created, now=now)

        logger.debug("creating bootstrap token %r", token_string.id)
        try:
            self._store.create(self._config.namespace, record)
        except AlreadyExistsError as exc:
            raise AlreadyExistsError(
                f"bootstrap token {token_string.id!r} already exists",
                action="create",
                token_id=token_string.id,
            ) from exc
        except Exception as exc:
            raise StoreError(
                f"failed to create bootstrap token {token_string.id!r}: {exc}",
                action="create",
                token_id=token_string.id,
            ) from exc

        logger.info("created bootstrap token %r", token_string.id)
        return created

    # ------------------------------------------------------------------
    # List
    # ------------------------------------------------------------------

    def list_tokens(self) -> list[ListResult]:
        """Return every bootstrap token in the store.

        Each record is decoded on its own; a record that fails to decode
        yields a :class:`ListResult` carrying the error instead of aborting
        the listing. Order follows the store's enumeration order.

        Raises
        ------
        StoreError
            If the store cannot be listed at all.
        """
        logger.debug("listing bootstrap tokens in namespace %r", self._config.namespace)
        try:
            records = self._store.list(self._config.namespace, SECRET_TYPE_BOOTSTRAP_TOKEN)
        except Exception as exc:
            raise StoreError(
                f"failed to list bootstrap tokens: {exc}", action="list"
            ) from exc

        results: list[ListResult] = []
        for record in records:
            try:
                token = self._codec.decode(record)
            except MalformedRecordError as exc:
                logger.warning(
                    "skipping malformed bootstrap token record %r: %s", record.name, exc.reason
                )
                results.append(ListResult(record_name=record.name, error=exc))
                continue
            results.append(ListResult(record_name=record.name, token=token))
        return results

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_tokens(self, ids: list[str]) -> list[DeleteResult]:
        """Delete the records behind a batch of token IDs or full tokens.

        Every item is attempted, in order, regardless of earlier failures.

        Returns
        -------
        list[DeleteResult]
            One successful result per input, when every item succeeded.

        Raises
        ------
        DeleteTokensError
            After the whole batch has been processed, if any item failed.
            ``results`` holds the outcome of every item.
        """
        results = [self._delete_one(target) for target in ids]
        if any(not r.ok for r in results):
            raise DeleteTokensError(results)
        return results

    def _delete_one(self, target: str) -> DeleteResult:
        try:
            token_id = normalize_token_id(target)
        except InvalidFormatError as exc:
            logger.warning("not deleting %r: %s", _redact(target), exc)
            return DeleteResult(target=target, error=exc)

        try:
            self._delete_record(token_id)
        except StoreError as exc:
            logger.warning("%s", exc)
            return DeleteResult(target=target, token_id=token_id, error=exc)

        logger.info("deleted bootstrap token %r", token_id)
        return DeleteResult(target=target, token_id=token_id)

    def _delete_record(self, token_id: str) -> None:
        name = secret_name(token_id)
        logger.debug("deleting bootstrap token %r (record %r)", token_id, name)
        try:
            self._store.delete(self._config.namespace, name)
        except NotFoundError as exc:
            raise NotFoundError(
                f"bootstrap token {token_id!r} not found",
                action="delete",
                token_id=token_id,
            ) from exc
        except Exception as exc:
            raise DeleteFailedError(
                f"failed to delete bootstrap token {token_id!r}: {exc}",
                action="delete",
                token_id=token_id,
            ) from exc

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @staticmethod
    def format_human(
        token: BootstrapToken,
        now: datetime.datetime | None = None,
    ) -> str:
        """Render *token* as one tab-separated row under :data:`HUMAN_HEADER`.

        The TTL column is recomputed from *now* (default: the current time)
        on every call. The token secret is masked.
        """
        ttl = _FOREVER
        expires = _NEVER
        if token.expires is not None:
            now = now or datetime.datetime.now(datetime.timezone.utc)
            ttl = short_human_duration(to_utc(token.expires) - to_utc(now))
            expires = format_rfc3339(token.expires)

        return "\t".join(
            [
                token.token.redacted() if token.token is not None else _NONE,
                ttl,
                expires,
                ",".join(token.usages) or _NONE,
                token.description or _NONE,
                ",".join(token.groups) or _NONE,
            ]
        )


def normalize_token_id(value: str) -> str:
    """Return the token ID for a bare ID or a full ``<id>.<secret>`` token.

    Raises
    ------
    InvalidFormatError
        If *value* is neither.
    """
    if is_valid_id(value):
        return value
    try:
        return TokenString.parse(value).id
    except InvalidFormatError as exc:
        raise InvalidFormatError(
            f"given token {_redact(value)!r} didn't match pattern "
            f"{TOKEN_ID_PATTERN!r} or {TOKEN_PATTERN!r}",
            action="delete",
        ) from exc


def _redact(value: str) -> str:
    head, sep, _ = value.partition(".")
    return f"{head}.<redacted>" if sep else head
