"""TokenString — the two-part ``<id>.<secret>`` bootstrap token value.

Token format
------------
A bootstrap token is a dot-separated string::

    [a-z0-9]{6}.[a-z0-9]{16}

The first part is the public token ID, used to name the backing record and
safe to log. The second part is the token secret and must be kept private
at all times: it is excluded from ``repr()`` and from every listing.
"""
from __future__ import annotations

import re
import secrets
import string
from dataclasses import dataclass, field

from bootstrap_token.errors import InvalidFormatError

TOKEN_ID_LENGTH: int = 6
TOKEN_SECRET_LENGTH: int = 16

TOKEN_ID_PATTERN: str = rf"^[a-z0-9]{{{TOKEN_ID_LENGTH}}}$"
TOKEN_PATTERN: str = rf"^([a-z0-9]{{{TOKEN_ID_LENGTH}}})\.([a-z0-9]{{{TOKEN_SECRET_LENGTH}}})$"

_TOKEN_ID_RE = re.compile(TOKEN_ID_PATTERN)
_TOKEN_RE = re.compile(TOKEN_PATTERN)

_ALPHABET: str = string.ascii_lowercase + string.digits


def is_valid_id(value: str) -> bool:
    """Return True if *value* is a bare token ID such as ``"abcdef"``."""
    return _TOKEN_ID_RE.fullmatch(value) is not None


@dataclass(frozen=True)
class TokenString:
    """An immutable, validated bootstrap token.

    Build instances with :meth:`parse` or :meth:`generate`; the constructor
    re-checks both parts so a hand-built value can never hold a bad token.

    Parameters
    ----------
    id:
        Public token ID (6 lowercase alphanumeric characters).
    secret:
        Private token secret (16 lowercase alphanumeric characters).
    """

    id: str
    secret: str = field(repr=False)

    def __post_init__(self) -> None:
        if _TOKEN_RE.fullmatch(f"{self.id}.{self.secret}") is None:
            raise InvalidFormatError(
                f"bootstrap token does not match pattern {TOKEN_PATTERN!r}",
                action="parse",
            )

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, raw: str) -> TokenString:
        """Parse a full ``<id>.<secret>`` token string.

        Parameters
        ----------
        raw:
            The token as supplied by a caller. Surrounding whitespace is
            not stripped.

        Returns
        -------
        TokenString

        Raises
        ------
        InvalidFormatError
            If *raw* does not match the token pattern exactly.
        """
        match = _TOKEN_RE.fullmatch(raw)
        if match is None:
            raise InvalidFormatError(
                f"the bootstrap token {_describe(raw)} was not of the form {TOKEN_PATTERN!r}",
                action="parse",
            )
        return cls(id=match.group(1), secret=match.group(2))

    @classmethod
    def generate(cls) -> TokenString:
        """Return a new token drawn from the operating system's CSPRNG."""
        return cls(
            id=_random_string(TOKEN_ID_LENGTH),
            secret=_random_string(TOKEN_SECRET_LENGTH),
        )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def redacted(self) -> str:
        """Return the token with its secret masked, for listings and logs."""
        return f"{self.id}.{'*' * TOKEN_SECRET_LENGTH}"

    def __str__(self) -> str:
        return f"{self.id}.{self.secret}"


def _random_string(length: int) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def _describe(raw: str) -> str:
    # Echo back only the part before the dot; the rest may be a secret.
    head, sep, _ = raw.partition(".")
    return repr(f"{head}.<redacted>") if sep else repr(head)
