"""Bearer token issuance and verification (HS256 JWTs)."""

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import jwt

from gateway.errors import InvalidOrExpiredToken

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
TOKEN_SCOPES = ["blog:create"]

_DURATION_RE = re.compile(
    r"^(?P<value>-?(?:\d+)?\.?\d+)\s*(?P<unit>[a-z]+)?$", re.IGNORECASE
)

# Milliseconds per unit, same vocabulary as the `ms` npm package
_UNIT_ALIASES: tuple[tuple[tuple[str, ...], int], ...] = (
    (("ms", "msec", "msecs", "millisecond", "milliseconds"), 1),
    (("s", "sec", "secs", "second", "seconds"), 1000),
    (("m", "min", "mins", "minute", "minutes"), 60_000),
    (("h", "hr", "hrs", "hour", "hours"), 3_600_000),
    (("d", "day", "days"), 86_400_000),
    (("w", "week", "weeks"), 604_800_000),
    (("y", "yr", "yrs", "year", "years"), 31_557_600_000),
)
_UNIT_MS: dict[str, int] = {
    name: factor for names, factor in _UNIT_ALIASES for name in names
}


def parse_duration(value: str) -> float:
    """Parse a duration such as ``"30m"`` or ``"2 hours"`` into seconds.

    A number without a unit is read as milliseconds. Raises ValueError for
    anything unparseable or not strictly positive.
    """
    match = _DURATION_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    unit = (match.group("unit") or "ms").lower()
    if unit not in _UNIT_MS:
        raise ValueError(f"Invalid duration unit in {value!r}")
    seconds = float(match.group("value")) * _UNIT_MS[unit] / 1000
    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return seconds


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_in: str


class TokenCodec:
    """Signs and verifies the gateway's bearer tokens.

    Tokens carry ``scope`` and ``issuedAt`` (epoch millis) claims alongside
    the standard ``iat``/``exp``. Nothing is stored server-side: a token is
    valid exactly while its signature checks out and ``exp`` is in the future.
    """

    def __init__(
        self,
        secret: str,
        expiry: str = "30m",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = secret
        self._expiry = expiry
        self._lifetime = parse_duration(expiry)
        self._clock = clock

    def issue(self) -> IssuedToken:
        now = self._clock()
        claims: dict[str, Any] = {
            "scope": list(TOKEN_SCOPES),
            "issuedAt": int(now * 1000),
            "iat": int(now),
            "exp": int(now + self._lifetime),
        }
        token = jwt.encode(claims, self._secret, algorithm=ALGORITHM)
        return IssuedToken(token=token, expires_in=self._expiry)

    def verify(self, token: str) -> dict[str, Any]:
        """Return the decoded claims, or raise InvalidOrExpiredToken.

        Expiry is judged by the same clock that issues tokens.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "require": ["exp", "iat"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.PyJWTError as e:
            logger.debug("Token rejected: %s", e)
            raise InvalidOrExpiredToken() from e

        scope = claims.get("scope")
        issued_at = claims.get("issuedAt")
        expires_at = claims.get("exp")
        if (
            not isinstance(scope, list)
            or not all(isinstance(s, str) for s in scope)
            or not _is_int(issued_at)
            or not _is_number(expires_at)
        ):
            logger.debug("Token rejected: malformed claims")
            raise InvalidOrExpiredToken()

        if self._clock() >= expires_at:
            logger.debug("Token rejected: expired")
            raise InvalidOrExpiredToken()
        return claims


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
