"""Issue and verify signed, time-bounded session tokens."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Callable

import jwt
from jwt.exceptions import DecodeError, InvalidSignatureError as JwtInvalidSignatureError, InvalidTokenError

from ..exceptions import InvalidSignatureError, MalformedTokenError, TokenExpiredError
from ..models.token import IssuedToken, TokenClaims
from ..utils.time import from_unix, now_utc, to_unix

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ("sub", "iat", "exp")


class TokenAuthority:
    """
    Stateless JWT signer/verifier.

    Holds only the shared secret and a clock. Verification never touches the
    store; revocation is checked separately by the RevocationLedger.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = now_utc,
    ):
        if not secret_key:
            raise ValueError("TokenAuthority requires a non-empty secret")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._lifetime = lifetime
        self._clock = clock

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def issue(self, subject: str) -> IssuedToken:
        issued_at = to_unix(self._clock())
        expires_at = issued_at + int(self._lifetime.total_seconds())
        token = jwt.encode(
            # jti keeps tokens minted for the same user in the same second distinct
            {"sub": subject, "iat": issued_at, "exp": expires_at, "jti": uuid.uuid4().hex},
            self._secret_key,
            algorithm=self._algorithm,
        )
        return IssuedToken(
            token=token,
            claims=TokenClaims(subject=subject, issued_at=from_unix(issued_at), expires_at=from_unix(expires_at)),
        )

    def verify(self, token: str) -> TokenClaims:
        """Return the token's claims or raise Malformed/InvalidSignature/Expired."""
        try:
            # Expiry is checked below against the injected clock.
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_iat": False, "require": list(REQUIRED_CLAIMS)},
            )
        except JwtInvalidSignatureError as exc:
            raise InvalidSignatureError() from exc
        except DecodeError as exc:
            raise MalformedTokenError(f"Malformed JWT: {exc}") from exc
        except InvalidTokenError as exc:
            raise MalformedTokenError(f"Malformed JWT: {exc}") from exc

        claims = self._parse_claims(payload)
        if to_unix(claims.expires_at) < to_unix(self._clock()):
            raise TokenExpiredError()
        return claims

    @staticmethod
    def _parse_claims(payload: dict[str, Any]) -> TokenClaims:
        subject = payload.get("sub")
        issued_at = payload.get("iat")
        expires_at = payload.get("exp")
        if not isinstance(subject, str) or not subject:
            raise MalformedTokenError("Malformed JWT: subject must be a non-empty string")
        for name, value in (("iat", issued_at), ("exp", expires_at)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise MalformedTokenError(f"Malformed JWT: {name} must be a number")
        return TokenClaims(subject=subject, issued_at=from_unix(issued_at), expires_at=from_unix(expires_at))
