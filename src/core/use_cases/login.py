"""Login use case - password login or single-use token rotation."""

import asyncio
import logging
from typing import Optional

from ..exceptions import InvalidCredentialsError, MissingFieldsError, TokenRevokedError, UserNotFoundError
from ..interfaces.repositories import IUserRepository
from ..interfaces.services import IPasswordHasher, IRevocationLedger, ITokenAuthority
from ..models.token import IssuedToken
from ..utils.decorators import token_fingerprint

logger = logging.getLogger(__name__)


class LoginUseCase:
    """
    Issue a fresh session token.

    Two paths:
    - token: the presented token must be unrevoked and valid, and its user
      must still exist. The successor is minted first, then the presented
      token is revoked, so each token can be rotated exactly once.
    - password: the stored bcrypt hash must match.

    A token, when present, takes precedence over credentials.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        token_authority: ITokenAuthority,
        revocation_ledger: IRevocationLedger,
    ):
        self.user_repo = user_repository
        self.password_hasher = password_hasher
        self.token_authority = token_authority
        self.revocation_ledger = revocation_ledger

    async def execute(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        jwt: Optional[str] = None,
    ) -> IssuedToken:
        if jwt:
            return await self._rotate(jwt)
        if username is not None and password is not None:
            return await self._login_with_password(username, password)
        raise MissingFieldsError()

    async def _rotate(self, token: str) -> IssuedToken:
        if await self.revocation_ledger.is_revoked(token):
            logger.info("Token login rejected, token revoked | token=%s", token_fingerprint(token))
            raise TokenRevokedError()
        claims = self.token_authority.verify(token)
        if not await self.user_repo.exists(claims.subject):
            raise UserNotFoundError()

        successor = self.token_authority.issue(claims.subject)
        await self.revocation_ledger.revoke(token, claims.expires_at)
        logger.info(
            "Token rotated | username=%s | old=%s | new=%s",
            claims.subject,
            token_fingerprint(token),
            token_fingerprint(successor.token),
        )
        return successor

    async def _login_with_password(self, username: str, password: str) -> IssuedToken:
        user = await self.user_repo.get(username)
        if user is None:
            logger.info("Password login failed, unknown user | username=%s", username)
            raise InvalidCredentialsError()
        matches = await asyncio.to_thread(
            self.password_hasher.verify_password, password=password, password_hash=user.password_hash
        )
        if not matches:
            logger.info("Password login failed, bad password | username=%s", username)
            raise InvalidCredentialsError()
        logger.info("Password login succeeded | username=%s", username)
        return self.token_authority.issue(username)
