"""Authenticate use case - gate every token-bearing request."""

import logging
from typing import Optional

from ..exceptions import MissingTokenError, TokenRevokedError
from ..interfaces.services import IRevocationLedger, ITokenAuthority
from ..models.token import TokenClaims
from ..utils.decorators import token_fingerprint

logger = logging.getLogger(__name__)


class AuthenticateUseCase:
    """
    Resolve a caller-supplied token to its verified claims.

    The ledger is consulted first; an unreachable store propagates as
    StoreUnavailableError so the request fails closed.
    """

    def __init__(self, token_authority: ITokenAuthority, revocation_ledger: IRevocationLedger):
        self.token_authority = token_authority
        self.revocation_ledger = revocation_ledger

    async def execute(self, token: Optional[str]) -> TokenClaims:
        if not token:
            raise MissingTokenError()
        if await self.revocation_ledger.is_revoked(token):
            logger.info("Rejected revoked token | token=%s", token_fingerprint(token))
            raise TokenRevokedError()
        return self.token_authority.verify(token)
