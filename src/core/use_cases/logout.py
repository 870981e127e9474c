"""Logout use case - revoke the presented token."""

import logging
from typing import Optional

from ..exceptions import MissingTokenError
from ..interfaces.services import IRevocationLedger, ITokenAuthority

logger = logging.getLogger(__name__)


class LogoutUseCase:
    def __init__(self, token_authority: ITokenAuthority, revocation_ledger: IRevocationLedger):
        self.token_authority = token_authority
        self.revocation_ledger = revocation_ledger

    async def execute(self, token: Optional[str]) -> None:
        """Revoke ``token`` for the rest of its lifetime.

        Logging out an already-revoked token is a harmless re-write of the
        same entry, so the ledger is not consulted first.
        """
        if not token:
            raise MissingTokenError()
        claims = self.token_authority.verify(token)
        await self.revocation_ledger.revoke(token, claims.expires_at)
        logger.info("User logged out | username=%s", claims.subject)
