"""Register user use case - create an account and open its first session."""

import asyncio
import logging

from ..exceptions import UsernameTakenError
from ..interfaces.repositories import IUserRepository
from ..interfaces.services import IPasswordHasher, ITokenAuthority
from ..models.token import IssuedToken
from ..models.user import User

logger = logging.getLogger(__name__)


class RegisterUserUseCase:
    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        token_authority: ITokenAuthority,
    ):
        self.user_repo = user_repository
        self.password_hasher = password_hasher
        self.token_authority = token_authority

    async def execute(self, username: str, password: str) -> IssuedToken:
        if await self.user_repo.exists(username):
            logger.info("Registration rejected, username taken | username=%s", username)
            raise UsernameTakenError()

        # bcrypt is CPU-bound; keep it off the event loop
        password_hash = await asyncio.to_thread(self.password_hasher.hash_password, password)
        if not await self.user_repo.create(User(username=username, password_hash=password_hash)):
            # lost a race with a concurrent registration
            raise UsernameTakenError()

        logger.info("User registered | username=%s", username)
        return self.token_authority.issue(username)
