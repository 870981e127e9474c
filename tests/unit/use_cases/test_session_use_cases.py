"""
Unit tests for the session use cases.

Tests cover:
- AuthenticateUseCase: missing, revoked and valid tokens
- RegisterUserUseCase: new user, taken username, lost race
- LoginUseCase: password path, token rotation, precedence, missing fields
- LogoutUseCase: revocation of the presented token
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from core.exceptions import (
    InvalidCredentialsError,
    InvalidSignatureError,
    MissingFieldsError,
    MissingTokenError,
    StoreUnavailableError,
    TokenRevokedError,
    UserNotFoundError,
    UsernameTakenError,
)
from core.models.user import User
from core.repositories.user import UserRepository
from core.services.password_hasher import BcryptPasswordHasher
from core.services.token_authority import TokenAuthority
from core.use_cases.authenticate import AuthenticateUseCase
from core.use_cases.login import LoginUseCase
from core.use_cases.logout import LogoutUseCase
from core.use_cases.register_user import RegisterUserUseCase


@pytest.fixture
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def user_repo(fake_redis) -> UserRepository:
    return UserRepository(redis_client=fake_redis)


@pytest.fixture
def login_use_case(user_repo, hasher, token_authority, revocation_ledger) -> LoginUseCase:
    return LoginUseCase(
        user_repository=user_repo,
        password_hasher=hasher,
        token_authority=token_authority,
        revocation_ledger=revocation_ledger,
    )


@pytest.fixture
async def alice(user_repo, hasher) -> User:
    user = User(username="alice", password_hash=hasher.hash_password("wonderland"))
    await user_repo.create(user)
    return user


@pytest.mark.unit
@pytest.mark.use_case
class TestAuthenticateUseCase:
    async def test_valid_token_returns_claims(self, token_authority, revocation_ledger):
        use_case = AuthenticateUseCase(token_authority=token_authority, revocation_ledger=revocation_ledger)

        claims = await use_case.execute(token_authority.issue("alice").token)

        assert claims.subject == "alice"

    @pytest.mark.parametrize("token", [None, ""])
    async def test_missing_token(self, token_authority, revocation_ledger, token):
        use_case = AuthenticateUseCase(token_authority=token_authority, revocation_ledger=revocation_ledger)

        with pytest.raises(MissingTokenError):
            await use_case.execute(token)

    async def test_revoked_token_rejected_even_though_signature_is_valid(self, token_authority, revocation_ledger):
        issued = token_authority.issue("alice")
        await revocation_ledger.revoke(issued.token, issued.claims.expires_at)
        use_case = AuthenticateUseCase(token_authority=token_authority, revocation_ledger=revocation_ledger)

        # verify alone still accepts it
        assert token_authority.verify(issued.token).subject == "alice"
        with pytest.raises(TokenRevokedError):
            await use_case.execute(issued.token)

    async def test_ledger_outage_fails_closed(self, token_authority):
        ledger = MagicMock()
        ledger.is_revoked = AsyncMock(side_effect=StoreUnavailableError())
        use_case = AuthenticateUseCase(token_authority=token_authority, revocation_ledger=ledger)

        with pytest.raises(StoreUnavailableError):
            await use_case.execute(token_authority.issue("alice").token)


@pytest.mark.unit
@pytest.mark.use_case
class TestRegisterUserUseCase:
    async def test_register_stores_hash_and_issues_token(self, user_repo, hasher, token_authority):
        use_case = RegisterUserUseCase(user_repository=user_repo, password_hasher=hasher, token_authority=token_authority)

        issued = await use_case.execute("alice", "wonderland")

        stored = await user_repo.get("alice")
        assert stored.password_hash != "wonderland"
        assert hasher.verify_password(password="wonderland", password_hash=stored.password_hash)
        assert token_authority.verify(issued.token).subject == "alice"

    async def test_taken_username(self, user_repo, hasher, token_authority, alice):
        use_case = RegisterUserUseCase(user_repository=user_repo, password_hasher=hasher, token_authority=token_authority)

        with pytest.raises(UsernameTakenError):
            await use_case.execute("alice", "another")

    async def test_lost_registration_race(self, hasher, token_authority):
        repo = MagicMock()
        repo.exists = AsyncMock(return_value=False)
        repo.create = AsyncMock(return_value=False)
        use_case = RegisterUserUseCase(user_repository=repo, password_hasher=hasher, token_authority=token_authority)

        with pytest.raises(UsernameTakenError):
            await use_case.execute("alice", "wonderland")


@pytest.mark.unit
@pytest.mark.use_case
class TestLoginUseCase:
    async def test_password_login(self, login_use_case, alice, token_authority):
        issued = await login_use_case.execute(username="alice", password="wonderland")

        assert token_authority.verify(issued.token).subject == "alice"

    async def test_wrong_password(self, login_use_case, alice):
        with pytest.raises(InvalidCredentialsError):
            await login_use_case.execute(username="alice", password="looking-glass")

    async def test_unknown_user(self, login_use_case):
        with pytest.raises(InvalidCredentialsError):
            await login_use_case.execute(username="ghost", password="boo")

    async def test_missing_fields(self, login_use_case):
        with pytest.raises(MissingFieldsError):
            await login_use_case.execute(username="alice")

    async def test_token_rotation_is_single_use(self, login_use_case, alice, token_authority, revocation_ledger, clock):
        original = token_authority.issue("alice")
        clock.advance(seconds=5)

        successor = await login_use_case.execute(jwt=original.token)

        assert successor.token != original.token
        assert successor.claims.subject == "alice"
        assert await revocation_ledger.is_revoked(original.token) is True
        with pytest.raises(TokenRevokedError):
            await login_use_case.execute(jwt=original.token)

    async def test_token_takes_precedence_over_password(self, login_use_case, alice, token_authority, clock):
        original = token_authority.issue("alice")
        clock.advance(seconds=1)

        issued = await login_use_case.execute(username="alice", password="wrong", jwt=original.token)

        assert issued.claims.subject == "alice"

    async def test_token_for_deleted_user(self, login_use_case, token_authority):
        with pytest.raises(UserNotFoundError):
            await login_use_case.execute(jwt=token_authority.issue("ghost").token)

    async def test_forged_token_is_not_revoked(self, login_use_case, alice, revocation_ledger, clock):
        forger = TokenAuthority(secret_key="forger-secret-key-with-at-least-32-bytes", clock=clock)
        forged = forger.issue("alice").token

        with pytest.raises(InvalidSignatureError):
            await login_use_case.execute(jwt=forged)

        assert await revocation_ledger.is_revoked(forged) is False


@pytest.mark.unit
@pytest.mark.use_case
class TestLogoutUseCase:
    async def test_logout_revokes_token(self, token_authority, revocation_ledger):
        issued = token_authority.issue("alice")
        use_case = LogoutUseCase(token_authority=token_authority, revocation_ledger=revocation_ledger)

        await use_case.execute(issued.token)

        assert await revocation_ledger.is_revoked(issued.token) is True

    async def test_logout_twice_is_harmless(self, token_authority, revocation_ledger):
        issued = token_authority.issue("alice")
        use_case = LogoutUseCase(token_authority=token_authority, revocation_ledger=revocation_ledger)

        await use_case.execute(issued.token)
        await use_case.execute(issued.token)

        assert await revocation_ledger.is_revoked(issued.token) is True

    async def test_logout_without_token(self, token_authority, revocation_ledger):
        use_case = LogoutUseCase(token_authority=token_authority, revocation_ledger=revocation_ledger)

        with pytest.raises(MissingTokenError):
            await use_case.execute(None)
