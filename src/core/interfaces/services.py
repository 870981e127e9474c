"""
Service protocols for dependency injection.

Use cases and the connection bridge depend on these, never on concrete classes.
"""

from __future__ import annotations

from datetime import datetime
from typing import AsyncIterator, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from core.models.events import ChangeEvent
    from core.models.token import IssuedToken, TokenClaims


class ITokenAuthority(Protocol):
    """Stateless signer/verifier for session tokens."""

    def issue(self, subject: str) -> "IssuedToken":
        ...

    def verify(self, token: str) -> "TokenClaims":
        ...


class IRevocationLedger(Protocol):
    """Store-backed record of tokens invalidated before natural expiry."""

    async def is_revoked(self, token: str) -> bool:
        ...

    async def revoke(self, token: str, expires_at: datetime) -> bool:
        ...


class ISubscription(Protocol):
    async def open(self) -> "ISubscription":
        ...

    def events(self) -> AsyncIterator["ChangeEvent"]:
        ...

    async def close(self) -> None:
        ...


class INotificationBus(Protocol):
    """Per-user publish/subscribe channel for task change events."""

    async def publish(self, owner: str, event: "ChangeEvent") -> int:
        ...

    def subscribe(self, owner: str) -> ISubscription:
        ...


class IPasswordHasher(Protocol):
    def hash_password(self, password: str) -> str:
        ...

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        ...
