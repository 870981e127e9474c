"""Bridge one live WebSocket connection to its user's notification channel."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, AsyncIterator, Optional, Protocol, assert_never

from pydantic import ValidationError
from starlette.websockets import WebSocketDisconnect

from ..exceptions import (
    AuthError,
    NotificationDecodeError,
    NotificationStreamClosed,
    StoreUnavailableError,
)
from ..interfaces.services import INotificationBus, ISubscription
from ..models.events import ChangeEvent, ClientMessage, ErrorMessage, RefreshJwt, decode_client_message, encode_event
from ..models.token import TokenClaims
from ..use_cases.authenticate import AuthenticateUseCase
from ..utils.decorators import token_fingerprint

logger = logging.getLogger(__name__)

# RFC 6455 close codes
POLICY_VIOLATION = 1008
INTERNAL_ERROR = 1011

TRANSPORT_ERRORS = (WebSocketDisconnect, RuntimeError, OSError)


class BridgeState(str, Enum):
    AUTHENTICATING = "authenticating"
    REJECTED = "rejected"
    BRIDGING = "bridging"
    CLOSING = "closing"
    CLOSED = "closed"


class LiveSocket(Protocol):
    """The subset of starlette's WebSocket the bridge relies on."""

    async def accept(self) -> None:
        ...

    async def receive(self) -> dict[str, Any]:
        ...

    async def send_text(self, data: str) -> None:
        ...

    async def close(self, code: int = 1000, reason: Optional[str] = None) -> None:
        ...


class ConnectionBridge:
    """
    Per-connection state machine.

    AUTHENTICATING -> BRIDGING -> CLOSING -> CLOSED, or AUTHENTICATING -> REJECTED.

    While BRIDGING a single loop races the next inbound frame against the
    next published ChangeEvent. Only this loop writes to the socket, so
    outbound frames leave in exactly the order the loop observed them.
    """

    def __init__(
        self,
        websocket: LiveSocket,
        authenticate_use_case: AuthenticateUseCase,
        notification_bus: INotificationBus,
    ):
        self.websocket = websocket
        self.authenticate = authenticate_use_case
        self.notification_bus = notification_bus
        self.state = BridgeState.AUTHENTICATING
        self.username: Optional[str] = None
        # set once the subscription is live; events published before this are not seen
        self.ready = asyncio.Event()
        self._peer_gone = False

    async def run(self, token: Optional[str]) -> BridgeState:
        claims = await self._authenticate(token)
        if claims is None:
            return self.state
        self.username = claims.subject
        await self.websocket.accept()
        self._transition(BridgeState.BRIDGING)
        logger.info("Live connection opened | username=%s", self.username)

        subscription = self.notification_bus.subscribe(self.username)
        try:
            await subscription.open()
        except StoreUnavailableError as exc:
            await self._send_error(f"Failed to subscribe to notifications: {exc.message}")
            self._transition(BridgeState.CLOSING)
            await self._finish(None)
            return self.state

        try:
            self.ready.set()
            await self._bridge(subscription)
        finally:
            await self._finish(subscription)
        return self.state

    async def _authenticate(self, token: Optional[str]) -> Optional[TokenClaims]:
        try:
            return await self.authenticate.execute(token)
        except AuthError as exc:
            logger.info(
                "Live connection rejected | reason=%s | token=%s",
                exc.message,
                token_fingerprint(token) if token else "-",
            )
            await self._reject(POLICY_VIOLATION, exc.message)
        except StoreUnavailableError as exc:
            logger.warning("Live connection rejected, store unavailable | error=%s", exc.message)
            await self._reject(INTERNAL_ERROR, exc.message)
        return None

    async def _reject(self, code: int, reason: str) -> None:
        self._transition(BridgeState.REJECTED)
        try:
            await self.websocket.close(code=code, reason=reason)
        except TRANSPORT_ERRORS as exc:
            logger.debug("Reject close failed | error=%s", exc)

    async def _bridge(self, subscription: ISubscription) -> None:
        events: AsyncIterator[ChangeEvent] = subscription.events()
        inbound: Optional[asyncio.Future] = None
        outbound: Optional[asyncio.Future] = None
        try:
            while self.state is BridgeState.BRIDGING:
                if inbound is None:
                    inbound = asyncio.ensure_future(self.websocket.receive())
                if outbound is None:
                    outbound = asyncio.ensure_future(anext(events))

                done, _ = await asyncio.wait({inbound, outbound}, return_when=asyncio.FIRST_COMPLETED)

                if inbound in done:
                    completed, inbound = inbound, None
                    await self._on_inbound(completed)
                if outbound in done and self.state is BridgeState.BRIDGING:
                    completed, outbound = outbound, None
                    await self._on_event(completed)
        finally:
            leftovers = [task for task in (inbound, outbound) if task is not None]
            for task in leftovers:
                task.cancel()
            if leftovers:
                # also retrieves results of futures that finished but were never handled
                await asyncio.gather(*leftovers, return_exceptions=True)
            aclose = getattr(events, "aclose", None)
            if callable(aclose):
                await aclose()

    async def _on_inbound(self, completed: asyncio.Future) -> None:
        try:
            message = completed.result()
        except TRANSPORT_ERRORS as exc:
            logger.warning("Live connection receive failed | username=%s | error=%s", self.username, exc)
            self._peer_gone = True
            self._transition(BridgeState.CLOSING)
            return

        kind = message.get("type")
        if kind == "websocket.disconnect":
            logger.debug("Client closed live connection | username=%s | code=%s", self.username, message.get("code"))
            self._peer_gone = True
            self._transition(BridgeState.CLOSING)
            return
        if kind != "websocket.receive":
            return

        text = message.get("text")
        if text is None:
            logger.debug("Ignoring binary frame | username=%s", self.username)
            return
        try:
            client_message = decode_client_message(text)
        except ValidationError as exc:
            await self._send_error(f"Invalid message: {exc.errors(include_url=False)[0]['msg']}")
            self._transition(BridgeState.CLOSING)
            return
        self._dispatch(client_message)

    def _dispatch(self, message: ClientMessage) -> None:
        match message:
            case RefreshJwt(jwt=token):
                # accepted but not acted on yet; the connection keeps its original identity
                logger.info(
                    "JWT refresh request | username=%s | token=%s",
                    self.username,
                    token_fingerprint(token),
                )
            case _:
                assert_never(message)

    async def _on_event(self, completed: asyncio.Future) -> None:
        try:
            event = completed.result()
        except StopAsyncIteration:
            await self._send_error("Notification stream closed")
            self._transition(BridgeState.CLOSING)
            return
        except (NotificationStreamClosed, NotificationDecodeError) as exc:
            logger.warning("Notification stream failed | username=%s | error=%s", self.username, exc)
            await self._send_error(str(exc))
            self._transition(BridgeState.CLOSING)
            return

        try:
            await self.websocket.send_text(encode_event(event))
        except TRANSPORT_ERRORS as exc:
            logger.warning("Notification send failed | username=%s | error=%s", self.username, exc)
            self._peer_gone = True
            self._transition(BridgeState.CLOSING)
            return
        logger.debug("Notification forwarded | username=%s | type=%s", self.username, event.type)

    async def _send_error(self, message: str) -> None:
        try:
            await self.websocket.send_text(ErrorMessage(message=message).model_dump_json())
        except TRANSPORT_ERRORS as exc:
            logger.warning("Error frame send failed | username=%s | error=%s", self.username, exc)
            self._peer_gone = True

    async def _finish(self, subscription: Optional[ISubscription]) -> None:
        if self.state is BridgeState.BRIDGING:
            self._transition(BridgeState.CLOSING)
        if subscription is not None:
            await subscription.close()
        if not self._peer_gone:
            try:
                await self.websocket.close()
            except TRANSPORT_ERRORS as exc:
                logger.warning("Live connection close send failed | username=%s | error=%s", self.username, exc)
        self._transition(BridgeState.CLOSED)
        logger.info("Live connection closed | username=%s", self.username)

    def _transition(self, new_state: BridgeState) -> None:
        logger.debug("Bridge state | username=%s | %s -> %s", self.username, self.state.value, new_state.value)
        self.state = new_state
