"""Session endpoints: register, login, logout."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends

from api_v1.schemas import EmptyResponse, SimpleMeta
from core.dependencies import (
    get_login_use_case,
    get_logout_use_case,
    get_register_user_use_case,
    get_request_token,
)
from core.models.token import IssuedToken
from core.use_cases.login import LoginUseCase
from core.use_cases.logout import LogoutUseCase
from core.use_cases.register_user import RegisterUserUseCase

from .schemas import LoginRequest, LogoutRequest, RegisterRequest, SessionDTO, SessionResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


def _session_response(issued: IssuedToken) -> SessionResponse:
    return SessionResponse(meta=SimpleMeta(), payload=SessionDTO(jwt=issued.token, username=issued.claims.subject))


@router.post("/register", status_code=201)
async def register(
    body: RegisterRequest = Body(...),
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
) -> SessionResponse:
    issued = await use_case.execute(body.username, body.password)
    return _session_response(issued)


@router.post("/login")
async def login(
    body: LoginRequest = Body(...),
    use_case: LoginUseCase = Depends(get_login_use_case),
) -> SessionResponse:
    issued = await use_case.execute(username=body.username, password=body.password, jwt=body.jwt)
    return _session_response(issued)


@router.post("/logout")
async def logout(
    body: Optional[LogoutRequest] = Body(default=None),
    token: Optional[str] = Depends(get_request_token),
    use_case: LogoutUseCase = Depends(get_logout_use_case),
) -> EmptyResponse:
    await use_case.execute((body.jwt if body else None) or token)
    return EmptyResponse(meta=SimpleMeta())
