"""Task CRUD endpoints. The owner is always the verified token's subject."""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends

from api_v1.schemas import EmptyResponse, SimpleMeta
from core.dependencies import (
    get_authenticate_use_case,
    get_create_task_use_case,
    get_current_claims,
    get_delete_task_use_case,
    get_request_token,
    get_task_repository,
    get_update_task_use_case,
)
from core.models.token import TokenClaims
from core.repositories.task import TaskRepository
from core.use_cases.authenticate import AuthenticateUseCase
from core.use_cases.create_task import CreateTaskUseCase
from core.use_cases.delete_task import DeleteTaskUseCase
from core.use_cases.update_task import UpdateTaskUseCase

from .schemas import TaskCreateRequest, TaskListResponse, TaskResponse, TaskUpdateRequest, TokenBody

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Tasks"])


@router.get("")
async def list_tasks(
    claims: TokenClaims = Depends(get_current_claims),
    repo: TaskRepository = Depends(get_task_repository),
) -> TaskListResponse:
    tasks = await repo.list(claims.subject)
    return TaskListResponse(meta=SimpleMeta(), payload=tasks)


@router.post("", status_code=201)
async def create_task(
    body: TaskCreateRequest = Body(...),
    token: Optional[str] = Depends(get_request_token),
    authenticate: AuthenticateUseCase = Depends(get_authenticate_use_case),
    use_case: CreateTaskUseCase = Depends(get_create_task_use_case),
) -> TaskResponse:
    claims = await authenticate.execute(body.jwt or token)
    task = await use_case.execute(claims.subject, body.to_fields())
    return TaskResponse(meta=SimpleMeta(), payload=task)


@router.get("/{task_id}")
async def get_task(
    task_id: UUID,
    claims: TokenClaims = Depends(get_current_claims),
    repo: TaskRepository = Depends(get_task_repository),
) -> TaskResponse:
    task = await repo.get(claims.subject, task_id)
    return TaskResponse(meta=SimpleMeta(), payload=task)


@router.api_route("/{task_id}", methods=["POST", "PATCH"])
async def update_task(
    task_id: UUID,
    body: TaskUpdateRequest = Body(...),
    token: Optional[str] = Depends(get_request_token),
    authenticate: AuthenticateUseCase = Depends(get_authenticate_use_case),
    use_case: UpdateTaskUseCase = Depends(get_update_task_use_case),
) -> TaskResponse:
    claims = await authenticate.execute(body.jwt or token)
    logger.debug(
        "Update task request received | task_id=%s | fields=%s",
        task_id,
        sorted(body.to_patch().changes()),
    )
    task = await use_case.execute(claims.subject, task_id, body.to_patch())
    return TaskResponse(meta=SimpleMeta(), payload=task)


@router.delete("/{task_id}")
async def delete_task(
    task_id: UUID,
    body: Optional[TokenBody] = Body(default=None),
    token: Optional[str] = Depends(get_request_token),
    authenticate: AuthenticateUseCase = Depends(get_authenticate_use_case),
    use_case: DeleteTaskUseCase = Depends(get_delete_task_use_case),
) -> EmptyResponse:
    claims = await authenticate.execute((body.jwt if body else None) or token)
    await use_case.execute(claims.subject, task_id)
    return EmptyResponse(meta=SimpleMeta())
