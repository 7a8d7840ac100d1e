from typing import Any, List, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from healthsync.core.policy import Principal
from healthsync.helpers.enums import UserRole, CheckupStatus, ResourceType, ChangeEvent
from healthsync.helpers.login_manager import login_required, PermissionRequired
from healthsync.schemas.sche_base import DataResponse
from healthsync.schemas.sche_checkup import (
    CheckupCreateRequest, CheckupUpdateRequest, CheckupStatusRequest, CheckupResponse
)
from healthsync.services.srv_checkup import CheckupService
from healthsync.services.ws_manager import change_feed

router = APIRouter()


@router.get('', response_model=DataResponse[List[CheckupResponse]])
def get_checkups(
    status: Optional[CheckupStatus] = Query(None),
    checkup_service: CheckupService = Depends(),
    principal: Principal = Depends(login_required)
) -> Any:
    return DataResponse().success_response(data=checkup_service.list_checkups(principal, status))


@router.post('', response_model=DataResponse[CheckupResponse])
def create_checkup(
    data: CheckupCreateRequest,
    background_tasks: BackgroundTasks,
    checkup_service: CheckupService = Depends(),
    principal: Principal = Depends(PermissionRequired(UserRole.DOCTOR))
) -> Any:
    checkup = checkup_service.create(data, principal)
    background_tasks.add_task(change_feed.publish, ResourceType.CHECKUP, ChangeEvent.INSERT, checkup)
    return DataResponse().success_response(data=checkup)


@router.put('/{checkup_id}', response_model=DataResponse[CheckupResponse])
def update_checkup(
    checkup_id: UUID,
    data: CheckupUpdateRequest,
    background_tasks: BackgroundTasks,
    checkup_service: CheckupService = Depends(),
    principal: Principal = Depends(PermissionRequired(UserRole.DOCTOR))
) -> Any:
    checkup = checkup_service.update(checkup_id, data, principal)
    background_tasks.add_task(change_feed.publish, ResourceType.CHECKUP, ChangeEvent.UPDATE, checkup)
    return DataResponse().success_response(data=checkup)


@router.put('/{checkup_id}/status', response_model=DataResponse[CheckupResponse])
def set_checkup_status(
    checkup_id: UUID,
    data: CheckupStatusRequest,
    background_tasks: BackgroundTasks,
    checkup_service: CheckupService = Depends(),
    principal: Principal = Depends(PermissionRequired(UserRole.DOCTOR))
) -> Any:
    checkup = checkup_service.set_status(checkup_id, data.status, principal)
    background_tasks.add_task(change_feed.publish, ResourceType.CHECKUP, ChangeEvent.UPDATE, checkup)
    return DataResponse().success_response(data=checkup)
