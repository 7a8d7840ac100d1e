from typing import Any, List
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from healthsync.core.policy import Principal
from healthsync.helpers.enums import ResourceType, ChangeEvent
from healthsync.helpers.login_manager import login_required
from healthsync.schemas.sche_base import DataResponse
from healthsync.schemas.sche_message import MessageCreateRequest, MessageResponse
from healthsync.services.srv_message import MessageService
from healthsync.services.ws_manager import change_feed

router = APIRouter()


@router.post('', response_model=DataResponse[MessageResponse])
def send_message(
    data: MessageCreateRequest,
    background_tasks: BackgroundTasks,
    message_service: MessageService = Depends(),
    principal: Principal = Depends(login_required)
) -> Any:
    message = message_service.send(data, principal)
    background_tasks.add_task(change_feed.publish, ResourceType.MESSAGE, ChangeEvent.INSERT, message)
    return DataResponse().success_response(data=message)


@router.get('/thread', response_model=DataResponse[List[MessageResponse]])
def get_thread(
    user_a: UUID = Query(...),
    user_b: UUID = Query(...),
    message_service: MessageService = Depends(),
    principal: Principal = Depends(login_required)
) -> Any:
    return DataResponse().success_response(data=message_service.thread(user_a, user_b, principal))


@router.get('/thread/{counterpart_id}', response_model=DataResponse[List[MessageResponse]])
def get_thread_with(
    counterpart_id: UUID,
    message_service: MessageService = Depends(),
    principal: Principal = Depends(login_required)
) -> Any:
    return DataResponse().success_response(data=message_service.thread(principal.id, counterpart_id, principal))
