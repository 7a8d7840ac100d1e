import logging
from typing import Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from healthsync.core.policy import Principal
from healthsync.db.base import SessionLocal
from healthsync.helpers.enums import ResourceType
from healthsync.helpers.exception_handler import CustomException
from healthsync.repository.repo_user import UserRepository
from healthsync.services.srv_user import UserService
from healthsync.services.ws_manager import change_feed, ChangeFilter

logger = logging.getLogger(__name__)

router = APIRouter()


def _resolve(token: str) -> Principal:
    db = SessionLocal()
    try:
        return UserService.resolve_principal(token, UserRepository(db))
    finally:
        db.close()


@router.websocket('/ws')
async def subscribe(
    websocket: WebSocket,
    token: str = Query(...),
    table: ResourceType = Query(ResourceType.MESSAGE),
    filter: Optional[str] = Query(None, description="Row filter such as receiver_id=eq.<uuid>")
):
    """
    Change-feed subscription.

    Sends ``{table, event, id, record}`` for each committed insert or update
    the caller is allowed to read. Incoming frames are ignored.
    """
    try:
        principal = await run_in_threadpool(_resolve, token)
    except CustomException as e:
        logger.info(f"Rejected change-feed subscription: {e.message}")
        await websocket.close(code=4401, reason=e.message)
        return

    try:
        change_filter = ChangeFilter.parse(filter)
    except ValueError as e:
        await websocket.close(code=4400, reason=str(e))
        return

    subscription = await change_feed.connect(websocket, principal, table, change_filter)
    if subscription is None:
        return

    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info(f"Change-feed client closed: principal={principal.id}")
    finally:
        await change_feed.disconnect(websocket)
