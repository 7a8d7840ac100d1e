from datetime import date
from typing import Any, List, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from healthsync.core.policy import Principal
from healthsync.helpers.enums import UserRole, HealthMetric, ResourceType, ChangeEvent
from healthsync.helpers.login_manager import login_required, PermissionRequired
from healthsync.schemas.sche_base import DataResponse
from healthsync.schemas.sche_health_log import (
    HealthLogCreateRequest, HealthLogResponse, HealthSummaryResponse, HealthStatsResponse
)
from healthsync.services.srv_health_log import HealthLogService
from healthsync.services.ws_manager import change_feed

router = APIRouter()


@router.post('', response_model=DataResponse[HealthLogResponse])
def append_health_log(
    data: HealthLogCreateRequest,
    background_tasks: BackgroundTasks,
    health_log_service: HealthLogService = Depends(),
    principal: Principal = Depends(PermissionRequired(UserRole.PATIENT))
) -> Any:
    health_log = health_log_service.append(data, principal)
    background_tasks.add_task(change_feed.publish, ResourceType.HEALTH_LOG, ChangeEvent.INSERT, health_log)
    return DataResponse().success_response(data=health_log)


@router.get('/me', response_model=DataResponse[List[HealthLogResponse]])
def get_my_history(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    q: Optional[str] = Query(None, description="Text or keywords such as 'low sleep', 'inactive'"),
    health_log_service: HealthLogService = Depends(),
    principal: Principal = Depends(PermissionRequired(UserRole.PATIENT))
) -> Any:
    logs = health_log_service.history(principal.id, principal, start_date=start_date, end_date=end_date, query=q)
    return DataResponse().success_response(data=logs)


@router.get('/patients/{patient_id}', response_model=DataResponse[List[HealthLogResponse]])
def get_patient_history(
    patient_id: UUID,
    limit: Optional[int] = Query(None, ge=1, le=1000),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    q: Optional[str] = Query(None),
    health_log_service: HealthLogService = Depends(),
    principal: Principal = Depends(login_required)
) -> Any:
    logs = health_log_service.history(patient_id, principal, limit=limit, start_date=start_date,
                                      end_date=end_date, query=q)
    return DataResponse().success_response(data=logs)


@router.get('/patients/{patient_id}/summary', response_model=DataResponse[HealthSummaryResponse])
def get_patient_summary(
    patient_id: UUID,
    health_log_service: HealthLogService = Depends(),
    principal: Principal = Depends(login_required)
) -> Any:
    return DataResponse().success_response(data=health_log_service.summary(patient_id, principal))


@router.get('/patients/{patient_id}/stats', response_model=DataResponse[HealthStatsResponse])
def get_patient_stats(
    patient_id: UUID,
    metric: HealthMetric = Query(HealthMetric.STEPS),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    q: Optional[str] = Query(None),
    health_log_service: HealthLogService = Depends(),
    principal: Principal = Depends(login_required)
) -> Any:
    stats = health_log_service.stats(patient_id, metric, principal, start_date=start_date,
                                     end_date=end_date, query=q)
    return DataResponse().success_response(data=stats)
