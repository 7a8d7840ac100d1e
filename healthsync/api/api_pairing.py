from typing import Any, List, Optional

from fastapi import APIRouter, Depends

from healthsync.core.policy import Principal
from healthsync.helpers.enums import UserRole
from healthsync.helpers.login_manager import login_required, PermissionRequired
from healthsync.schemas.sche_base import DataResponse
from healthsync.schemas.sche_pairing import PairingLinkResponse
from healthsync.schemas.sche_user import UserSummaryResponse
from healthsync.services.srv_pairing import PairingService

router = APIRouter()


@router.get('', response_model=DataResponse[List[PairingLinkResponse]])
def get_links(pairing_service: PairingService = Depends(),
              principal: Principal = Depends(login_required)) -> Any:
    return DataResponse().success_response(data=pairing_service.get_links(principal))


@router.get('/patients', response_model=DataResponse[List[UserSummaryResponse]])
def get_my_patients(pairing_service: PairingService = Depends(),
                    principal: Principal = Depends(PermissionRequired(UserRole.DOCTOR))) -> Any:
    return DataResponse().success_response(data=pairing_service.patients_of(principal))


@router.get('/doctor', response_model=DataResponse[Optional[UserSummaryResponse]])
def get_my_doctor(pairing_service: PairingService = Depends(),
                  principal: Principal = Depends(PermissionRequired(UserRole.PATIENT))) -> Any:
    return DataResponse().success_response(data=pairing_service.doctor_of(principal))
