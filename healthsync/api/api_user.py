from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends

from healthsync.core.policy import Principal
from healthsync.helpers.login_manager import login_required
from healthsync.schemas.sche_base import DataResponse
from healthsync.schemas.sche_user import UserItemResponse, UserUpdateMeRequest
from healthsync.services.srv_user import UserService

router = APIRouter()


@router.get("/me", response_model=DataResponse[UserItemResponse])
def detail_me(principal: Principal = Depends(login_required), user_service: UserService = Depends()) -> Any:
    """
    API get detail current User
    """
    return DataResponse().success_response(data=user_service.get_user(principal.id, principal))


@router.put("/me", response_model=DataResponse[UserItemResponse])
def update_me(user_data: UserUpdateMeRequest,
              principal: Principal = Depends(login_required),
              user_service: UserService = Depends()) -> Any:
    """
    API Update current User
    """
    return DataResponse().success_response(data=user_service.update_me(data=user_data, principal=principal))


@router.get("/{user_id}", response_model=DataResponse[UserItemResponse])
def detail(user_id: UUID, principal: Principal = Depends(login_required),
           user_service: UserService = Depends()) -> Any:
    """
    API get Detail User
    """
    return DataResponse().success_response(data=user_service.get_user(user_id, principal))
