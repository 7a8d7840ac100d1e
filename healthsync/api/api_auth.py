import logging
from typing import Any

from fastapi import APIRouter, Depends

from healthsync.core.security import create_access_token
from healthsync.helpers.exception_handler import UnauthenticatedException
from healthsync.schemas.sche_base import DataResponse
from healthsync.schemas.sche_token import Token
from healthsync.schemas.sche_user import UserItemResponse, UserRegisterRequest, LoginRequest
from healthsync.services.srv_user import UserService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post('/login', response_model=DataResponse[Token])
def login_access_token(form_data: LoginRequest, user_service: UserService = Depends()) -> Any:
    user = user_service.authenticate(email=form_data.username, password=form_data.password)
    if not user:
        logger.info(f"Failed login for {form_data.username}")
        raise UnauthenticatedException('Incorrect email or password')
    elif not user.is_active:
        raise UnauthenticatedException('Inactive user')

    return DataResponse().success_response(Token(access_token=create_access_token(user_id=user.id)))


@router.post('/signup', response_model=DataResponse[UserItemResponse])
def register(register_data: UserRegisterRequest, user_service: UserService = Depends()) -> Any:
    return DataResponse().success_response(data=user_service.register_user(register_data))
