import jwt
import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import ValidationError

from healthsync.core.policy import AccessPolicy, Principal
from healthsync.core.security import verify_password, get_password_hash, decode_access_token
from healthsync.helpers.enums import UserRole, Operation, ResourceType
from healthsync.helpers.exception_handler import (
    UnauthenticatedException, NotFoundException, ValidateException
)
from healthsync.models.model_user import User
from healthsync.repository.repo_user import UserRepository
from healthsync.repository.repo_pairing import PairingRepository
from healthsync.schemas.sche_token import TokenPayload
from healthsync.schemas.sche_user import UserItemResponse, UserRegisterRequest, UserUpdateMeRequest

logger = logging.getLogger(__name__)

reusable_oauth2 = HTTPBearer(
    scheme_name='Authorization',
    auto_error=False
)


def principal_from_user(user: User) -> Principal:
    return Principal(id=user.id, role=UserRole(user.role), email=user.email, full_name=user.full_name)


class UserService:
    def __init__(self, user_repo: UserRepository = Depends(), pairing_repo: PairingRepository = Depends()):
        self.user_repo = user_repo
        self.policy = AccessPolicy(is_paired=pairing_repo.is_linked)

    def authenticate(self, *, email: str, password: str) -> Optional[User]:
        user = self.user_repo.get_by_email(email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    @staticmethod
    def resolve_principal(token: Optional[str], user_repo: UserRepository) -> Principal:
        """Map a bearer token to the principal it was issued for. Re-read from the store on every call."""
        if not token:
            raise UnauthenticatedException('Not authenticated')
        try:
            token_data = TokenPayload(**decode_access_token(token))
            user_id = UUID(token_data.user_id)
        except (jwt.PyJWTError, ValidationError, TypeError, ValueError) as e:
            logger.warning(f"Credential validation failed: {e}")
            raise UnauthenticatedException()

        user = user_repo.get_by_id(user_id)
        if not user or not user.is_active:
            logger.warning(f"Token for unknown or inactive user: {user_id}")
            raise UnauthenticatedException()
        return principal_from_user(user)

    @staticmethod
    def get_current_principal(
        http_authorization_credentials: Optional[HTTPAuthorizationCredentials] = Depends(reusable_oauth2),
        user_repo: UserRepository = Depends()
    ) -> Principal:
        token = http_authorization_credentials.credentials if http_authorization_credentials else None
        return UserService.resolve_principal(token, user_repo)

    def register_user(self, data: UserRegisterRequest) -> UserItemResponse:
        if self.user_repo.get_by_email(data.email):
            raise ValidateException('Email already exists')

        new_user = User(
            full_name=data.full_name.strip(),
            email=data.email,
            hashed_password=get_password_hash(data.password),
            is_active=True,
            role=data.role.value,
        )
        created_user = self.user_repo.create(new_user)
        logger.info(f"User registered: {created_user.id} as {created_user.role}")
        return UserItemResponse.model_validate(created_user)

    def get_user(self, user_id: UUID, principal: Principal) -> UserItemResponse:
        user = self.user_repo.get_by_id(user_id)
        # absent and not-yours look the same
        if not self.policy.is_allowed(principal, Operation.READ, ResourceType.USER, user):
            raise NotFoundException('User not found')
        return UserItemResponse.model_validate(user)

    def update_me(self, data: UserUpdateMeRequest, principal: Principal) -> UserItemResponse:
        user = self.user_repo.get_by_id(principal.id)
        self.policy.authorize(principal, Operation.UPDATE, ResourceType.USER, user)

        if data.email is not None:
            exist_user = self.user_repo.get_by_email(data.email)
            if exist_user and exist_user.id != user.id:
                raise ValidateException('Email already exists')

        user.full_name = user.full_name if data.full_name is None else data.full_name.strip()
        user.email = user.email if data.email is None else data.email
        if data.password:
            user.hashed_password = get_password_hash(data.password)

        return UserItemResponse.model_validate(self.user_repo.update(user))
