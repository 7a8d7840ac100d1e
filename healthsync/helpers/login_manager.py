from fastapi import Depends

from healthsync.core.policy import Principal
from healthsync.helpers.enums import UserRole
from healthsync.helpers.exception_handler import ForbiddenException
from healthsync.services.srv_user import UserService


def login_required(principal: Principal = Depends(UserService.get_current_principal)) -> Principal:
    return principal


class PermissionRequired:
    def __init__(self, *roles: UserRole):
        self.roles = roles

    def __call__(self, principal: Principal = Depends(login_required)) -> Principal:
        if self.roles and principal.role not in self.roles:
            allowed = ', '.join(role.value for role in self.roles)
            raise ForbiddenException(f'Only {allowed} accounts can access this api')
        return principal
