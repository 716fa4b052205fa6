from fastapi import APIRouter, Depends
from backoffice.database.supabase_client import get_supabase, get_service_supabase
from backoffice.modules.user_roles.schemas import RoleAssign, UserRoleResponse, UserWithRolesResponse
from backoffice.modules.user_roles.service import UserRoleService
from backoffice.core.dependencies import require_capability
from backoffice.core.session import Session
from supabase import Client
from typing import List

router = APIRouter(prefix="/user-roles", tags=["user-roles"])


def get_user_role_service(
    supabase: Client = Depends(get_supabase),
    service_supabase: Client = Depends(get_service_supabase)
) -> UserRoleService:
    return UserRoleService(supabase, service_supabase)


@router.get("", response_model=List[UserWithRolesResponse])
async def list_users(
    session: Session = Depends(require_capability("can_manage_roles")),
    service: UserRoleService = Depends(get_user_role_service)
):
    return service.list_users()


@router.post("", response_model=UserRoleResponse, status_code=201)
async def assign_role(
    data: RoleAssign,
    session: Session = Depends(require_capability("can_manage_roles")),
    service: UserRoleService = Depends(get_user_role_service)
):
    return service.assign_role(data)


@router.delete("/{user_id}/{role}", status_code=204)
async def remove_role(
    user_id: str,
    role: str,
    session: Session = Depends(require_capability("can_manage_roles")),
    service: UserRoleService = Depends(get_user_role_service)
):
    service.remove_role(user_id, role)
    return None
