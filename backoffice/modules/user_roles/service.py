from supabase import Client
from backoffice.modules.user_roles.schemas import RoleAssign, UserRoleResponse, UserWithRolesResponse
from backoffice.config.permissions_config import ROLES
from backoffice.core.exceptions import BackofficeError, DatastoreError, NotFound, ValidationError
from typing import Dict, List
import logging

logger = logging.getLogger(__name__)


class UserRoleService:
    def __init__(self, supabase: Client, service_supabase: Client):
        self.supabase = supabase
        # Listing login accounts needs the service role
        self.service_supabase = service_supabase

    def list_users(self) -> List[UserWithRolesResponse]:
        """Every login account with the role labels assigned to it"""
        try:
            users = self.service_supabase.auth.admin.list_users()
            result = self.supabase.table("user_roles").select("user_id, role").execute()
        except Exception as e:
            raise DatastoreError(str(e)) from e

        roles_by_user: Dict[str, List[str]] = {}
        for row in result.data or []:
            roles_by_user.setdefault(row["user_id"], []).append(row["role"])

        return [
            UserWithRolesResponse(
                id=user.id,
                email=user.email,
                roles=sorted(roles_by_user.get(user.id, []))
            )
            for user in users or []
        ]

    def assign_role(self, data: RoleAssign) -> UserRoleResponse:
        """Assign a role label through the assign_role database function"""
        if data.role not in ROLES:
            raise ValidationError(["role"], f"Unknown role: {data.role}")
        try:
            self.supabase.rpc("assign_role", {
                "target_user_id": data.user_id,
                "role_name": data.role
            }).execute()
            result = self.supabase.table("user_roles")\
                .select("*")\
                .eq("user_id", data.user_id)\
                .eq("role", data.role)\
                .execute()
        except Exception as e:
            raise DatastoreError(str(e)) from e
        if not result.data:
            raise DatastoreError("Failed to assign role")
        logger.info("Assigned role %s to %s", data.role, data.user_id)
        return UserRoleResponse(**result.data[0])

    def remove_role(self, user_id: str, role: str) -> bool:
        try:
            result = self.supabase.table("user_roles")\
                .delete()\
                .eq("user_id", user_id)\
                .eq("role", role)\
                .execute()
            if not result.data:
                raise NotFound("User role not found")
            return True
        except BackofficeError:
            raise
        except Exception as e:
            raise DatastoreError(str(e)) from e
