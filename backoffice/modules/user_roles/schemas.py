from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class RoleAssign(BaseModel):
    user_id: str
    role: str


class UserRoleResponse(BaseModel):
    user_id: str
    role: str
    assigned_by: Optional[str] = None
    created_at: Optional[datetime] = None


class UserWithRolesResponse(BaseModel):
    id: str
    email: Optional[str] = None
    roles: List[str] = []
