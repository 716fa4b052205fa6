from fastapi import APIRouter, Body, Depends, Security
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import ValidationError as PydanticValidationError
from backoffice.database.supabase_client import get_service_supabase
from backoffice.modules.auth.service import AuthService
from backoffice.modules.entities.registry import get_spec_by_slug
from backoffice.modules.entities.schemas import DeletePayload
from backoffice.modules.functions.service import PrivilegedEntityMutator
from backoffice.core.dependencies import get_auth_service
from backoffice.core.exceptions import BackofficeError, Unauthenticated
from backoffice.core.session import Capabilities
from supabase import Client
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["functions"])

optional_bearer = HTTPBearer(auto_error=False)

_OPERATIONS = {
    "create": ("can_create", "created"),
    "update": ("can_update", "updated"),
    "delete": ("can_delete", "deleted"),
}


def get_mutator(supabase: Client = Depends(get_service_supabase)) -> PrivilegedEntityMutator:
    return PrivilegedEntityMutator(supabase)


def _error(message: str, status_code: int = 400) -> JSONResponse:
    if not 400 <= status_code < 500:
        status_code = 400
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/{function_name}")
async def invoke_function(
    function_name: str,
    body: Dict[str, Any] = Body(...),
    credentials: Optional[HTTPAuthorizationCredentials] = Security(optional_bearer),
    auth_service: AuthService = Depends(get_auth_service),
    mutator: PrivilegedEntityMutator = Depends(get_mutator),
):
    """create-/update-/delete-<entity> privileged procedures; failures answer {"error": message}."""
    operation, _, slug = function_name.partition("-")
    spec = get_spec_by_slug(slug)
    if operation not in _OPERATIONS or spec is None:
        return _error(f"Unknown function: {function_name}", 404)
    capability, verb = _OPERATIONS[operation]

    try:
        if credentials is None:
            raise Unauthenticated("Missing bearer token")
        session = auth_service.build_session(credentials.credentials).ensure_valid()
        Capabilities.for_role(session.role).require(capability)

        if operation == "create":
            payload = spec.create_model.model_validate(body).model_dump(mode="json")
            row = mutator.create(spec, payload, actor_id=session.user_id)
        elif operation == "update":
            parsed = spec.update_model.model_validate(body)
            payload = parsed.model_dump(mode="json", exclude_unset=True)
            row = mutator.update(spec, parsed.id, payload, actor_id=session.user_id)
        else:
            mutator.delete(spec, DeletePayload.model_validate(body).id)
            return {"message": f"{spec.label} {verb} successfully"}
    except PydanticValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        return _error(f"Invalid payload: {', '.join(fields)}")
    except BackofficeError as e:
        logger.warning("Function %s failed: %s", function_name, e.message)
        return _error(e.message, e.status_code)

    return {"message": f"{spec.label} {verb} successfully", spec.response_key: row}
