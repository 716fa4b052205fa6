from fastapi import APIRouter, Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from backoffice.modules.auth.schemas import LoginRequest, TokenResponse, MeResponse
from backoffice.modules.auth.service import AuthService
from backoffice.core.dependencies import get_auth_service, get_session, get_capabilities
from backoffice.core.session import Session, Capabilities

router = APIRouter(prefix="/auth", tags=["auth"])

# Security scheme for JWT Bearer token
security = HTTPBearer()


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=MeResponse)
async def get_current_user(
    session: Session = Depends(get_session),
    capabilities: Capabilities = Depends(get_capabilities),
):
    """Get current authenticated user, role and capabilities (for frontend UI)."""
    return MeResponse(
        id=session.user_id,
        email=session.email,
        role=session.role,
        capabilities=capabilities.as_list(),
    )
