import hashlib
import logging
import time
from supabase import Client
from backoffice.modules.auth.schemas import LoginRequest, TokenResponse
from backoffice.core.exceptions import Unauthenticated, BackofficeError
from backoffice.core.session import Session
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise Unauthenticated("Invalid credentials")

            return TokenResponse(
                access_token=auth_response.session.access_token,
                token_type="bearer",
                user_id=auth_response.user.id,
                email=auth_response.user.email or login_data.email
            )
        except BackofficeError:
            raise
        except Exception as e:
            logger.warning("Login failed for %s: %s", login_data.email, e)
            raise Unauthenticated("Invalid email or password")

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            # Supabase Auth tokens are stateless JWTs; the token expires on its own
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning("Sign out failed: %s", e)
            return False

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        if not token:
            raise Unauthenticated("User access token not found")
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise Unauthenticated("Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except BackofficeError:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise Unauthenticated("Invalid or expired token")
            raise Unauthenticated("Authentication failed")

    def resolve_role(self, user_data: Dict[str, Any]) -> Optional[str]:
        """Role label from app_metadata (access token hook), else from user_roles."""
        app_metadata = user_data.get("app_metadata") or {}
        if app_metadata.get("user_role"):
            return app_metadata["user_role"]
        if app_metadata.get("type") == "super_user":
            return "admin"
        try:
            result = self.supabase.table("user_roles")\
                .select("role")\
                .eq("user_id", user_data["id"])\
                .execute()
        except Exception as e:
            logger.error(f"Error getting user roles: {e}")
            return None
        roles = [r["role"] for r in result.data or []]
        if "admin" in roles:
            return "admin"
        return roles[0] if roles else None

    def build_session(self, token: str) -> Session:
        user_data = self.get_current_user(token)
        return Session(
            user_id=user_data["id"],
            access_token=token,
            email=user_data.get("email"),
            role=self.resolve_role(user_data),
            app_metadata=user_data.get("app_metadata") or {},
        )
