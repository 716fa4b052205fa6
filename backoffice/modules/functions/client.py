import httpx
from backoffice.config import settings
from backoffice.core.exceptions import RemoteProcedureFailure
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class FunctionsClient:
    """Invokes the privileged functions over HTTP with the caller's bearer token."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.get_functions_base_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.functions_timeout
        self._http_client = http_client

    def invoke(self, name: str, payload: Dict[str, Any], access_token: str) -> Dict[str, Any]:
        """POST the payload; any non-2xx answer becomes RemoteProcedureFailure with the {error} message."""
        url = f"{self.base_url}/{name}"
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {access_token}",
        }
        try:
            if self._http_client is not None:
                response = self._http_client.post(url, json=payload, headers=headers)
            else:
                kwargs = {"timeout": self.timeout} if self.timeout is not None else {}
                with httpx.Client(**kwargs) as client:
                    response = client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Function %s unreachable: %s", name, e)
            raise RemoteProcedureFailure(f"Failed to call {name}: {e}") from e

        if response.is_success:
            try:
                return response.json()
            except ValueError:
                return {}

        try:
            body = response.json()
            message = body.get("error") if isinstance(body, dict) else None
        except ValueError:
            message = response.text or None
        raise RemoteProcedureFailure(
            message or f"Function {name} failed with status {response.status_code}",
            upstream_status=response.status_code,
        )


def get_functions_client() -> FunctionsClient:
    return FunctionsClient()
