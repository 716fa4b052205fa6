"""
Create-or-update saga for entity forms.

One forward sequence (address, then the privileged function) and one
compensating step: when the function call fails and this submission minted
a new address, that address is deleted best-effort. The compensation is not
transactional with the function call; a crash between the failure and the
delete leaves an orphaned address row. Nothing here retries.
"""

from datetime import date
from enum import Enum
from supabase import Client
from pydantic import ValidationError as PydanticValidationError
from backoffice.modules.addresses.schemas import AddressFields
from backoffice.modules.addresses.service import AddressResolver
from backoffice.modules.entities.registry import EntitySpec, get_spec
from backoffice.modules.functions.client import FunctionsClient
from backoffice.core.exceptions import BackofficeError, DatastoreError, NotFound, Unauthenticated, ValidationError
from backoffice.core.session import Session, Capabilities
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class SubmissionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    RESOLVING_ADDRESS = "resolving_address"
    MUTATING = "mutating"
    COMPENSATING_DELETE = "compensating_delete"
    SUCCESS = "success"
    FAILED = "failed"


def validate_profile(spec: EntitySpec, profile_fields: Dict[str, Any], creating: bool) -> Dict[str, Any]:
    """Required fields, date format and enum checks. Returns JSON-ready profile data."""
    invalid: List[str] = []
    for name in spec.required_fields:
        if not str(profile_fields.get(name) or "").strip():
            invalid.append(name)
    if creating:
        for name in ("email", "password"):
            if not str(profile_fields.get(name) or "").strip():
                invalid.append(name)

    date_of_birth = profile_fields.get("date_of_birth")
    if date_of_birth:
        try:
            date.fromisoformat(str(date_of_birth)[:10])
        except ValueError:
            invalid.append("date_of_birth")

    known = {k: v for k, v in profile_fields.items() if k in spec.profile_model.model_fields}
    if known.get("date_of_birth") == "":
        known["date_of_birth"] = None
    try:
        profile = spec.profile_model.model_validate(known).model_dump(mode="json")
    except PydanticValidationError as e:
        invalid.extend(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        profile = {}

    if invalid:
        raise ValidationError(sorted(set(invalid)))
    return profile


class TransactionOrchestrator:
    def __init__(
        self,
        supabase: Client,
        functions: FunctionsClient,
        address_resolver: Optional[AddressResolver] = None,
    ):
        self.supabase = supabase
        self.functions = functions
        self.address_resolver = address_resolver or AddressResolver(supabase)
        self.history: List[SubmissionState] = [SubmissionState.IDLE]

    @property
    def state(self) -> SubmissionState:
        return self.history[-1]

    def _enter(self, state: SubmissionState):
        logger.debug("Submission %s -> %s", self.state.value, state.value)
        self.history.append(state)

    def submit(
        self,
        entity_type,
        entity_id: Optional[str],
        profile_fields: Dict[str, Any],
        address_fields: Optional[AddressFields],
        associations: Optional[Dict[str, List[str]]],
        session: Optional[Session],
        capabilities: Capabilities,
    ) -> Dict[str, Any]:
        """Resolve the address, call the create/update function, compensate a new address on failure."""
        spec = get_spec(entity_type)
        self.history = [SubmissionState.IDLE]
        self._enter(SubmissionState.VALIDATING)
        try:
            if session is None:
                raise Unauthenticated()
            session.ensure_valid()
            capabilities.require("can_update" if entity_id else "can_create")
            profile = validate_profile(spec, profile_fields, creating=entity_id is None)
            existing_address_id = self._current_address_id(spec, entity_id) if entity_id else None

            self._enter(SubmissionState.RESOLVING_ADDRESS)
            address_id, was_created = self.address_resolver.resolve(
                existing_address_id, address_fields, session.user_id
            )
        except BackofficeError:
            self._enter(SubmissionState.FAILED)
            raise

        payload = dict(profile)
        payload["address_id"] = address_id
        for association in spec.associations:
            payload[association.payload_key] = list((associations or {}).get(association.payload_key) or [])

        self._enter(SubmissionState.MUTATING)
        try:
            if entity_id:
                body = self.functions.invoke(
                    spec.function_name("update"), {"id": entity_id, **payload}, session.access_token
                )
            else:
                payload["email"] = profile_fields["email"]
                payload["password"] = profile_fields["password"]
                body = self.functions.invoke(spec.function_name("create"), payload, session.access_token)
        except BackofficeError:
            if was_created:
                self._compensate(address_id)
            self._enter(SubmissionState.FAILED)
            raise

        self._enter(SubmissionState.SUCCESS)
        return body.get(spec.response_key) or {}

    def _current_address_id(self, spec: EntitySpec, entity_id: str) -> Optional[str]:
        try:
            result = self.supabase.table(spec.table)\
                .select("id, address_id")\
                .eq("id", entity_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise DatastoreError(str(e)) from e
        if result is None or not result.data:
            raise NotFound(f"{spec.label} not found")
        return result.data.get("address_id")

    def _compensate(self, address_id: str):
        self._enter(SubmissionState.COMPENSATING_DELETE)
        try:
            self.address_resolver.delete(address_id)
            logger.info("Rolled back newly created address %s", address_id)
        except Exception as e:
            logger.error("Failed to rollback address %s: %s", address_id, e)
