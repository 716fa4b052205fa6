from datetime import datetime, timezone
from supabase import Client
from backoffice.modules.addresses.schemas import AddressFields, AddressResponse
from backoffice.core.exceptions import BackofficeError, DatastoreError, NotFound
from typing import NamedTuple, Optional
import logging

logger = logging.getLogger(__name__)


class ResolvedAddress(NamedTuple):
    address_id: Optional[str]
    was_created: bool


class AddressResolver:
    """Persists the address half of an entity form before the entity itself is written."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def resolve(self, existing_id: Optional[str], fields: Optional[AddressFields], actor_id: str) -> ResolvedAddress:
        """Update the existing address or insert a new one; no-op while no country is chosen."""
        if fields is None or not fields.country_id:
            return ResolvedAddress(existing_id, False)

        data = fields.model_dump()
        try:
            if existing_id:
                data["updated_by"] = actor_id
                data["updated_at"] = datetime.now(timezone.utc).isoformat()
                result = self.supabase.table("addresses")\
                    .update(data)\
                    .eq("id", existing_id)\
                    .execute()
                if not result.data:
                    raise NotFound("Address not found")
                return ResolvedAddress(existing_id, False)

            data["created_by"] = actor_id
            data["updated_by"] = actor_id
            result = self.supabase.table("addresses").insert(data).execute()
            if not result.data:
                raise DatastoreError("Failed to create address")
            new_id = result.data[0]["id"]
            logger.info("Created address %s", new_id)
            return ResolvedAddress(new_id, True)
        except BackofficeError:
            raise
        except Exception as e:
            raise DatastoreError(str(e)) from e

    def delete(self, address_id: str) -> bool:
        try:
            result = self.supabase.table("addresses")\
                .delete()\
                .eq("id", address_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            raise DatastoreError(str(e)) from e


class AddressService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_address(self, address_id: str) -> AddressResponse:
        """Get address with its country"""
        try:
            result = self.supabase.table("addresses")\
                .select("*, countries(*)")\
                .eq("id", address_id)\
                .maybe_single()\
                .execute()
            if result is None or not result.data:
                raise NotFound("Address not found")
            return AddressResponse(**result.data)
        except BackofficeError:
            raise
        except Exception as e:
            raise DatastoreError(str(e)) from e
