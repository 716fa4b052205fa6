from datetime import datetime, timezone
from supabase import Client
from backoffice.modules.reference.schemas import (
    CountryCreate, CountryUpdate, CountryResponse, NamedItemCreate, NamedItemResponse
)
from backoffice.core.exceptions import BackofficeError, DatastoreError, NotFound
from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)

# Tables holding a single audited "name" column
NAMED_TABLES = {
    "working_areas": "Working area",
    "store_categories": "Store category",
}


class ReferenceService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_countries(self) -> List[CountryResponse]:
        return [CountryResponse(**row) for row in self._list("countries")]

    def create_country(self, data: CountryCreate) -> CountryResponse:
        row = self._insert("countries", {
            "name": data.name,
            "code": data.code.upper(),
            "phone_code": data.phone_code
        })
        return CountryResponse(**row)

    def update_country(self, country_id: str, data: CountryUpdate) -> CountryResponse:
        update_data = {}
        if data.name:
            update_data["name"] = data.name
        if data.code:
            update_data["code"] = data.code.upper()
        if data.phone_code:
            update_data["phone_code"] = data.phone_code
        return CountryResponse(**self._update("countries", country_id, update_data, "Country"))

    def delete_country(self, country_id: str) -> bool:
        return self._delete("countries", country_id, "Country")

    def list_named(self, table: str) -> List[NamedItemResponse]:
        return [NamedItemResponse(**row) for row in self._list(table)]

    def create_named(self, table: str, data: NamedItemCreate, user_id: str) -> NamedItemResponse:
        row = self._insert(table, {
            "name": data.name,
            "created_by": user_id,
            "updated_by": user_id
        })
        return NamedItemResponse(**row)

    def update_named(self, table: str, item_id: str, data: NamedItemCreate, user_id: str) -> NamedItemResponse:
        row = self._update(table, item_id, {
            "name": data.name,
            "updated_by": user_id,
            "updated_at": datetime.now(timezone.utc).isoformat()
        }, NAMED_TABLES[table])
        return NamedItemResponse(**row)

    def delete_named(self, table: str, item_id: str) -> bool:
        return self._delete(table, item_id, NAMED_TABLES[table])

    def _list(self, table: str) -> List[Dict[str, Any]]:
        try:
            result = self.supabase.table(table)\
                .select("*")\
                .order("name")\
                .execute()
            return result.data or []
        except Exception as e:
            raise DatastoreError(str(e)) from e

    def _insert(self, table: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            result = self.supabase.table(table).insert(data).execute()
            if not result.data:
                raise DatastoreError(f"Failed to insert into {table}")
            return result.data[0]
        except BackofficeError:
            raise
        except Exception as e:
            raise DatastoreError(str(e)) from e

    def _update(self, table: str, item_id: str, data: Dict[str, Any], label: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table(table)\
                .update(data)\
                .eq("id", item_id)\
                .execute()
            if not result.data:
                raise NotFound(f"{label} not found")
            return result.data[0]
        except BackofficeError:
            raise
        except Exception as e:
            raise DatastoreError(str(e)) from e

    def _delete(self, table: str, item_id: str, label: str) -> bool:
        try:
            result = self.supabase.table(table)\
                .delete()\
                .eq("id", item_id)\
                .execute()
            if not result.data:
                raise NotFound(f"{label} not found")
            return True
        except BackofficeError:
            raise
        except Exception as e:
            raise DatastoreError(str(e)) from e
