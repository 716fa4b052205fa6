from supabase import Client
from backoffice.modules.entities.registry import (
    EntitySpec, ENTITY_SPECS, SERVICE_PROVIDER, with_derived_fields
)
from backoffice.modules.entities.schemas import EntityCounts, EntityPage, ServiceProviderStatus
from backoffice.modules.functions.client import FunctionsClient
from backoffice.core.exceptions import BackofficeError, DatastoreError, NotFound, ValidationError
from backoffice.core.listing import DESC, filter_rows, paginate, sort_rows
from backoffice.core.session import Session, Capabilities
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class EntityService:
    def __init__(self, supabase: Client, functions: Optional[FunctionsClient] = None):
        self.supabase = supabase
        self.functions = functions

    def fetch_rows(self, spec: EntitySpec) -> List[Dict[str, Any]]:
        """All rows of the entity table with embedded address, category and join rows."""
        try:
            result = self.supabase.table(spec.table)\
                .select(spec.list_select)\
                .order("created_at", desc=True)\
                .execute()
            return [with_derived_fields(row) for row in result.data or []]
        except Exception as e:
            raise DatastoreError(str(e)) from e

    def list_entities(
        self,
        spec: EntitySpec,
        search: Optional[str] = None,
        sort: str = "created_at",
        direction: str = DESC,
        page: int = 1,
        page_size: int = 10,
    ) -> EntityPage:
        if sort not in spec.sortable_fields:
            raise ValidationError(["sort"], f"Cannot sort by {sort}")
        rows = filter_rows(self.fetch_rows(spec), search, spec.search_values)
        rows = sort_rows(rows, sort, direction)
        result = paginate(rows, page, page_size)
        return EntityPage(
            items=result.items,
            page=result.page,
            page_size=result.page_size,
            total_items=result.total_items,
            total_pages=result.total_pages,
            sort=sort,
            direction=direction,
        )

    def get_entity(self, spec: EntitySpec, entity_id: str) -> Dict[str, Any]:
        """Get one row; association-bearing entities also get their id lists."""
        try:
            result = self.supabase.table(spec.table)\
                .select(spec.list_select)\
                .eq("id", entity_id)\
                .maybe_single()\
                .execute()
            if result is None or not result.data:
                raise NotFound(f"{spec.label} not found")
        except BackofficeError:
            raise
        except Exception as e:
            raise DatastoreError(str(e)) from e
        row = with_derived_fields(result.data)
        for association in spec.associations:
            row[association.payload_key] = [
                link[association.column] for link in row.get(association.table) or []
            ]
        return row

    def delete_entity(self, spec: EntitySpec, entity_id: str, session: Session, capabilities: Capabilities) -> None:
        """Delete through the privileged function so the identity goes with the profile."""
        capabilities.require("can_delete")
        session.ensure_valid()
        self.functions.invoke(spec.function_name("delete"), {"id": entity_id}, session.access_token)
        logger.info("Deleted %s %s", spec.entity_type.value, entity_id)

    def count_entities(self) -> EntityCounts:
        counts = {}
        try:
            for spec in ENTITY_SPECS.values():
                result = self.supabase.table(spec.table)\
                    .select("id", count="exact")\
                    .execute()
                counts[spec.table] = result.count or 0
        except Exception as e:
            raise DatastoreError(str(e)) from e
        return EntityCounts(**counts)

    def search_providers(
        self,
        category_id: Optional[str] = None,
        subcategory_id: Optional[str] = None,
        service_type_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Active service providers offering a service in the chosen category/subcategory/type."""
        try:
            result = self.supabase.table(SERVICE_PROVIDER.table)\
                .select(SERVICE_PROVIDER.list_select)\
                .eq("status", ServiceProviderStatus.ACTIVE.value)\
                .execute()
        except Exception as e:
            raise DatastoreError(str(e)) from e

        providers = [with_derived_fields(row) for row in result.data or []]

        def offers(provider, match) -> bool:
            for link in provider.get("service_provider_types") or []:
                service_type = link.get("service_type") or {}
                if match(service_type):
                    return True
            return False

        if category_id:
            providers = [p for p in providers if offers(
                p, lambda st: ((st.get("subcategory") or {}).get("category") or {}).get("id") == category_id
            )]
        if subcategory_id:
            providers = [p for p in providers if offers(
                p, lambda st: (st.get("subcategory") or {}).get("id") == subcategory_id
            )]
        if service_type_id:
            providers = [p for p in providers if offers(p, lambda st: st.get("id") == service_type_id)]
        return providers
