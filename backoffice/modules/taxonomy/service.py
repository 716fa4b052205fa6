from datetime import datetime, timezone
from supabase import Client
from backoffice.modules.taxonomy.schemas import (
    CategoryCreate, SubcategoryCreate, ServiceTypeCreate, TaxonomyItemUpdate,
    TaxonomyItemResponse, SubcategoryNode, CategoryNode
)
from backoffice.core.exceptions import BackofficeError, DatastoreError, NotFound
from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)

LABELS = {
    "categories": "Category",
    "subcategories": "Subcategory",
    "service_types": "Service type",
}


class TaxonomyService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_tree(self) -> List[CategoryNode]:
        """Categories -> subcategories -> service types, each level ordered by name"""
        try:
            categories = self._all("categories")
            subcategories = self._all("subcategories")
            service_types = self._all("service_types")
        except Exception as e:
            raise DatastoreError(str(e)) from e

        tree = []
        for category in categories:
            children = []
            for sub in subcategories:
                if sub.get("category_id") != category["id"]:
                    continue
                types = [TaxonomyItemResponse(**t) for t in service_types if t.get("subcategory_id") == sub["id"]]
                children.append(SubcategoryNode(**sub, service_types=types))
            tree.append(CategoryNode(**category, subcategories=children))
        return tree

    def create_category(self, data: CategoryCreate, user_id: str) -> TaxonomyItemResponse:
        return self._create("categories", {"name": data.name}, user_id)

    def create_subcategory(self, data: SubcategoryCreate, user_id: str) -> TaxonomyItemResponse:
        self._require("categories", data.category_id)
        return self._create("subcategories", {"name": data.name, "category_id": data.category_id}, user_id)

    def create_service_type(self, data: ServiceTypeCreate, user_id: str) -> TaxonomyItemResponse:
        self._require("subcategories", data.subcategory_id)
        return self._create("service_types", {"name": data.name, "subcategory_id": data.subcategory_id}, user_id)

    def rename(self, table: str, item_id: str, data: TaxonomyItemUpdate, user_id: str) -> TaxonomyItemResponse:
        try:
            result = self.supabase.table(table)\
                .update({
                    "name": data.name,
                    "updated_by": user_id,
                    "updated_at": datetime.now(timezone.utc).isoformat()
                })\
                .eq("id", item_id)\
                .execute()
            if not result.data:
                raise NotFound(f"{LABELS[table]} not found")
            return TaxonomyItemResponse(**result.data[0])
        except BackofficeError:
            raise
        except Exception as e:
            raise DatastoreError(str(e)) from e

    def delete_category(self, category_id: str) -> bool:
        """Delete category with its subcategories and their service types"""
        try:
            subs = self.supabase.table("subcategories")\
                .select("id")\
                .eq("category_id", category_id)\
                .execute()
            sub_ids = [s["id"] for s in subs.data or []]
            if sub_ids:
                self.supabase.table("service_types")\
                    .delete()\
                    .in_("subcategory_id", sub_ids)\
                    .execute()
                self.supabase.table("subcategories")\
                    .delete()\
                    .eq("category_id", category_id)\
                    .execute()
            return self._delete("categories", category_id)
        except BackofficeError:
            raise
        except Exception as e:
            raise DatastoreError(str(e)) from e

    def delete_subcategory(self, subcategory_id: str) -> bool:
        try:
            self.supabase.table("service_types")\
                .delete()\
                .eq("subcategory_id", subcategory_id)\
                .execute()
            return self._delete("subcategories", subcategory_id)
        except BackofficeError:
            raise
        except Exception as e:
            raise DatastoreError(str(e)) from e

    def delete_service_type(self, service_type_id: str) -> bool:
        try:
            return self._delete("service_types", service_type_id)
        except BackofficeError:
            raise
        except Exception as e:
            raise DatastoreError(str(e)) from e

    def _all(self, table: str) -> List[Dict[str, Any]]:
        return self.supabase.table(table).select("*").order("name").execute().data or []

    def _require(self, table: str, item_id: str):
        try:
            result = self.supabase.table(table)\
                .select("id")\
                .eq("id", item_id)\
                .execute()
        except Exception as e:
            raise DatastoreError(str(e)) from e
        if not result.data:
            raise NotFound(f"{LABELS[table]} not found")

    def _create(self, table: str, data: Dict[str, Any], user_id: str) -> TaxonomyItemResponse:
        try:
            data.update({"created_by": user_id, "updated_by": user_id})
            result = self.supabase.table(table).insert(data).execute()
            if not result.data:
                raise DatastoreError(f"Failed to create {LABELS[table].lower()}")
            return TaxonomyItemResponse(**result.data[0])
        except BackofficeError:
            raise
        except Exception as e:
            raise DatastoreError(str(e)) from e

    def _delete(self, table: str, item_id: str) -> bool:
        result = self.supabase.table(table)\
            .delete()\
            .eq("id", item_id)\
            .execute()
        if not result.data:
            raise NotFound(f"{LABELS[table]} not found")
        logger.info("Deleted %s %s", table, item_id)
        return True
