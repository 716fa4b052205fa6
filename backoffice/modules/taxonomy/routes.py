from fastapi import APIRouter, Depends
from backoffice.database.supabase_client import get_supabase
from backoffice.modules.taxonomy.schemas import (
    CategoryCreate, SubcategoryCreate, ServiceTypeCreate, TaxonomyItemUpdate,
    TaxonomyItemResponse, CategoryNode
)
from backoffice.modules.taxonomy.service import TaxonomyService
from backoffice.core.dependencies import require_capability
from backoffice.core.session import Session
from supabase import Client
from typing import List

router = APIRouter(prefix="/taxonomy", tags=["taxonomy"])


def get_taxonomy_service(supabase: Client = Depends(get_supabase)) -> TaxonomyService:
    return TaxonomyService(supabase)


@router.get("/tree", response_model=List[CategoryNode])
async def get_tree(
    session: Session = Depends(require_capability("can_read")),
    service: TaxonomyService = Depends(get_taxonomy_service)
):
    """Full category hierarchy"""
    return service.get_tree()


@router.post("/categories", response_model=TaxonomyItemResponse, status_code=201)
async def create_category(
    data: CategoryCreate,
    session: Session = Depends(require_capability("can_manage_taxonomy")),
    service: TaxonomyService = Depends(get_taxonomy_service)
):
    return service.create_category(data, session.user_id)


@router.put("/categories/{category_id}", response_model=TaxonomyItemResponse)
async def rename_category(
    category_id: str,
    data: TaxonomyItemUpdate,
    session: Session = Depends(require_capability("can_manage_taxonomy")),
    service: TaxonomyService = Depends(get_taxonomy_service)
):
    return service.rename("categories", category_id, data, session.user_id)


@router.delete("/categories/{category_id}", status_code=204)
async def delete_category(
    category_id: str,
    session: Session = Depends(require_capability("can_manage_taxonomy")),
    service: TaxonomyService = Depends(get_taxonomy_service)
):
    """Delete category together with its subcategories and service types"""
    service.delete_category(category_id)
    return None


@router.post("/subcategories", response_model=TaxonomyItemResponse, status_code=201)
async def create_subcategory(
    data: SubcategoryCreate,
    session: Session = Depends(require_capability("can_manage_taxonomy")),
    service: TaxonomyService = Depends(get_taxonomy_service)
):
    return service.create_subcategory(data, session.user_id)


@router.put("/subcategories/{subcategory_id}", response_model=TaxonomyItemResponse)
async def rename_subcategory(
    subcategory_id: str,
    data: TaxonomyItemUpdate,
    session: Session = Depends(require_capability("can_manage_taxonomy")),
    service: TaxonomyService = Depends(get_taxonomy_service)
):
    return service.rename("subcategories", subcategory_id, data, session.user_id)


@router.delete("/subcategories/{subcategory_id}", status_code=204)
async def delete_subcategory(
    subcategory_id: str,
    session: Session = Depends(require_capability("can_manage_taxonomy")),
    service: TaxonomyService = Depends(get_taxonomy_service)
):
    service.delete_subcategory(subcategory_id)
    return None


@router.post("/service-types", response_model=TaxonomyItemResponse, status_code=201)
async def create_service_type(
    data: ServiceTypeCreate,
    session: Session = Depends(require_capability("can_manage_taxonomy")),
    service: TaxonomyService = Depends(get_taxonomy_service)
):
    return service.create_service_type(data, session.user_id)


@router.put("/service-types/{service_type_id}", response_model=TaxonomyItemResponse)
async def rename_service_type(
    service_type_id: str,
    data: TaxonomyItemUpdate,
    session: Session = Depends(require_capability("can_manage_taxonomy")),
    service: TaxonomyService = Depends(get_taxonomy_service)
):
    return service.rename("service_types", service_type_id, data, session.user_id)


@router.delete("/service-types/{service_type_id}", status_code=204)
async def delete_service_type(
    service_type_id: str,
    session: Session = Depends(require_capability("can_manage_taxonomy")),
    service: TaxonomyService = Depends(get_taxonomy_service)
):
    service.delete_service_type(service_type_id)
    return None
