from fastapi import APIRouter, Depends
from backoffice.database.supabase_client import get_supabase
from backoffice.modules.reference.schemas import (
    CountryCreate, CountryUpdate, CountryResponse, NamedItemCreate, NamedItemResponse
)
from backoffice.modules.reference.service import ReferenceService
from backoffice.core.dependencies import require_capability
from backoffice.core.session import Session
from supabase import Client
from typing import List

router = APIRouter(prefix="/reference", tags=["reference"])


def get_reference_service(supabase: Client = Depends(get_supabase)) -> ReferenceService:
    return ReferenceService(supabase)


@router.get("/countries", response_model=List[CountryResponse])
async def list_countries(
    session: Session = Depends(require_capability("can_read")),
    service: ReferenceService = Depends(get_reference_service)
):
    return service.list_countries()


@router.post("/countries", response_model=CountryResponse, status_code=201)
async def create_country(
    data: CountryCreate,
    session: Session = Depends(require_capability("can_manage_taxonomy")),
    service: ReferenceService = Depends(get_reference_service)
):
    """Create a country; the ISO code is stored upper-case"""
    return service.create_country(data)


@router.put("/countries/{country_id}", response_model=CountryResponse)
async def update_country(
    country_id: str,
    data: CountryUpdate,
    session: Session = Depends(require_capability("can_manage_taxonomy")),
    service: ReferenceService = Depends(get_reference_service)
):
    return service.update_country(country_id, data)


@router.delete("/countries/{country_id}", status_code=204)
async def delete_country(
    country_id: str,
    session: Session = Depends(require_capability("can_manage_taxonomy")),
    service: ReferenceService = Depends(get_reference_service)
):
    service.delete_country(country_id)
    return None


def _register_named(path: str, table: str):
    """List/create/rename/delete routes for a name-only reference table."""

    @router.get(f"/{path}", response_model=List[NamedItemResponse], name=f"list_{table}")
    async def list_items(
        session: Session = Depends(require_capability("can_read")),
        service: ReferenceService = Depends(get_reference_service)
    ):
        return service.list_named(table)

    @router.post(f"/{path}", response_model=NamedItemResponse, status_code=201, name=f"create_{table}")
    async def create_item(
        data: NamedItemCreate,
        session: Session = Depends(require_capability("can_manage_taxonomy")),
        service: ReferenceService = Depends(get_reference_service)
    ):
        return service.create_named(table, data, session.user_id)

    @router.put(f"/{path}/{{item_id}}", response_model=NamedItemResponse, name=f"update_{table}")
    async def update_item(
        item_id: str,
        data: NamedItemCreate,
        session: Session = Depends(require_capability("can_manage_taxonomy")),
        service: ReferenceService = Depends(get_reference_service)
    ):
        return service.update_named(table, item_id, data, session.user_id)

    @router.delete(f"/{path}/{{item_id}}", status_code=204, name=f"delete_{table}")
    async def delete_item(
        item_id: str,
        session: Session = Depends(require_capability("can_manage_taxonomy")),
        service: ReferenceService = Depends(get_reference_service)
    ):
        service.delete_named(table, item_id)
        return None


_register_named("working-areas", "working_areas")
_register_named("store-categories", "store_categories")
