from fastapi import APIRouter, Depends
from backoffice.database.supabase_client import get_supabase
from backoffice.modules.addresses.schemas import AddressResponse
from backoffice.modules.addresses.service import AddressService
from backoffice.core.dependencies import require_capability
from backoffice.core.session import Session
from supabase import Client

router = APIRouter(prefix="/addresses", tags=["addresses"])


def get_address_service(supabase: Client = Depends(get_supabase)) -> AddressService:
    return AddressService(supabase)


@router.get("/{address_id}", response_model=AddressResponse)
async def get_address(
    address_id: str,
    session: Session = Depends(require_capability("can_read")),
    service: AddressService = Depends(get_address_service)
):
    """Get address with its country"""
    return service.get_address(address_id)
