from pydantic import BaseModel
from typing import Optional, Dict, Any
from datetime import datetime


class AddressFields(BaseModel):
    country_id: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    street_address: Optional[str] = None
    postal_code: Optional[str] = None
    building_number: Optional[str] = None
    apartment_number: Optional[str] = None
    additional_info: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class AddressResponse(AddressFields):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    countries: Optional[Dict[str, Any]] = None
