from enum import Enum
from pydantic import BaseModel, EmailStr
from typing import Optional, List, Dict, Any
from backoffice.modules.addresses.schemas import AddressFields


class ServiceProviderStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PAUSED = "paused"


# Profile fields: the columns each privileged function writes on create/update

class OperatorProfile(BaseModel):
    first_name: str = ""
    last_name: str = ""
    phone_number: Optional[str] = None
    working_area: Optional[str] = None
    date_of_birth: Optional[str] = None
    description: Optional[str] = None
    address_id: Optional[str] = None


class FieldOperatorProfile(OperatorProfile):
    referenced_by: Optional[str] = None
    domain: Optional[str] = None


class ServiceProviderProfile(BaseModel):
    first_name: str = ""
    last_name: str = ""
    phone_number: Optional[str] = None
    working_area_diameter: float = 0
    date_of_birth: Optional[str] = None
    description: Optional[str] = None
    referenced_by: Optional[str] = None
    is_company: bool = False
    number_of_employees: int = 0
    status: ServiceProviderStatus = ServiceProviderStatus.INACTIVE
    address_id: Optional[str] = None
    file_url: Optional[str] = None


class StoreProfile(BaseModel):
    name: str = ""
    owner_first_name: Optional[str] = None
    owner_last_name: Optional[str] = None
    category_id: Optional[str] = None
    phone_number: Optional[str] = None
    description: Optional[str] = None
    address_id: Optional[str] = None


# Privileged function payloads

class AccountCredentials(BaseModel):
    email: EmailStr
    password: str


class ServiceProviderAssociations(BaseModel):
    service_type_ids: List[str] = []
    working_area_ids: List[str] = []


class OperatorCreatePayload(OperatorProfile, AccountCredentials):
    pass


class OperatorUpdatePayload(OperatorProfile):
    id: str


class FieldOperatorCreatePayload(FieldOperatorProfile, AccountCredentials):
    pass


class FieldOperatorUpdatePayload(FieldOperatorProfile):
    id: str


class ServiceProviderCreatePayload(ServiceProviderProfile, ServiceProviderAssociations, AccountCredentials):
    pass


class ServiceProviderUpdatePayload(ServiceProviderProfile, ServiceProviderAssociations):
    id: str


class StoreCreatePayload(StoreProfile, AccountCredentials):
    pass


class StoreUpdatePayload(StoreProfile):
    id: str


class DeletePayload(BaseModel):
    id: str


# Admin API

class EntitySubmission(BaseModel):
    """Form submission: profile fields (plus email/password on create and association ids) and the address form."""
    profile: Dict[str, Any]
    address: Optional[AddressFields] = None


class EntityPage(BaseModel):
    items: List[Dict[str, Any]]
    page: int
    page_size: int
    total_items: int
    total_pages: int
    sort: str
    direction: str


class EntityCounts(BaseModel):
    operators: int = 0
    field_operators: int = 0
    service_providers: int = 0
    stores: int = 0
