"""
Static description of the four manageable entity types.

Everything that differs between operators, field operators, service
providers and stores (table, role label, privileged function names, the
columns the functions write, join tables, list query and searchable
fields) is declared here, so the orchestrator, the privileged mutator and
the list endpoints stay generic.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type

from pydantic import BaseModel

from backoffice.config.permissions_config import ENTITY_ROLES
from backoffice.modules.entities import schemas


class EntityType(str, Enum):
    OPERATOR = "operator"
    FIELD_OPERATOR = "field_operator"
    SERVICE_PROVIDER = "service_provider"
    STORE = "store"


@dataclass(frozen=True)
class Association:
    """Many-to-many join table keyed by provider_id."""
    table: str
    payload_key: str
    column: str


@dataclass(frozen=True)
class EntitySpec:
    entity_type: EntityType
    table: str
    slug: str
    label: str
    response_key: str
    profile_model: Type[BaseModel]
    create_model: Type[BaseModel]
    update_model: Type[BaseModel]
    required_fields: Tuple[str, ...]
    list_select: str
    associations: Tuple[Association, ...] = ()
    search_fields: Tuple[str, ...] = field(default_factory=tuple)
    derived_fields: Tuple[str, ...] = ()

    @property
    def role(self) -> str:
        return ENTITY_ROLES[self.entity_type.value]

    @property
    def route_prefix(self) -> str:
        return f"/{self.slug}s"

    @property
    def sortable_fields(self) -> Tuple[str, ...]:
        """Scalar columns a list can be ordered by; embedded rows and join lists are excluded."""
        return ("id", "created_at", "updated_at", *self.profile_fields, *self.derived_fields)

    @property
    def profile_fields(self) -> List[str]:
        return list(self.profile_model.model_fields)

    def function_name(self, operation: str) -> str:
        return f"{operation}-{self.slug}"

    def search_values(self, row: Dict[str, Any]) -> Iterable[Optional[str]]:
        for name in self.search_fields:
            yield from _values_at(row, name.split("."))


def _values_at(value: Any, path: List[str]) -> Iterable[Optional[str]]:
    """Walk a dotted path through embedded rows, fanning out over lists."""
    if value is None:
        return
    if isinstance(value, list):
        for item in value:
            yield from _values_at(item, path)
        return
    if not path:
        yield str(value)
        return
    if isinstance(value, dict):
        yield from _values_at(value.get(path[0]), path[1:])


ADDRESS_SELECT = "addresses(*, countries(*))"

OPERATOR = EntitySpec(
    entity_type=EntityType.OPERATOR,
    table="operators",
    slug="operator",
    label="Operator",
    response_key="operator",
    profile_model=schemas.OperatorProfile,
    create_model=schemas.OperatorCreatePayload,
    update_model=schemas.OperatorUpdatePayload,
    required_fields=("first_name", "last_name"),
    list_select=f"*, {ADDRESS_SELECT}",
    search_fields=("first_name", "last_name", "phone_number", "working_area"),
    derived_fields=("full_name",),
)

FIELD_OPERATOR = EntitySpec(
    entity_type=EntityType.FIELD_OPERATOR,
    table="field_operators",
    slug="field-operator",
    label="Field operator",
    response_key="operator",
    profile_model=schemas.FieldOperatorProfile,
    create_model=schemas.FieldOperatorCreatePayload,
    update_model=schemas.FieldOperatorUpdatePayload,
    required_fields=("first_name", "last_name"),
    list_select=f"*, {ADDRESS_SELECT}",
    search_fields=("first_name", "last_name", "phone_number", "working_area", "domain"),
    derived_fields=("full_name",),
)

SERVICE_PROVIDER = EntitySpec(
    entity_type=EntityType.SERVICE_PROVIDER,
    table="service_providers",
    slug="service-provider",
    label="Service provider",
    response_key="provider",
    profile_model=schemas.ServiceProviderProfile,
    create_model=schemas.ServiceProviderCreatePayload,
    update_model=schemas.ServiceProviderUpdatePayload,
    required_fields=("first_name", "last_name", "phone_number"),
    list_select=(
        f"*, {ADDRESS_SELECT}, "
        "service_provider_types(service_type_id, service_type:service_types(id, name, "
        "subcategory:subcategories(id, name, category:categories(id, name)))), "
        "service_provider_working_areas(working_area_id, working_area:working_areas(id, name))"
    ),
    associations=(
        Association("service_provider_types", "service_type_ids", "service_type_id"),
        Association("service_provider_working_areas", "working_area_ids", "working_area_id"),
    ),
    search_fields=(
        "full_name",
        "phone_number",
        "service_provider_working_areas.working_area.name",
        "addresses.city",
        "status",
        "provider_kind",
        "service_provider_types.service_type.name",
        "service_provider_types.service_type.subcategory.name",
        "service_provider_types.service_type.subcategory.category.name",
    ),
    derived_fields=("full_name", "provider_kind"),
)

STORE = EntitySpec(
    entity_type=EntityType.STORE,
    table="stores",
    slug="store",
    label="Store",
    response_key="store",
    profile_model=schemas.StoreProfile,
    create_model=schemas.StoreCreatePayload,
    update_model=schemas.StoreUpdatePayload,
    required_fields=("name",),
    list_select=f"*, {ADDRESS_SELECT}, category:store_categories(id, name)",
    search_fields=("name", "owner_full_name", "category.name", "phone_number", "addresses.city"),
    derived_fields=("owner_full_name",),
)

ENTITY_SPECS: Dict[EntityType, EntitySpec] = {
    spec.entity_type: spec for spec in (OPERATOR, FIELD_OPERATOR, SERVICE_PROVIDER, STORE)
}


def get_spec(entity_type) -> EntitySpec:
    return ENTITY_SPECS[EntityType(entity_type)]


def get_spec_by_slug(slug: str) -> Optional[EntitySpec]:
    for spec in ENTITY_SPECS.values():
        if spec.slug == slug:
            return spec
    return None


def with_derived_fields(row: Dict[str, Any]) -> Dict[str, Any]:
    """Add the computed columns the list screens search and display."""
    row = dict(row)
    if "first_name" in row or "last_name" in row:
        row["full_name"] = f"{row.get('first_name') or ''} {row.get('last_name') or ''}".strip()
    if "owner_first_name" in row or "owner_last_name" in row:
        row["owner_full_name"] = f"{row.get('owner_first_name') or ''} {row.get('owner_last_name') or ''}".strip()
    if "is_company" in row:
        row["provider_kind"] = "company" if row.get("is_company") else "individual"
    return row
