from fastapi import APIRouter, Depends, Query
from backoffice.database.supabase_client import get_supabase
from backoffice.modules.entities.orchestrator import TransactionOrchestrator
from backoffice.modules.entities.registry import EntitySpec, ENTITY_SPECS, EntityType
from backoffice.modules.entities.schemas import EntityCounts, EntityPage, EntitySubmission
from backoffice.modules.entities.service import EntityService
from backoffice.modules.functions.client import FunctionsClient, get_functions_client
from backoffice.core.dependencies import get_session, get_capabilities, require_capability
from backoffice.core.session import Session, Capabilities
from backoffice.config import settings
from supabase import Client
from typing import Any, Dict, List, Optional


def get_entity_service(
    supabase: Client = Depends(get_supabase),
    functions: FunctionsClient = Depends(get_functions_client),
) -> EntityService:
    return EntityService(supabase, functions)


def get_orchestrator(
    supabase: Client = Depends(get_supabase),
    functions: FunctionsClient = Depends(get_functions_client),
) -> TransactionOrchestrator:
    return TransactionOrchestrator(supabase, functions)


def _split_associations(spec: EntitySpec, profile: Dict[str, Any]) -> Dict[str, List[str]]:
    return {a.payload_key: list(profile.get(a.payload_key) or []) for a in spec.associations}


def build_entity_router(spec: EntitySpec) -> APIRouter:
    """CRUD routes for one entity type; writes go through the orchestrator or the delete function."""
    router = APIRouter(prefix=spec.route_prefix, tags=[f"{spec.slug}s"])

    @router.get("", response_model=EntityPage)
    async def list_entities(
        search: Optional[str] = None,
        sort: str = "created_at",
        direction: str = Query("desc", pattern="^(asc|desc)$"),
        page: int = 1,
        session: Session = Depends(require_capability("can_read")),
        service: EntityService = Depends(get_entity_service),
    ):
        """Filter, sort and paginate every row of the table."""
        return service.list_entities(
            spec, search=search, sort=sort, direction=direction, page=page, page_size=settings.page_size
        )

    if spec.entity_type == EntityType.SERVICE_PROVIDER:
        @router.get("/search", response_model=List[Dict[str, Any]])
        async def search_providers(
            category_id: Optional[str] = None,
            subcategory_id: Optional[str] = None,
            service_type_id: Optional[str] = None,
            session: Session = Depends(require_capability("can_read")),
            service: EntityService = Depends(get_entity_service),
        ):
            """Active providers by category, subcategory and service type"""
            return service.search_providers(category_id, subcategory_id, service_type_id)

    @router.get("/{entity_id}", response_model=Dict[str, Any])
    async def get_entity(
        entity_id: str,
        session: Session = Depends(require_capability("can_read")),
        service: EntityService = Depends(get_entity_service),
    ):
        return service.get_entity(spec, entity_id)

    @router.post("", response_model=Dict[str, Any], status_code=201)
    def create_entity(
        submission: EntitySubmission,
        session: Session = Depends(get_session),
        capabilities: Capabilities = Depends(get_capabilities),
        orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
    ):
        """Create the address (if any) and then the entity through its create function"""
        return orchestrator.submit(
            spec.entity_type, None, submission.profile, submission.address,
            _split_associations(spec, submission.profile), session, capabilities,
        )

    @router.put("/{entity_id}", response_model=Dict[str, Any])
    def update_entity(
        entity_id: str,
        submission: EntitySubmission,
        session: Session = Depends(get_session),
        capabilities: Capabilities = Depends(get_capabilities),
        orchestrator: TransactionOrchestrator = Depends(get_orchestrator),
    ):
        """Update the address and the entity through its update function"""
        return orchestrator.submit(
            spec.entity_type, entity_id, submission.profile, submission.address,
            _split_associations(spec, submission.profile), session, capabilities,
        )

    @router.delete("/{entity_id}", status_code=204)
    def delete_entity(
        entity_id: str,
        session: Session = Depends(get_session),
        capabilities: Capabilities = Depends(get_capabilities),
        service: EntityService = Depends(get_entity_service),
    ):
        service.delete_entity(spec, entity_id, session, capabilities)
        return None

    return router


entity_routers = [build_entity_router(spec) for spec in ENTITY_SPECS.values()]

dashboard_router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@dashboard_router.get("/counts", response_model=EntityCounts)
async def entity_counts(
    session: Session = Depends(require_capability("can_read")),
    service: EntityService = Depends(get_entity_service),
):
    """Row counts for the welcome screen"""
    return service.count_entities()
