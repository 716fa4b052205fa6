from fastapi import APIRouter, Depends, File, UploadFile
from backoffice.database.supabase_client import get_supabase
from backoffice.modules.documents.schemas import DocumentUploadResponse
from backoffice.modules.documents.service import DocumentService
from backoffice.modules.documents.storage import build_storage
from backoffice.core.dependencies import get_capabilities, get_session
from backoffice.core.exceptions import Forbidden
from backoffice.core.session import Session, Capabilities
from supabase import Client
from typing import List

router = APIRouter(prefix="/documents", tags=["documents"])


def get_document_service(supabase: Client = Depends(get_supabase)) -> DocumentService:
    return DocumentService(build_storage(supabase))


@router.post("/service-providers", response_model=DocumentUploadResponse, status_code=201)
async def upload_service_provider_documents(
    files: List[UploadFile] = File(...),
    session: Session = Depends(get_session),
    capabilities: Capabilities = Depends(get_capabilities),
    service: DocumentService = Depends(get_document_service)
):
    """Upload up to three attachments for a service provider form"""
    if not (capabilities.can_create or capabilities.can_update):
        raise Forbidden("Insufficient permissions. Required: can_create or can_update")
    return await service.upload_service_provider_documents(files)
