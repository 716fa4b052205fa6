import os
import uuid
from fastapi import UploadFile
from backoffice.modules.documents.schemas import DocumentUploadResponse, UploadedDocument
from backoffice.core.exceptions import StorageError, ValidationError
from backoffice.config import settings
from typing import List
import logging

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


class DocumentService:
    def __init__(self, storage, max_files: int = None, max_size_mb: int = None):
        self.storage = storage
        self.max_files = max_files or settings.max_document_files
        self.max_size_bytes = (max_size_mb or settings.max_document_size_mb) * 1024 * 1024

    async def upload_service_provider_documents(self, files: List[UploadFile]) -> DocumentUploadResponse:
        """Store attachments under random names and return their public URLs"""
        if not files:
            raise ValidationError(["files"], "No files provided")
        if len(files) > self.max_files:
            raise ValidationError(["files"], f"At most {self.max_files} files can be uploaded")

        prepared = []
        for file in files:
            file_extension = os.path.splitext(file.filename or "")[1].lower()
            if file_extension not in CONTENT_TYPES:
                raise ValidationError(["files"], f"Unsupported file type: {file.filename}")
            content = await file.read()
            if len(content) > self.max_size_bytes:
                raise ValidationError(["files"], f"File too large: {file.filename}")
            prepared.append((file.filename, f"{uuid.uuid4().hex}{file_extension}", content, CONTENT_TYPES[file_extension]))

        uploaded = []
        for original_name, key, content, content_type in prepared:
            try:
                url = self.storage.upload_file(content, key, content_type)
            except Exception as e:
                logger.error(f"Document upload failed: {str(e)}")
                raise StorageError(f"Failed to upload {original_name}") from e
            uploaded.append(UploadedDocument(file_name=original_name, url=url))
        logger.info("Uploaded %d service provider documents", len(uploaded))
        return DocumentUploadResponse(files=uploaded)
