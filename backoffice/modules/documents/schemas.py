from pydantic import BaseModel
from typing import List


class UploadedDocument(BaseModel):
    file_name: str
    url: str


class DocumentUploadResponse(BaseModel):
    files: List[UploadedDocument]
