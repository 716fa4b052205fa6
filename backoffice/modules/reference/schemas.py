from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class CountryCreate(BaseModel):
    name: str = Field(min_length=1)
    code: str = Field(min_length=2, max_length=3)
    phone_code: str = Field(min_length=1)


class CountryUpdate(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None
    phone_code: Optional[str] = None


class CountryResponse(BaseModel):
    id: str
    name: str
    code: str
    phone_code: str


class NamedItemCreate(BaseModel):
    name: str = Field(min_length=1)


class NamedItemResponse(BaseModel):
    id: str
    name: str
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
