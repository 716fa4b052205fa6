from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)


class SubcategoryCreate(BaseModel):
    category_id: str
    name: str = Field(min_length=1)


class ServiceTypeCreate(BaseModel):
    subcategory_id: str
    name: str = Field(min_length=1)


class TaxonomyItemUpdate(BaseModel):
    name: str = Field(min_length=1)


class TaxonomyItemResponse(BaseModel):
    id: str
    name: str
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SubcategoryNode(TaxonomyItemResponse):
    service_types: List[TaxonomyItemResponse] = []


class CategoryNode(TaxonomyItemResponse):
    subcategories: List[SubcategoryNode] = []
