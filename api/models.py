"""
Pydantic models for API request/response schemas.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    price: float = Field(..., ge=0)
    description: Optional[str] = None
    stock: int = Field(0, ge=0)


class Product(ProductCreate):
    model_config = ConfigDict(from_attributes=True)


class ProductListResponse(BaseModel):
    total: int
    data: list[Product]


class HealthResponse(BaseModel):
    status: str
    mongodb: str
    timestamp: datetime
