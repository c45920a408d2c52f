# app/schemas/product.py

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.schemas.common import CamelModel


# Shared fields
class ProductBase(CamelModel):
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    description: str
    category: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=0)
    rating: Optional[float] = Field(default=None, ge=0)
    image: Optional[str] = None
    images: Optional[List[str]] = None
    image_file_id: Optional[str] = None
    image_file_ids: Optional[List[str]] = None
    condition: Optional[str] = None
    seller_message: Optional[str] = None
    rent_available: Optional[bool] = None


# Seller creates product
class ProductCreate(ProductBase):
    user_id: Optional[str] = None


# Seller updates product
class ProductUpdate(CamelModel):
    name: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    image: Optional[str] = None
    images: Optional[List[str]] = None
    condition: Optional[str] = None
    seller_message: Optional[str] = None
    rent_available: Optional[bool] = None


class QuantityUpdate(CamelModel):
    quantity: int


# What API returns
class Product(ProductBase):
    id: str
    user_id: str
    created_at: datetime
    updated_at: datetime

    seller_name: Optional[str] = None
    seller_photo: Optional[str] = None
    available: bool = False
    average_rating: Optional[float] = None
