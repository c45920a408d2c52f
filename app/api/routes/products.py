# app/api/routes/products.py

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile

from app.api.deps import get_product_service, read_image_upload
from app.core.security import get_current_user
from app.schemas.common import MessageResponse
from app.schemas.product import Product, ProductCreate, ProductUpdate, QuantityUpdate
from app.schemas.user import User
from app.services.products import DEFAULT_PAGE_SIZE, ProductService

router = APIRouter(prefix="/products", tags=["products"])


# Public catalogue

@router.get("", response_model=List[Product])
def list_products(
    user_id: Optional[str] = Query(None, alias="userId"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    categories: Optional[str] = Query(None, description="comma separated"),
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    min_rating: Optional[float] = Query(None, alias="minRating"),
    search: Optional[str] = Query(None),
    products: ProductService = Depends(get_product_service),
):
    return products.list(
        user_id=user_id,
        page=page,
        limit=limit,
        categories=categories.split(",") if categories else None,
        min_price=min_price,
        max_price=max_price,
        min_rating=min_rating,
        search=search,
    )


@router.get("/{product_id}/from-same-shop", response_model=List[Product])
def products_from_same_shop(
    product_id: str,
    limit: int = Query(5, ge=1, le=50),
    products: ProductService = Depends(get_product_service),
):
    return products.list_from_same_shop(product_id, limit)


@router.get("/{product_id}", response_model=Product)
def get_product(product_id: str, products: ProductService = Depends(get_product_service)):
    return products.get(product_id)


# Seller manages their products

@router.post("", response_model=Product)
def create_product(
    product_in: ProductCreate,
    products: ProductService = Depends(get_product_service),
    current_user: User = Depends(get_current_user),
):
    return products.create(product_in, current_user)


@router.put("/{product_id}", response_model=Product)
def update_product(
    product_id: str,
    update_data: ProductUpdate,
    products: ProductService = Depends(get_product_service),
    current_user: User = Depends(get_current_user),
):
    return products.update(product_id, update_data, current_user)


@router.patch("/{product_id}/quantity", response_model=Product)
def update_product_quantity(
    product_id: str,
    body: QuantityUpdate,
    products: ProductService = Depends(get_product_service),
    current_user: User = Depends(get_current_user),
):
    return products.update_quantity(product_id, body.quantity, current_user)


@router.post("/{product_id}/image", response_model=Product)
def upload_product_image(
    product_id: str,
    image: UploadFile = File(...),
    products: ProductService = Depends(get_product_service),
    current_user: User = Depends(get_current_user),
):
    content = read_image_upload(image)
    return products.attach_image(product_id, content, image.filename or "product-image", current_user)


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: str,
    products: ProductService = Depends(get_product_service),
    current_user: User = Depends(get_current_user),
):
    products.delete(product_id, current_user)
    return {"message": "Product deleted successfully"}
