"""FastAPI endpoints for the Catalogue."""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.catalogue.api.schemas import (
    CreateCategoryRequest,
    CreateProductRequest,
    UpdateCategoryRequest,
    UpdateProductRequest,
)
from storefront.catalogue.management import (
    CreateCategory,
    CreateProduct,
    DeleteCategory,
    DeleteProduct,
    UpdateCategory,
    UpdateProduct,
)
from storefront.catalogue.queries import (
    MAX_PAGE_SIZE,
    get_category,
    get_product,
    list_categories,
    list_products,
    serialize_category,
    serialize_product,
)
from storefront.identity.access import require_admin
from storefront.shared.money import to_cents

product_router = APIRouter(prefix="/api/products", tags=["products"])
category_router = APIRouter(prefix="/api/categories", tags=["categories"])


# --- Category endpoints ---


@category_router.get("")
async def get_categories():
    return {"categories": [serialize_category(category) for category in list_categories()]}


@category_router.get("/{category_id}")
async def get_category_by_id(category_id: str):
    return {"category": serialize_category(get_category(category_id))}


@category_router.post("", status_code=201, dependencies=[Depends(require_admin)])
async def create_category(body: CreateCategoryRequest):
    command = CreateCategory(name=body.name, description=body.description)
    category_id = current_domain.process(command, asynchronous=False)
    return {
        "message": "Category created successfully",
        "category": serialize_category(get_category(category_id)),
    }


@category_router.put("/{category_id}", dependencies=[Depends(require_admin)])
async def update_category(category_id: str, body: UpdateCategoryRequest):
    command = UpdateCategory(
        category_id=category_id,
        name=body.name,
        description=body.description,
    )
    current_domain.process(command, asynchronous=False)
    return {
        "message": "Category updated successfully",
        "category": serialize_category(get_category(category_id)),
    }


@category_router.delete("/{category_id}", dependencies=[Depends(require_admin)])
async def delete_category(category_id: str):
    current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
    return {"message": "Category deleted successfully"}


# --- Product endpoints ---


@product_router.get("")
async def get_products(
    min_price: Decimal | None = Query(None, alias="minPrice", ge=0),
    max_price: Decimal | None = Query(None, alias="maxPrice", ge=0),
    category_id: str | None = Query(None, alias="categoryId"),
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
):
    products, pagination = list_products(
        min_price=min_price,
        max_price=max_price,
        category_id=category_id,
        search=search,
        page=page,
        limit=limit,
    )
    return {
        "products": [serialize_product(product) for product in products],
        "pagination": pagination,
    }


@product_router.get("/{product_id}")
async def get_product_by_id(product_id: str):
    return {"product": serialize_product(get_product(product_id))}


@product_router.post("", status_code=201, dependencies=[Depends(require_admin)])
async def create_product(body: CreateProductRequest):
    command = CreateProduct(
        name=body.name,
        description=body.description,
        price_cents=to_cents(body.price),
        stock=body.stock,
        category_id=body.category_id,
        image_url=body.image_url,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return {
        "message": "Product created successfully",
        "product": serialize_product(get_product(product_id)),
    }


@product_router.put("/{product_id}", dependencies=[Depends(require_admin)])
async def update_product(product_id: str, body: UpdateProductRequest):
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        description=body.description,
        price_cents=to_cents(body.price) if body.price is not None else None,
        stock=body.stock,
        category_id=body.category_id,
        image_url=body.image_url,
    )
    current_domain.process(command, asynchronous=False)
    return {
        "message": "Product updated successfully",
        "product": serialize_product(get_product(product_id)),
    }


@product_router.delete("/{product_id}", dependencies=[Depends(require_admin)])
async def delete_product(product_id: str):
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return {"message": "Product deleted successfully"}
