"""Catalogue read side: lookups, filtering, pagination and serialization."""

import math

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.shared.errors import NotFound
from storefront.shared.money import format_cents, to_cents

MAX_PAGE_SIZE = 100


def serialize_category(category):
    return {
        "id": str(category.id),
        "name": category.name,
        "description": category.description,
        "createdAt": category.created_at.isoformat() if category.created_at else None,
        "updatedAt": category.updated_at.isoformat() if category.updated_at else None,
    }


def category_summary(category_id):
    if not category_id:
        return None
    try:
        category = current_domain.repository_for(Category).get(category_id)
    except ObjectNotFoundError:
        return None
    return {"id": str(category.id), "name": category.name}


def serialize_product(product):
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "price": format_cents(product.price_cents),
        "stock": product.stock,
        "categoryId": str(product.category_id) if product.category_id else None,
        "category": category_summary(product.category_id),
        "imageUrl": product.image_url,
        "createdAt": product.created_at.isoformat() if product.created_at else None,
        "updatedAt": product.updated_at.isoformat() if product.updated_at else None,
    }


def find_product(product_id):
    """Return the Product with ``product_id`` or ``None``."""
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        return None


def get_product(product_id):
    product = find_product(product_id)
    if product is None:
        raise NotFound("Product not found")
    return product


def get_category(category_id):
    try:
        return current_domain.repository_for(Category).get(category_id)
    except ObjectNotFoundError:
        raise NotFound("Category not found") from None


def list_categories():
    categories = current_domain.repository_for(Category)._dao.query.limit(None).all().items
    return sorted(categories, key=lambda category: category.name.lower())


def list_products(min_price=None, max_price=None, category_id=None, search=None, page=1, limit=10):
    """Filter and paginate products, newest first.

    Returns ``(products, pagination)`` where ``pagination`` carries ``page``,
    ``limit``, ``total`` and ``totalPages``.
    """
    if page < 1:
        raise ValidationError({"page": ["Page must be at least 1"]})
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError({"limit": [f"Limit must be between 1 and {MAX_PAGE_SIZE}"]})

    criteria = {}
    if category_id:
        criteria["category_id"] = str(category_id)
    if min_price is not None:
        criteria["price_cents__gte"] = to_cents(min_price)
    if max_price is not None:
        criteria["price_cents__lte"] = to_cents(max_price)
    if search and search.strip():
        criteria["name__icontains"] = search.strip()

    query = current_domain.repository_for(Product)._dao.query
    if criteria:
        query = query.filter(**criteria)
    result = query.order_by("-created_at").offset((page - 1) * limit).limit(limit).all()

    pagination = {
        "page": page,
        "limit": limit,
        "total": result.total,
        "totalPages": math.ceil(result.total / limit),
    }
    return result.items, pagination
