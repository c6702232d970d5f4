"""Pydantic request schemas for the Catalogue API."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

# --- Category Request Schemas ---


class CreateCategoryRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "Electronics",
                    "description": "Phones, laptops and accessories",
                }
            ]
        }
    )

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None


class UpdateCategoryRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None


# --- Product Request Schemas ---


class CreateProductRequest(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "name": "Mechanical Keyboard",
                    "description": "Tenkeyless, brown switches",
                    "price": "89.99",
                    "stock": 25,
                    "categoryId": "7f1d2c8e-0c55-4a59-9a7e-2f4f0b1f7a10",
                    "imageUrl": "https://cdn.example.com/keyboard.png",
                }
            ]
        },
    )

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: Decimal = Field(..., ge=0)
    stock: int = Field(..., ge=0)
    category_id: str | None = Field(None, alias="categoryId")
    image_url: str | None = Field(None, alias="imageUrl", max_length=500)


class UpdateProductRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: Decimal | None = Field(None, ge=0)
    stock: int | None = Field(None, ge=0)
    category_id: str | None = Field(None, alias="categoryId")
    image_url: str | None = Field(None, alias="imageUrl", max_length=500)
