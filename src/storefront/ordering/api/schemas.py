"""Pydantic request schemas for the Cart and Order APIs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# --- Cart Request Schemas ---


class AddToCartRequest(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "productId": "0b8f4a3e-6a0c-4a55-8d2f-3c2d7e9b1a42",
                    "quantity": 2,
                }
            ]
        },
    )

    product_id: str = Field(..., alias="productId", min_length=1)
    quantity: int = Field(..., ge=1)


class UpdateCartLineRequest(BaseModel):
    quantity: int = Field(..., ge=1)


# --- Order Request Schemas ---


class UpdateOrderStatusRequest(BaseModel):
    model_config = ConfigDict(json_schema_extra={"examples": [{"status": "processing"}]})

    status: str = Field(..., min_length=1, max_length=20)
