"""
Inventory API - Pydantic Request/Response Schemas
==================================================

What:  Pydantic models defining the API contract for product records.
How:   FastAPI uses these models to validate request bodies, serialize
       responses, and generate the OpenAPI documentation served at /api-docs.
       ProductService also validates raw mappings against them, so the same
       rules apply with or without HTTP in front.
Who:   Route handlers (body/response types) and ProductService (validation).

Field rules:
    name      required on create, non-empty text
    price     required on create, finite float
    quantity  optional, integer, defaults to 0
    brand     optional, text, defaults to ""
"""

from datetime import datetime
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PRODUCT_EXAMPLE = {
    "name": "Teclado mecánico",
    "price": 89.99,
    "quantity": 15,
    "brand": "Magik",
}


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ProductCreate(BaseModel):
    """
    Body of POST /api/productos.

    Unknown keys (including client-sent `id`, `createdAt`, `updatedAt`)
    are ignored; the store and the service own those fields.
    """
    name: str = Field(
        min_length=1, description="Nombre del producto", examples=["Teclado mecánico"]
    )
    # NaN and Infinity parse as JSON floats but cannot be stored as a price
    price: float = Field(
        allow_inf_nan=False, description="Precio del producto", examples=[89.99]
    )
    quantity: int = Field(default=0, description="Cantidad en inventario", examples=[15])
    # Text field; defaults to an empty string, never a number (see DESIGN.md)
    brand: str = Field(default="", description="Marca del producto", examples=["Magik"])

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={"example": PRODUCT_EXAMPLE},
    )


class ProductUpdate(BaseModel):
    """
    Body of PUT /api/productos/{id}: any subset of the updatable fields.

    Only keys the client actually sent are applied (`exclude_unset`).
    Sending `null` for a field is rejected so a record never loses a value.
    """
    name: Optional[str] = Field(default=None, min_length=1, description="Nombre del producto")
    price: Optional[float] = Field(
        default=None, allow_inf_nan=False, description="Precio del producto"
    )
    quantity: Optional[int] = Field(default=None, description="Cantidad en inventario")
    brand: Optional[str] = Field(default=None, description="Marca del producto")

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={"example": {"price": 79.99, "quantity": 20}},
    )

    @field_validator("name", "price", "quantity", "brand")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        # Defaults are not validated, so this only fires for explicit nulls
        if v is None:
            raise ValueError("must not be null")
        return v

    def changes(self) -> dict:
        """Fields explicitly provided by the client."""
        return self.model_dump(exclude_unset=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ProductResponse(BaseModel):
    """
    What:  Full representation of a stored product.
    Who:   Returned by every /api/productos endpoint except DELETE.

    Timestamps are exposed in camelCase (`createdAt`, `updatedAt`) and the
    MongoDB `_id` is exposed as a plain `id` string.
    """
    id: str = Field(description="ID autogenerado del producto")
    name: str = Field(description="Nombre del producto")
    price: float = Field(description="Precio del producto")
    quantity: int = Field(description="Cantidad en inventario")
    brand: str = Field(description="Marca del producto")
    created_at: datetime = Field(alias="createdAt", description="Fecha de creación")
    updated_at: datetime = Field(alias="updatedAt", description="Fecha de última actualización")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "ProductResponse":
        """Build a response from a raw MongoDB document."""
        return cls(
            id=str(document["_id"]),
            name=document["name"],
            price=document["price"],
            quantity=document.get("quantity", 0),
            brand=document.get("brand", ""),
            created_at=document["createdAt"],
            updated_at=document["updatedAt"],
        )


class MessageResponse(BaseModel):
    """Confirmation body, e.g. `{"message": "Producto eliminado"}`."""
    message: str = Field(description="Mensaje de confirmación", examples=["Producto eliminado"])


class ErrorResponse(BaseModel):
    """
    Error body shared by every endpoint.

    Example:
        {"error": "Producto no encontrado"}
    """
    error: str = Field(description="Mensaje de error", examples=["Producto no encontrado"])


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
