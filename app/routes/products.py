"""
Inventory API - Product Route Handlers
=======================================

What:  The five CRUD endpoints under /api/productos.
How:   Each handler receives the collection through Depends(), delegates to
       ProductService, and returns the result. Failures are raised as
       application exceptions and shaped into `{"error": ...}` bodies by the
       global handlers in main.py.
Who:   Any HTTP client; documented at /api-docs.

Route Inventory:
    POST   /api/productos        201 created record  | 400
    GET    /api/productos        200 record array    | 500
    GET    /api/productos/{id}   200 record          | 404, 500
    PUT    /api/productos/{id}   200 updated record  | 400, 404
    DELETE /api/productos/{id}   200 confirmation    | 404, 500
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, Path
from pymongo.asynchronous.collection import AsyncCollection

from app.database import get_products_collection
from app.schemas.product import (
    ErrorResponse,
    MessageResponse,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from app.services.product_service import product_service

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api/productos", tags=["Productos"])

ProductId = Annotated[
    str, Path(description="ID del producto", examples=["665f1c2e9b1e8a3d4c5b6a79"])
]


@router.post(
    "",
    status_code=201,
    response_model=ProductResponse,
    responses={
        201: {"description": "Producto creado exitosamente"},
        400: {"description": "Datos de entrada inválidos", "model": ErrorResponse},
    },
    summary="Crear un nuevo producto",
)
async def create_product(
    payload: ProductCreate,
    collection: AsyncCollection = Depends(get_products_collection),
) -> ProductResponse:
    """Create a product from `name`, `price` and optional `quantity`/`brand`."""
    return await product_service.create(collection, payload)


@router.get(
    "",
    response_model=List[ProductResponse],
    responses={
        200: {"description": "Lista de productos"},
        500: {"description": "Error del servidor", "model": ErrorResponse},
    },
    summary="Obtener todos los productos",
)
async def list_products(
    collection: AsyncCollection = Depends(get_products_collection),
) -> List[ProductResponse]:
    return await product_service.list_all(collection)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={
        200: {"description": "Producto encontrado"},
        404: {"description": "Producto no encontrado", "model": ErrorResponse},
        500: {"description": "Error del servidor", "model": ErrorResponse},
    },
    summary="Obtener un producto por ID",
)
async def get_product(
    product_id: ProductId,
    collection: AsyncCollection = Depends(get_products_collection),
) -> ProductResponse:
    return await product_service.get_by_id(collection, product_id)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={
        200: {"description": "Producto actualizado"},
        400: {"description": "Datos inválidos", "model": ErrorResponse},
        404: {"description": "Producto no encontrado", "model": ErrorResponse},
    },
    summary="Actualizar un producto",
)
async def update_product(
    product_id: ProductId,
    payload: ProductUpdate,
    collection: AsyncCollection = Depends(get_products_collection),
) -> ProductResponse:
    """
    Partially update a product.

    Only the fields present in the body change; `updatedAt` is refreshed.
    """
    return await product_service.update(collection, product_id, payload)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses={
        200: {"description": "Producto eliminado"},
        404: {"description": "Producto no encontrado", "model": ErrorResponse},
        500: {"description": "Error del servidor", "model": ErrorResponse},
    },
    summary="Eliminar un producto",
)
async def delete_product(
    product_id: ProductId,
    collection: AsyncCollection = Depends(get_products_collection),
) -> MessageResponse:
    return await product_service.delete(collection, product_id)
