"""
Inventory API - Product Document Model
=======================================

What:  Layout of a product as stored in the `productos` MongoDB collection.
How:   A TypedDict describing the stored fields plus a builder that turns a
       validated create payload into a document ready for `insert_one`.
Who:   Used by ProductService for inserts and by ProductResponse.from_document.

Stored document:
    {
        "_id":       ObjectId (assigned by the driver on insert),
        "name":      str,
        "price":     float,
        "quantity":  int,
        "brand":     str,
        "createdAt": datetime (UTC, millisecond precision),
        "updatedAt": datetime (UTC, millisecond precision),
    }
"""

from datetime import datetime, timezone
from typing import TypedDict

from bson import ObjectId

from app.schemas.product import ProductCreate

PRODUCTS_COLLECTION = "productos"


class ProductDocument(TypedDict, total=False):
    _id: ObjectId
    name: str
    price: float
    quantity: int
    brand: str
    createdAt: datetime
    updatedAt: datetime


def utcnow() -> datetime:
    """Current UTC time truncated to the millisecond precision of BSON dates."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def build_document(payload: ProductCreate, now: datetime) -> ProductDocument:
    """New document for `payload` with both timestamps set to `now`."""
    document: ProductDocument = {
        "name": payload.name,
        "price": payload.price,
        "quantity": payload.quantity,
        "brand": payload.brand,
        "createdAt": now,
        "updatedAt": now,
    }
    return document
