"""
Inventory API - Product Service (Data Access Layer)
====================================================

What:  The only component that talks to the `productos` collection.
How:   One method per CRUD verb. Each call receives the collection handle
       (injected by FastAPI in the routes, passed directly in tests),
       validates its input against the Pydantic schemas, runs a single
       driver operation and converts the result or failure.
Who:   Called by the route handlers in app/routes/products.py.

Error translation:
    pydantic.ValidationError   → ValidationError  (400)
    malformed ObjectId         → InvalidIdError   (404)
    driver returned None       → NotFoundError    (404)
    pymongo.errors.PyMongoError → StoreError      (500)

The service is stateless; nothing is cached and nothing is retried.
"""

import logging
from datetime import timedelta
from typing import Any, List, Mapping, Type, TypeVar, Union

import pydantic
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from app.exceptions import (
    InvalidIdError,
    NotFoundError,
    StoreError,
    ValidationError,
    describe_validation_errors,
)
from app.models.product import build_document, utcnow
from app.schemas.product import (
    MessageResponse,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)

logger = logging.getLogger(__name__)

DELETED_MESSAGE = "Producto eliminado"

SchemaT = TypeVar("SchemaT", bound=pydantic.BaseModel)


def _validate(schema: Type[SchemaT], fields: Union[SchemaT, Mapping[str, Any]]) -> SchemaT:
    """Accept an already-validated model or validate a raw mapping."""
    if isinstance(fields, schema):
        return fields
    try:
        return schema.model_validate(fields)
    except pydantic.ValidationError as e:
        raise ValidationError(
            message=describe_validation_errors(e.errors()),
            context={"errors": e.error_count()},
        )


def _parse_object_id(product_id: str) -> ObjectId:
    try:
        return ObjectId(product_id)
    except (InvalidId, TypeError):
        raise InvalidIdError(resource_id=str(product_id))


class ProductService:
    """
    CRUD operations over product documents.

    Responsibilities:
        - create():    validate → insert → return the stored record
        - list_all():  every record in the store's natural order
        - get_by_id(): single record or NotFoundError
        - update():    partial update, refreshes updatedAt
        - delete():    permanent removal with confirmation message
    """

    async def create(
        self,
        collection: AsyncCollection,
        fields: Union[ProductCreate, Mapping[str, Any]],
    ) -> ProductResponse:
        """
        Insert a new product.

        The store assigns `_id`; `createdAt` and `updatedAt` are set to the
        same instant.

        Raises:
            ValidationError: `name` or `price` missing, or a field mistyped
            StoreError: insert failed
        """
        payload = _validate(ProductCreate, fields)
        document = build_document(payload, utcnow())

        try:
            result = await collection.insert_one(document)
        except PyMongoError as e:
            logger.error("Insert failed: %s", str(e))
            raise StoreError(context={"operation": "insert_one", "error": str(e)})

        document["_id"] = result.inserted_id
        logger.info("Product created: %s", result.inserted_id)
        return ProductResponse.from_document(document)

    async def list_all(self, collection: AsyncCollection) -> List[ProductResponse]:
        """
        Return every product. An empty store yields an empty list.

        Raises:
            StoreError: query failed
        """
        try:
            documents = await collection.find({}).to_list()
        except PyMongoError as e:
            logger.error("Listing products failed: %s", str(e))
            raise StoreError(context={"operation": "find", "error": str(e)})

        return [ProductResponse.from_document(doc) for doc in documents]

    async def get_by_id(self, collection: AsyncCollection, product_id: str) -> ProductResponse:
        """
        Fetch a single product.

        Raises:
            InvalidIdError: `product_id` is not a valid ObjectId
            NotFoundError: no product with that id
            StoreError: query failed
        """
        oid = _parse_object_id(product_id)

        try:
            document = await collection.find_one({"_id": oid})
        except PyMongoError as e:
            logger.error("Fetching product %s failed: %s", product_id, str(e))
            raise StoreError(context={"operation": "find_one", "error": str(e)})

        if document is None:
            raise NotFoundError(resource_id=product_id)

        return ProductResponse.from_document(document)

    async def update(
        self,
        collection: AsyncCollection,
        product_id: str,
        fields: Union[ProductUpdate, Mapping[str, Any]],
    ) -> ProductResponse:
        """
        Apply a partial update and refresh `updatedAt`.

        Only the fields present in `fields` are written; `_id` and
        `createdAt` are never touched. The new `updatedAt` is at least one
        millisecond past the stored one, so it strictly increases even when
        two updates land within the same millisecond.

        Raises:
            ValidationError: a supplied field is mistyped or null
            InvalidIdError: `product_id` is not a valid ObjectId
            NotFoundError: no product with that id
            StoreError: query or update failed
        """
        changes = _validate(ProductUpdate, fields).changes()
        oid = _parse_object_id(product_id)

        try:
            current = await collection.find_one({"_id": oid}, {"updatedAt": 1})
            if current is None:
                raise NotFoundError(resource_id=product_id)

            updated_at = utcnow()
            previous = current.get("updatedAt")
            if previous is not None:
                updated_at = max(updated_at, previous + timedelta(milliseconds=1))

            document = await collection.find_one_and_update(
                {"_id": oid},
                {"$set": {**changes, "updatedAt": updated_at}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Updating product %s failed: %s", product_id, str(e))
            raise StoreError(context={"operation": "find_one_and_update", "error": str(e)})

        # Deleted by a concurrent request between the read and the write
        if document is None:
            raise NotFoundError(resource_id=product_id)

        logger.info("Product updated: %s (fields=%s)", product_id, sorted(changes))
        return ProductResponse.from_document(document)

    async def delete(self, collection: AsyncCollection, product_id: str) -> MessageResponse:
        """
        Permanently remove a product.

        A second delete of the same id raises NotFoundError.

        Raises:
            InvalidIdError: `product_id` is not a valid ObjectId
            NotFoundError: no product with that id
            StoreError: delete failed
        """
        oid = _parse_object_id(product_id)

        try:
            document = await collection.find_one_and_delete({"_id": oid})
        except PyMongoError as e:
            logger.error("Deleting product %s failed: %s", product_id, str(e))
            raise StoreError(context={"operation": "find_one_and_delete", "error": str(e)})

        if document is None:
            raise NotFoundError(resource_id=product_id)

        logger.info("Product deleted: %s", product_id)
        return MessageResponse(message=DELETED_MESSAGE)


# ── Singleton Instance ────────────────────────────────────────────────────
product_service = ProductService()
