"""
Product API: Product Store (Persistence Layer)
=================================================

What:  Durable CRUD for Product records on a MongoDB collection.
How:   Validates payloads with validate_product(), then issues the matching
       Motor call. Driver failures are wrapped in DatabaseError; our own
       exceptions (ValidationError, NotFoundError, InvalidIdError) propagate.
Who:   Constructed once per process in the lifespan handler and injected
       into route handlers through the get_product_store dependency.

The collection is passed in, never looked up from module state, so tests
can hand the store an AsyncMock or an in-memory collection double.

Operation summary:
    create_product(fields)       → Product                  (ValidationError)
    get_all_products()           → List[Product]
    get_product_by_id(id)        → Product                  (NotFoundError, InvalidIdError)
    update_product(id, fields)   → Product                  (NotFoundError, ValidationError)
    delete_product(id)           → None                     (NotFoundError)
"""

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from app.exceptions import (
    DatabaseError,
    InvalidIdError,
    NotFoundError,
    ValidationError,
)
from app.schemas.product import Product, ValidationResult, validate_product

logger = logging.getLogger(__name__)


def parse_object_id(product_id: str) -> ObjectId:
    """Convert a path id to an ObjectId, raising InvalidIdError if malformed."""
    if not ObjectId.is_valid(product_id):
        raise InvalidIdError(resource_id=product_id)
    return ObjectId(product_id)


def _raise_if_invalid(result: ValidationResult) -> Dict[str, Any]:
    if not result.ok:
        raise ValidationError(message=result.message, errors=result.errors)
    return result.value


class ProductStore:
    """
    MongoDB-backed product repository.

    Error Handling Strategy:
        Each method wraps unexpected exceptions in DatabaseError (hides driver
        details from the client). Application exceptions are re-raised as-is.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self._collection = collection

    async def create_product(self, fields: Any) -> Product:
        """
        Persist a new product with a freshly generated id.

        Validation happens before any I/O, so an invalid payload never
        reaches the database.
        """
        document = _raise_if_invalid(validate_product(fields))
        try:
            result = await self._collection.insert_one(document)
        except Exception as e:
            logger.error("Database error creating product: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the product. Please try again.",
                context={"error_type": type(e).__name__},
            )

        document["_id"] = result.inserted_id
        logger.info("Product created: %s", result.inserted_id)
        return Product.from_document(document)

    async def get_all_products(self) -> List[Product]:
        """All products in natural (insertion) order. Empty store → []."""
        try:
            documents = await self._collection.find().to_list(length=None)
        except Exception as e:
            logger.error("Database error listing products: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve products. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [Product.from_document(doc) for doc in documents]

    async def get_product_by_id(self, product_id: str) -> Product:
        """
        Retrieve a single product.

        Raises:
            InvalidIdError: product_id is not 24 hex characters
            NotFoundError:  no document has this id
            DatabaseError:  query execution failed
        """
        oid = parse_object_id(product_id)
        try:
            document = await self._collection.find_one({"_id": oid})
        except Exception as e:
            logger.error("Database error fetching product %s: %s", product_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the product. Please try again.",
                context={"product_id": product_id, "error_type": type(e).__name__},
            )

        if document is None:
            raise NotFoundError(resource_id=product_id)
        return Product.from_document(document)

    async def update_product(
        self, product_id: str, fields: Any, current: Optional[Product] = None
    ) -> Product:
        """
        Merge `fields` into the stored product and persist the result.

        Fields not supplied keep their stored values. The merged record is
        validated as a whole, so {"price": null} or {"ram": "eight"} are
        rejected even though the other six fields are fine.
        Concurrent updates to the same id: last write wins.

        `current` is the already-loaded record, when the caller has one;
        otherwise it is read here first.
        """
        if not isinstance(fields, dict):
            _raise_if_invalid(validate_product(fields))

        if current is None:
            current = await self.get_product_by_id(product_id)
        merged = current.model_dump(exclude={"id"})
        merged.update(fields)
        document = _raise_if_invalid(validate_product(merged))

        try:
            updated = await self._collection.find_one_and_update(
                {"_id": parse_object_id(product_id)},
                {"$set": document},
                return_document=ReturnDocument.AFTER,
            )
        except Exception as e:
            logger.error("Database error updating product %s: %s", product_id, str(e))
            raise DatabaseError(
                message="Could not update the product. Please try again.",
                context={"product_id": product_id, "error_type": type(e).__name__},
            )

        # Deleted by another request between the read and the write
        if updated is None:
            raise NotFoundError(resource_id=product_id)

        logger.info("Product updated: %s", product_id)
        return Product.from_document(updated)

    async def delete_product(self, product_id: str) -> None:
        """Remove a product. A second delete of the same id raises NotFoundError."""
        oid = parse_object_id(product_id)
        try:
            result = await self._collection.delete_one({"_id": oid})
        except Exception as e:
            logger.error("Database error deleting product %s: %s", product_id, str(e))
            raise DatabaseError(
                message="Could not delete the product. Please try again.",
                context={"product_id": product_id, "error_type": type(e).__name__},
            )

        if result.deleted_count == 0:
            raise NotFoundError(resource_id=product_id)
        logger.info("Product deleted: %s", product_id)

    async def ping(self) -> bool:
        """True if the database answers a ping command."""
        try:
            await self._collection.database.command("ping")
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False
