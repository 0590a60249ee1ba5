"""
Product API: Product Route Handlers
======================================

What:  CRUD endpoints under /products.
How:   Each request runs a short dependency chain before its handler:

           get_product_store ─▶ resolve_product ─▶ read_json_body ─▶ handler

       Any stage may short-circuit by raising; the global exception
       handlers in main.py turn the exception into the JSON error body.
       resolve_product runs before the body is read, so an unknown id on
       PUT is a 404 even when the body is also invalid.

Route Inventory:
    GET    /products        → 200 list of products
    GET    /products/{id}   → 200 product | 404
    POST   /products        → 201 created product | 400
    PUT    /products/{id}   → 200 updated product | 404 | 400
    DELETE /products/{id}   → 200 confirmation | 404

Request bodies are parsed here, not by FastAPI's model binding, so type and
missing-field errors come back as 400 with a readable message instead of
FastAPI's default 422 error list.
"""

import json
import logging
from typing import Any, List

from fastapi import APIRouter, Depends, Request, status

from app.exceptions import ValidationError
from app.schemas.product import (
    MessageResponse,
    Product,
    ProductFields,
    ProductUpdate,
)
from app.services.product_store import ProductStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])

_ERROR_RESPONSES = {
    500: {"description": "Server error", "model": MessageResponse},
}
_NOT_FOUND = {404: {"description": "Product not found.", "model": MessageResponse}}
_INVALID = {400: {"description": "Invalid product data.", "model": MessageResponse}}


def _json_body(model) -> dict:
    """OpenAPI requestBody for a handler that reads the body itself."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


# ══════════════════════════════════════════════════════════════════════════
# Pipeline Stages (dependencies)
# ══════════════════════════════════════════════════════════════════════════


def get_product_store(request: Request) -> ProductStore:
    """The process-wide store created in the application lifespan."""
    return request.app.state.product_store


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


async def read_json_body(request: Request) -> Any:
    """
    Decode the request body as JSON.

    An empty body decodes to {} (a PUT with nothing to change is a no-op).
    Malformed JSON raises ValidationError (→ 400). So do the NaN, Infinity
    and -Infinity literals that Python's json module would otherwise accept.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError as e:
        raise ValidationError(
            message=f"Malformed JSON body: {e}",
            context={"path": request.url.path},
        )


async def resolve_product(
    product_id: str,
    store: ProductStore = Depends(get_product_store),
) -> Product:
    """
    Resolve-by-id: load the product named in the path before the handler runs.

    NotFoundError → 404, InvalidIdError/DatabaseError → 500; in every failure
    case the handler never executes.
    """
    return await store.get_product_by_id(product_id)


# ══════════════════════════════════════════════════════════════════════════
# Handlers
# ══════════════════════════════════════════════════════════════════════════


@router.get(
    "",
    response_model=List[Product],
    responses=_ERROR_RESPONSES,
    summary="Retrieve a list of all products.",
    description="Retrieve a list of all products from the database.",
)
async def list_products(
    store: ProductStore = Depends(get_product_store),
) -> List[Product]:
    return await store.get_all_products()


@router.get(
    "/{product_id}",
    response_model=Product,
    responses={**_NOT_FOUND, **_ERROR_RESPONSES},
    summary="Retrieve a product by ID.",
    description="Retrieve a product from the database by its ID.",
)
async def get_product(product: Product = Depends(resolve_product)) -> Product:
    return product


@router.post(
    "",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
    responses={**_INVALID, **_ERROR_RESPONSES},
    summary="Create a new product.",
    description="Create a new product and save it to the database.",
    openapi_extra=_json_body(ProductFields),
)
async def create_product(
    body: Any = Depends(read_json_body),
    store: ProductStore = Depends(get_product_store),
) -> Product:
    return await store.create_product(body)


@router.put(
    "/{product_id}",
    response_model=Product,
    responses={**_INVALID, **_NOT_FOUND, **_ERROR_RESPONSES},
    summary="Update a product by ID.",
    description=(
        "Update an existing product in the database by its ID. "
        "Fields left out of the body keep their current values."
    ),
    openapi_extra=_json_body(ProductUpdate),
)
async def update_product(
    product: Product = Depends(resolve_product),
    body: Any = Depends(read_json_body),
    store: ProductStore = Depends(get_product_store),
) -> Product:
    return await store.update_product(product.id, body, current=product)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses={
        200: {"description": "Product deleted successfully."},
        **_NOT_FOUND,
        **_ERROR_RESPONSES,
    },
    summary="Delete a product by ID.",
    description="Delete a product from the database by its ID.",
)
async def delete_product(
    product: Product = Depends(resolve_product),
    store: ProductStore = Depends(get_product_store),
) -> MessageResponse:
    await store.delete_product(product.id)
    return MessageResponse(message="Product deleted successfully")
