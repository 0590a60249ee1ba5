"""
Product API: Pydantic Schemas and Product Validation
=======================================================

What:  Pydantic models defining the product API contract, plus the explicit
       validation step applied to every incoming product payload.
How:   FastAPI uses the response models to serialize results and generate the
       OpenAPI document. Request bodies are NOT bound to a model by FastAPI;
       they go through validate_product(), which returns a ValidationResult
       the store turns into a ValidationError (HTTP 400).
Who:   Used by the product store (validation, record building) and the routes
       (response models, documented request bodies).

Field rules (all seven fields required, never null):
    name, brand, camera, network  → non-empty strings
    ram                           → integer (booleans rejected)
    fingerprint                   → boolean
    price                         → number (int or float, finite)

No business range checks: negative prices and zero RAM are accepted as-is.
Integers are bounded only by what BSON can store (signed 64-bit), and
NaN/Infinity are rejected because they do not survive a JSON round trip.
"""

from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

# Keys that clients may send but which are never written by a payload
IMMUTABLE_FIELDS = frozenset({"id", "_id"})

# Largest integers a BSON int64 can hold
BSON_INT_MIN = -(2**63)
BSON_INT_MAX = 2**63 - 1

BsonInt = Annotated[int, Field(ge=BSON_INT_MIN, le=BSON_INT_MAX)]
FiniteFloat = Annotated[float, Field(allow_inf_nan=False)]

PRODUCT_EXAMPLE = {
    "name": "Galaxy S21",
    "brand": "Samsung",
    "ram": 8,
    "camera": "64 MP",
    "network": "5G",
    "fingerprint": True,
    "price": 799,
}


# ══════════════════════════════════════════════════════════════════════════
# Payload Models: what the client sends
# ══════════════════════════════════════════════════════════════════════════


class ProductFields(BaseModel):
    """
    The seven client-writable product attributes.

    Strict mode: "8" is not an integer and 1 is not a boolean.
    Unknown keys are dropped rather than rejected.
    """

    model_config = ConfigDict(
        strict=True,
        extra="ignore",
        json_schema_extra={"example": PRODUCT_EXAMPLE},
    )

    name: str = Field(min_length=1, description="The name of the product.")
    brand: str = Field(min_length=1, description="The brand of the product.")
    ram: BsonInt = Field(description="The RAM capacity of the product in gigabytes.")
    camera: str = Field(min_length=1, description="The camera specification of the product.")
    network: str = Field(min_length=1, description="The network connectivity of the product.")
    fingerprint: bool = Field(
        description="Indicates whether the product has a fingerprint sensor."
    )
    # int stays int (799 round-trips as 799, not 799.0)
    price: Union[BsonInt, FiniteFloat] = Field(description="The price of the product.")


class ProductUpdate(BaseModel):
    """
    Partial update body: any subset of the product fields.

    Only used to document PUT /products/{id}. The supplied fields are merged
    into the stored record and the merged result is validated as ProductFields.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"price": 500}})

    name: Optional[str] = None
    brand: Optional[str] = None
    ram: Optional[BsonInt] = None
    camera: Optional[str] = None
    network: Optional[str] = None
    fingerprint: Optional[bool] = None
    price: Optional[Union[BsonInt, FiniteFloat]] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns
# ══════════════════════════════════════════════════════════════════════════


class Product(ProductFields):
    """A stored product: the seven fields plus the store-assigned id."""

    model_config = ConfigDict(
        strict=False,
        json_schema_extra={"example": {"id": "65d34a7cbe5329a2e035c756", **PRODUCT_EXAMPLE}},
    )

    id: str = Field(description="The auto-generated unique identifier of the product.")

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Product":
        """Builds a Product from a raw MongoDB document (`_id` → `id`)."""
        fields = {k: v for k, v in document.items() if k not in IMMUTABLE_FIELDS}
        return cls(id=str(document["_id"]), **fields)


class MessageResponse(BaseModel):
    """Body of every error response and of the delete confirmation."""

    message: str = Field(description="Human-readable outcome description")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


# ══════════════════════════════════════════════════════════════════════════
# Validation
# ══════════════════════════════════════════════════════════════════════════


class FieldError(BaseModel):
    """One field-level validation problem."""

    field: str
    message: str


class ValidationResult(BaseModel):
    """
    Outcome of validate_product().

    ok=True  → `value` holds the cleaned seven-field dict, `errors` is empty
    ok=False → `value` is None, `errors` lists every failing field
    """

    ok: bool
    value: Optional[Dict[str, Any]] = None
    errors: List[FieldError] = Field(default_factory=list)

    @property
    def message(self) -> str:
        """Single-line summary, e.g. "Product validation failed: brand: Field required"."""
        if self.ok:
            return ""
        details = ", ".join(f"{e.field}: {e.message}" for e in self.errors)
        return f"Product validation failed: {details}"


def validate_product(data: Any) -> ValidationResult:
    """
    Validate a complete product payload.

    Args:
        data: Decoded JSON body (or a merged stored record + update).
              `id`/`_id` and unknown keys are ignored.

    Returns:
        ValidationResult; never raises for bad input.
    """
    if not isinstance(data, dict):
        return ValidationResult(
            ok=False,
            errors=[FieldError(field="body", message="Request body must be a JSON object")],
        )

    payload = {k: v for k, v in data.items() if k not in IMMUTABLE_FIELDS}
    try:
        fields = ProductFields.model_validate(payload)
    except PydanticValidationError as exc:
        # A union field fails once per member; report each field once
        messages: Dict[str, str] = {}
        for err in exc.errors():
            field = str(err["loc"][0]) if err["loc"] else "body"
            messages.setdefault(field, err["msg"])
        errors = [FieldError(field=field, message=msg) for field, msg in messages.items()]
        return ValidationResult(ok=False, errors=errors)

    return ValidationResult(ok=True, value=fields.model_dump())
