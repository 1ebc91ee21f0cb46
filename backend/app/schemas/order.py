"""Order Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - OrderCreate.user_id > 0; items non-empty; every quantity and product_id > 0
    - Strict ints: "3" and true are rejected, matching the service-level contract
    - Response models use snake_case only (single schema for every endpoint)

Design Decisions:
    - price as string: exact NUMERIC value, no float rounding on the wire
    - created_at as ISO-8601 string: identical bytes whether served from cache or store
"""

from pydantic import BaseModel, Field, StrictInt


class OrderItemCreate(BaseModel):
    """One requested line item."""
    product_id: StrictInt = Field(gt=0)
    quantity: StrictInt = Field(gt=0)


class OrderCreate(BaseModel):
    """Order creation request."""
    user_id: StrictInt = Field(gt=0)
    items: list[OrderItemCreate] = Field(min_length=1)


class ProductSnapshot(BaseModel):
    id: int
    name: str
    price: str


class UserSnapshot(BaseModel):
    id: int
    email: str
    name: str


class OrderItemResponse(BaseModel):
    id: int
    quantity: int
    product: ProductSnapshot


class OrderResponse(BaseModel):
    """Order with joined user and items, as listed and as created."""
    id: int
    status: str
    created_at: str
    user: UserSnapshot
    items: list[OrderItemResponse]


class OrderListResponse(BaseModel):
    """Paginated listing — total counts the filtered set, not the page."""
    total: int
    page: int
    limit: int
    data: list[OrderResponse]
