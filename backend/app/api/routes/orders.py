"""Order Routes — listing and creation endpoints.

Invariants:
    - Routes hold no business logic: they delegate to OrderListingService / OrderCreationService
    - Domain errors propagate to the global handlers (no per-route try/except)
    - POST returns 201 before the confirmation job runs

Design Decisions:
    - page/limit accepted as plain ints: the listing service owns the >= 1 rule
      so HTTP and non-HTTP callers get the same ValidationError
    - limit omitted -> None: the listing service applies the configured default
"""

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_order_services
from app.schemas.order import OrderCreate, OrderListResponse, OrderResponse
from app.services.order_services import OrderServices

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.get("", response_model=OrderListResponse)
async def list_orders(
    page: int = Query(1),
    limit: int | None = Query(None),
    q: str = Query(""),
    services: OrderServices = Depends(get_order_services),
):
    """List orders newest first; q matches user email or product name."""
    return await services.listing.list_orders(page, limit, q)


@router.post(
    "", response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    body: OrderCreate,
    services: OrderServices = Depends(get_order_services),
):
    """Create a PENDING order; confirmation follows asynchronously."""
    return await services.creation.create_order(body.model_dump())
