"""Order Services — explicit dependency bundle shared by routes and lifespan.

Invariants:
    - One store, one cache and one scheduler per bundle; services share them
    - Built once at startup (or per test) and passed explicitly — no module singletons

Design Decisions:
    - Dataclass bundle on app.state: routes resolve it through a FastAPI
      dependency that tests override
"""

from dataclasses import dataclass

from app.core.repository_protocols import OrderStore
from app.infrastructure.confirmation_scheduler import ConfirmationScheduler
from app.infrastructure.listing_cache import ResilientCache
from app.services.order_confirmation import OrderConfirmationJob
from app.services.order_creation import OrderCreationService
from app.services.order_listing import OrderListingService


@dataclass
class OrderServices:
    store: OrderStore
    cache: ResilientCache
    scheduler: ConfirmationScheduler
    listing: OrderListingService
    creation: OrderCreationService


def build_order_services(
    store: OrderStore,
    cache: ResilientCache,
    listing_ttl_seconds: int = 30,
    listing_default_limit: int = 10,
    confirmation_delay_seconds: float = 2.0,
) -> OrderServices:
    scheduler = ConfirmationScheduler(
        OrderConfirmationJob(store, cache), confirmation_delay_seconds,
    )
    return OrderServices(
        store=store,
        cache=cache,
        scheduler=scheduler,
        listing=OrderListingService(
            store, cache, listing_ttl_seconds, listing_default_limit,
        ),
        creation=OrderCreationService(store, cache, scheduler),
    )
