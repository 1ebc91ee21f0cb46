"""API Dependencies — resolve explicitly-built services from application state.

Invariants:
    - Services are built in the lifespan and stored on app.state (never at import time)
    - Missing wiring is a startup bug: fails loudly with RuntimeError

Design Decisions:
    - FastAPI Depends over module globals: tests override get_order_services /
      get_database with in-memory doubles
"""

from fastapi import Request

from app.infrastructure.database import DatabaseSessionManager
from app.services.order_services import OrderServices


def get_order_services(request: Request) -> OrderServices:
    services = getattr(request.app.state, "order_services", None)
    if services is None:
        raise RuntimeError("Order services not initialized")
    return services


def get_database(request: Request) -> DatabaseSessionManager | None:
    return getattr(request.app.state, "db_manager", None)
