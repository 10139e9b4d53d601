# backend/bidding/api/__init__.py
from .auth import router as auth_router
from .projects import router as projects_router
from .bids import router as bids_router
from .deliverables import router as deliverables_router

__all__ = ["auth_router", "projects_router", "bids_router", "deliverables_router"]
