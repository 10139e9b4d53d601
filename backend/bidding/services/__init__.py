# backend/bidding/services/__init__.py
from .notifications import notification_service
from .storage import storage_backend

__all__ = ["notification_service", "storage_backend"]
