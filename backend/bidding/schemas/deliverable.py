# backend/bidding/schemas/deliverable.py
from typing import Optional

from pydantic import BaseModel

from .base import BaseSchema, TimestampMixin
from .user import UserSummary


class Deliverable(BaseSchema, TimestampMixin):
    id: int
    project_id: int
    seller_id: int
    file_url: str
    seller: Optional[UserSummary] = None


class DeliverableEnvelope(BaseModel):
    deliverable: Deliverable
