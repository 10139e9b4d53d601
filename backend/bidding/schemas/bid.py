# backend/bidding/schemas/bid.py
from typing import Optional, Union

from pydantic import BaseModel, field_validator

from .base import BaseSchema, TimestampMixin, reject_bool
from .user import UserSummary


class BidCreate(BaseSchema):
    project_id: Optional[Union[int, str]] = None
    amount: Optional[float] = None
    message: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def amount_is_number(cls, value):
        return reject_bool(value)


class BidUpdate(BaseSchema):
    bid_id: Optional[Union[int, str]] = None
    amount: Optional[float] = None
    message: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def amount_is_number(cls, value):
        return reject_bool(value)


class BidDelete(BaseSchema):
    bid_id: Optional[Union[int, str]] = None


class Bid(BaseSchema, TimestampMixin):
    id: int
    project_id: int
    seller_id: int
    amount: float
    message: str = ""
    seller: Optional[UserSummary] = None


class BidEnvelope(BaseModel):
    bid: Bid
