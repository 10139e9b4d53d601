# backend/bidding/models/user.py
import enum

from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship

from ..database import Base
from ..utils.dates import utcnow


class Role(str, enum.Enum):
    BUYER = "BUYER"
    SELLER = "SELLER"

    @property
    def can_create_projects(self) -> bool:
        return self is Role.BUYER

    @property
    def can_select_bids(self) -> bool:
        return self is Role.BUYER

    @property
    def can_complete(self) -> bool:
        return self is Role.BUYER

    @property
    def can_bid(self) -> bool:
        return self is Role.SELLER

    @property
    def can_deliver(self) -> bool:
        return self is Role.SELLER


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash
    name = Column(String(255), nullable=False)
    role = Column(Enum(Role), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    projects = relationship("Project", back_populates="buyer", foreign_keys="Project.buyer_id")
    bids = relationship("Bid", back_populates="seller")
    deliverables = relationship("Deliverable", back_populates="seller")
