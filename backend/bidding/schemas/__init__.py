# backend/bidding/schemas/__init__.py
from .base import MessageResponse
from .user import UserSummary, UserProfile, SignupRequest, LoginRequest, TokenResponse, MeResponse
from .bid import Bid, BidCreate, BidUpdate, BidDelete, BidEnvelope
from .deliverable import Deliverable, DeliverableEnvelope
from .project import (
    Project, ProjectCreate, ProjectDetail, ProjectEnvelope, ProjectList,
    SelectBidRequest, CompleteProjectRequest
)

__all__ = [
    "MessageResponse",
    "UserSummary", "UserProfile", "SignupRequest", "LoginRequest", "TokenResponse", "MeResponse",
    "Bid", "BidCreate", "BidUpdate", "BidDelete", "BidEnvelope",
    "Deliverable", "DeliverableEnvelope",
    "Project", "ProjectCreate", "ProjectDetail", "ProjectEnvelope", "ProjectList",
    "SelectBidRequest", "CompleteProjectRequest"
]
