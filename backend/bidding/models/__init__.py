# backend/bidding/models/__init__.py
from ..database import Base
from .user import User, Role
from .project import Project, ProjectStatus, InvalidTransition
from .bid import Bid
from .deliverable import Deliverable

__all__ = [
    "Base",
    "User",
    "Role",
    "Project",
    "ProjectStatus",
    "InvalidTransition",
    "Bid",
    "Deliverable"
]
