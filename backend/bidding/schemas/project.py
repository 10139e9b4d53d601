# backend/bidding/schemas/project.py
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, field_validator

from .base import BaseSchema, TimestampMixin, reject_bool
from .bid import Bid
from .deliverable import Deliverable
from .user import UserSummary
from ..models.project import ProjectStatus
from ..utils.dates import as_utc


class ProjectCreate(BaseSchema):
    # Presence is checked by the lifecycle manager so that role checks run first
    title: Optional[str] = None
    description: Optional[str] = None
    budget_min: Optional[float] = None
    budget_max: Optional[float] = None
    deadline: Optional[str] = None

    @field_validator("budget_min", "budget_max", mode="before")
    @classmethod
    def budgets_are_numbers(cls, value):
        return reject_bool(value)


class SelectBidRequest(BaseSchema):
    project_id: Optional[Union[int, str]] = None
    bid_id: Optional[Union[int, str]] = None


class CompleteProjectRequest(BaseSchema):
    project_id: Optional[Union[int, str]] = None


class Project(BaseSchema, TimestampMixin):
    id: int
    title: str
    description: str
    budget_min: float
    budget_max: float
    deadline: datetime
    status: ProjectStatus
    buyer_id: int
    selected_bid_id: Optional[int] = None
    buyer: Optional[UserSummary] = None

    @field_validator("deadline")
    @classmethod
    def deadline_as_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive datetimes; deadlines are stored in UTC
        return as_utc(value)


class ProjectDetail(Project):
    bids: List[Bid] = []
    selected_bid: Optional[Bid] = None
    deliverables: List[Deliverable] = []


class ProjectEnvelope(BaseModel):
    project: ProjectDetail


class ProjectList(BaseModel):
    projects: List[Project]
