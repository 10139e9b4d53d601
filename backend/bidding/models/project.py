# backend/bidding/models/project.py
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, Float, ForeignKey, Enum
from sqlalchemy.orm import relationship

from ..database import Base
from ..utils.dates import utcnow
from ..errors import ValidationError


class InvalidTransition(ValidationError):
    def __init__(self, current: "ProjectStatus", target: "ProjectStatus"):
        super().__init__(f"Cannot move project from {current.value} to {target.value}")
        self.current = current
        self.target = target


class ProjectStatus(str, enum.Enum):
    OPEN = "OPEN"
    ASSIGNED = "ASSIGNED"
    COMPLETED = "COMPLETED"

    def can_transition(self, target: "ProjectStatus") -> bool:
        return target in _TRANSITIONS.get(self, ())

    def transition(self, target: "ProjectStatus") -> "ProjectStatus":
        """Return `target` if the edge is legal, otherwise raise InvalidTransition"""
        if not self.can_transition(target):
            raise InvalidTransition(self, target)
        return target


# Status only moves forward: OPEN -> ASSIGNED -> COMPLETED
_TRANSITIONS = {
    ProjectStatus.OPEN: (ProjectStatus.ASSIGNED,),
    ProjectStatus.ASSIGNED: (ProjectStatus.COMPLETED,),
    ProjectStatus.COMPLETED: (),
}


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    budget_min = Column(Float, nullable=False)
    budget_max = Column(Float, nullable=False)
    deadline = Column(DateTime(timezone=True), nullable=False)
    status = Column(Enum(ProjectStatus), nullable=False, default=ProjectStatus.OPEN)
    buyer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    # use_alter breaks the projects <-> bids foreign key cycle at create time
    selected_bid_id = Column(
        Integer,
        ForeignKey("bids.id", use_alter=True, name="fk_projects_selected_bid"),
        nullable=True
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    buyer = relationship("User", back_populates="projects", foreign_keys=[buyer_id])
    bids = relationship(
        "Bid",
        back_populates="project",
        foreign_keys="Bid.project_id",
        cascade="all, delete-orphan",
        order_by="Bid.created_at.desc()"
    )
    selected_bid = relationship("Bid", foreign_keys=[selected_bid_id], post_update=True)
    deliverables = relationship(
        "Deliverable",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Deliverable.created_at.desc()"
    )
