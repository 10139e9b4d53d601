# backend/bidding/services/lifecycle.py
"""Project lifecycle: creation, bidding, selection, delivery and completion.

Every operation takes the caller's identity, runs its role and ownership
checks, then validates input and state in a fixed order so that the first
failing check decides the error. Status changes go through
``ProjectStatus.transition`` and are written with a conditional UPDATE on the
current status, so two concurrent requests cannot both move the same project.
"""
import math
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from fastapi import BackgroundTasks, Depends
from sqlalchemy import update
from sqlalchemy.orm import Session, joinedload, selectinload

from ..database import get_db
from ..errors import Forbidden, NotFound, ValidationError
from ..models import Bid, Deliverable, Project, ProjectStatus, User
from ..models.project import InvalidTransition
from ..utils.dates import has_passed, parse_datetime, utcnow
from ..utils.files import delete_file
from ..utils.logging import service_logger
from .auth import TokenIdentity
from .notifications import (
    Notification,
    NotificationService,
    bid_selected_notification,
    get_notifier,
    notification_service,
    project_completed_notifications,
)
from .storage import DELIVERABLES_FOLDER, StorageBackend, get_storage, storage_backend

Dispatch = Callable[[Notification], object]


def parse_id(value, message: str) -> int:
    """Accept integer ids or numeric strings"""
    if isinstance(value, bool):
        raise ValidationError(message)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValidationError(message)


def _missing(*values) -> bool:
    return any(value is None or (isinstance(value, str) and not value.strip()) for value in values)


class ProjectLifecycleManager:
    def __init__(
            self,
            db: Session,
            storage: Optional[StorageBackend] = None,
            dispatch: Optional[Dispatch] = None,
            clock: Callable[[], datetime] = utcnow
    ):
        self.db = db
        self.storage = storage or storage_backend
        self.dispatch = dispatch or notification_service.notify
        self.clock = clock

    # -- lookups -----------------------------------------------------------

    def _get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise NotFound("User not found")
        return user

    def _get_project(self, project_id: int, *options) -> Project:
        project = self.db.query(Project).options(*options).filter(Project.id == project_id).first()
        if project is None:
            service_logger.warning("Project not found", extra={"project_id": project_id})
            raise NotFound("Project not found")
        return project

    def _get_owned_bid(self, identity: TokenIdentity, bid_id: int, action: str) -> Bid:
        bid = self.db.query(Bid).options(joinedload(Bid.project)).filter(Bid.id == bid_id).first()
        if bid is None:
            raise NotFound("Bid not found")
        if bid.seller_id != identity.user_id:
            service_logger.warning(f"Rejected {action} of another seller's bid", extra={
                "bid_id": bid_id,
                "user_id": identity.user_id
            })
            raise Forbidden(f"You can only {action} your own bids")
        if has_passed(bid.project.deadline, self.clock()):
            raise ValidationError("Project bidding deadline has passed")
        return bid

    # -- state machine -----------------------------------------------------

    @staticmethod
    def _require_transition(project: Project, target: ProjectStatus, message: str) -> ProjectStatus:
        try:
            return ProjectStatus(project.status).transition(target)
        except InvalidTransition:
            raise ValidationError(message)

    def _advance(self, project: Project, target: ProjectStatus, message: str, **changes) -> Project:
        """Move `project` to `target`, only if nobody else moved it first"""
        current = ProjectStatus(project.status)
        new_status = self._require_transition(project, target, message)

        result = self.db.execute(
            update(Project)
            .where(Project.id == project.id, Project.status == current)
            .values(status=new_status, updated_at=utcnow(), **changes)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.db.rollback()
            service_logger.warning("Concurrent status change detected", extra={
                "project_id": project.id,
                "expected_status": current.value,
                "target_status": target.value
            })
            raise ValidationError(message)

        self.db.commit()
        self.db.refresh(project)
        service_logger.info("Project status changed", extra={
            "project_id": project.id,
            "from_status": current.value,
            "to_status": new_status.value
        })
        return project

    # -- projects ----------------------------------------------------------

    def create_project(
            self,
            identity: TokenIdentity,
            title,
            description,
            budget_min,
            budget_max,
            deadline
    ) -> Project:
        if not identity.role.can_create_projects:
            raise Forbidden("Only buyers can create projects")

        if _missing(title, description, budget_min, budget_max, deadline):
            raise ValidationError("All fields are required")

        finite = math.isfinite(budget_min) and math.isfinite(budget_max)
        if not finite or budget_min < 0 or budget_max < budget_min:
            raise ValidationError("Invalid budget range")

        deadline_at = parse_datetime(deadline)
        if deadline_at is None or deadline_at <= self.clock():
            raise ValidationError("Deadline must be a valid date in the future")

        project = Project(
            title=title,
            description=description,
            budget_min=budget_min,
            budget_max=budget_max,
            deadline=deadline_at,
            status=ProjectStatus.OPEN,
            buyer_id=identity.user_id,
        )
        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)

        service_logger.info("Project created", extra={
            "project_id": project.id,
            "buyer_id": identity.user_id
        })
        return project

    def list_projects(self) -> List[Project]:
        return (
            self.db.query(Project)
            .options(joinedload(Project.buyer))
            .order_by(Project.created_at.desc(), Project.id.desc())
            .all()
        )

    def get_project(self, project_id) -> Project:
        try:
            project_id = parse_id(project_id, "Invalid Project ID")
        except ValidationError:
            raise NotFound("Project not found")
        return self._get_project(
            project_id,
            joinedload(Project.buyer),
            selectinload(Project.bids).joinedload(Bid.seller),
            joinedload(Project.selected_bid).joinedload(Bid.seller),
            selectinload(Project.deliverables).joinedload(Deliverable.seller),
        )

    # -- bids --------------------------------------------------------------

    def create_bid(self, identity: TokenIdentity, project_id, amount, message: Optional[str] = None) -> Bid:
        if not identity.role.can_bid:
            raise Forbidden("Only sellers can place bids")

        if _missing(project_id, amount):
            raise ValidationError("Project ID and amount are required")

        if not math.isfinite(amount) or amount <= 0:
            raise ValidationError("Bid amount must be greater than 0")

        project = self._get_project(parse_id(project_id, "Invalid Project ID"))
        if has_passed(project.deadline, self.clock()):
            raise ValidationError("Project bidding deadline has passed")

        bid = Bid(
            amount=amount,
            message=message or "",
            project_id=project.id,
            seller_id=identity.user_id,
        )
        self.db.add(bid)
        self.db.commit()
        self.db.refresh(bid)

        service_logger.info("Bid placed", extra={
            "bid_id": bid.id,
            "project_id": project.id,
            "seller_id": identity.user_id
        })
        return bid

    def update_bid(self, identity: TokenIdentity, bid_id, amount, message: Optional[str] = None) -> Bid:
        if _missing(bid_id, amount):
            raise ValidationError("Bid ID and amount are required")

        if not math.isfinite(amount) or amount <= 0:
            raise ValidationError("Bid amount must be greater than 0")

        bid = self._get_owned_bid(identity, parse_id(bid_id, "Invalid Bid ID"), "edit")
        bid.amount = amount
        bid.message = message or bid.message
        self.db.commit()
        self.db.refresh(bid)

        service_logger.info("Bid updated", extra={"bid_id": bid.id, "amount": amount})
        return bid

    def delete_bid(self, identity: TokenIdentity, bid_id) -> None:
        if _missing(bid_id):
            raise ValidationError("Bid ID is required")

        bid = self._get_owned_bid(identity, parse_id(bid_id, "Invalid Bid ID"), "delete")
        if bid.project.selected_bid_id == bid.id:
            raise ValidationError("Cannot delete the selected bid")

        self.db.delete(bid)
        self.db.commit()
        service_logger.info("Bid deleted", extra={"bid_id": bid.id})

    # -- transitions -------------------------------------------------------

    def select_bid(self, identity: TokenIdentity, project_id, bid_id) -> Project:
        """OPEN -> ASSIGNED; notifies the winning seller"""
        if not identity.role.can_select_bids:
            raise Forbidden("Only buyers can select bids")

        if _missing(project_id, bid_id):
            raise ValidationError("Project ID and Bid ID are required")
        project_id = parse_id(project_id, "Invalid Project ID")
        bid_id = parse_id(bid_id, "Invalid Bid ID")

        project = self._get_project(project_id)
        if project.buyer_id != identity.user_id:
            raise Forbidden("You can only select bids for your own projects")

        not_open = "Project is not open for bid selection"
        self._require_transition(project, ProjectStatus.ASSIGNED, not_open)

        bid = self.db.query(Bid).options(joinedload(Bid.seller)).filter(Bid.id == bid_id).first()
        if bid is None or bid.project_id != project.id:
            raise NotFound("Bid not found or does not belong to this project")

        project = self._advance(project, ProjectStatus.ASSIGNED, not_open, selected_bid_id=bid.id)

        buyer = self._get_user(identity.user_id)
        self.dispatch(bid_selected_notification(project, bid, buyer))
        return self.get_project(project.id)

    def submit_deliverable(self, identity: TokenIdentity, project_id, staged_path: Optional[Path]) -> Deliverable:
        """Store a staged file for an ASSIGNED project; the staged file is always removed"""
        try:
            if not identity.role.can_deliver:
                raise Forbidden("Only sellers can submit deliverables")

            if _missing(project_id) or staged_path is None:
                raise ValidationError("Project ID and file are required")

            project = self._get_project(
                parse_id(project_id, "Invalid Project ID"),
                joinedload(Project.selected_bid)
            )
            if ProjectStatus(project.status) is not ProjectStatus.ASSIGNED:
                raise ValidationError("Project is not in ASSIGNED status")

            if project.selected_bid is None or project.selected_bid.seller_id != identity.user_id:
                raise Forbidden("You are not the selected seller for this project")

            file_url = self.storage.upload(staged_path, DELIVERABLES_FOLDER)
        finally:
            delete_file(staged_path)

        deliverable = Deliverable(file_url=file_url, project_id=project.id, seller_id=identity.user_id)
        self.db.add(deliverable)
        self.db.commit()
        self.db.refresh(deliverable)

        service_logger.info("Deliverable submitted", extra={
            "deliverable_id": deliverable.id,
            "project_id": project.id,
            "seller_id": identity.user_id
        })
        return deliverable

    def complete_project(self, identity: TokenIdentity, project_id) -> Project:
        """ASSIGNED -> COMPLETED; notifies seller and buyer"""
        if not identity.role.can_complete:
            raise Forbidden("Only buyers can mark projects as completed")

        if _missing(project_id):
            raise ValidationError("Project ID is required")

        project = self._get_project(
            parse_id(project_id, "Invalid Project ID"),
            joinedload(Project.buyer),
            joinedload(Project.selected_bid).joinedload(Bid.seller),
            selectinload(Project.deliverables),
        )
        if project.buyer_id != identity.user_id:
            raise Forbidden("You can only complete your own projects")

        not_assigned = "Project is not in ASSIGNED status"
        self._require_transition(project, ProjectStatus.COMPLETED, not_assigned)

        if not project.deliverables:
            raise ValidationError("Cannot complete project without deliverables")

        if project.selected_bid is None or project.selected_bid.seller is None:
            raise ValidationError("No selected bid or seller found for this project")

        seller = project.selected_bid.seller
        buyer = project.buyer
        project = self._advance(project, ProjectStatus.COMPLETED, not_assigned)

        for notification in project_completed_notifications(project, seller, buyer):
            self.dispatch(notification)
        return self.get_project(project.id)


def get_lifecycle_manager(
        background_tasks: BackgroundTasks,
        db: Session = Depends(get_db),
        notifier: NotificationService = Depends(get_notifier),
        storage: StorageBackend = Depends(get_storage)
) -> ProjectLifecycleManager:
    """Request-scoped manager; notifications go out after the response is sent"""
    def dispatch(notification: Notification) -> None:
        background_tasks.add_task(notifier.notify, notification)

    return ProjectLifecycleManager(db, storage=storage, dispatch=dispatch)
