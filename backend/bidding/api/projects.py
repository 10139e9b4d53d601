# backend/bidding/api/projects.py
from fastapi import APIRouter, Depends, status

from ..errors import BiddingError, ServerError
from ..schemas.project import (
    CompleteProjectRequest,
    Project as ProjectSchema,
    ProjectCreate,
    ProjectDetail,
    ProjectEnvelope,
    ProjectList,
    SelectBidRequest,
)
from ..services.auth import TokenIdentity, get_current_identity
from ..services.lifecycle import ProjectLifecycleManager, get_lifecycle_manager
from ..utils.logging import api_logger

router = APIRouter(prefix="/api/project", tags=["projects"])


@router.post("/create", response_model=ProjectEnvelope, status_code=status.HTTP_201_CREATED)
async def create_project(
        payload: ProjectCreate,
        identity: TokenIdentity = Depends(get_current_identity),
        lifecycle: ProjectLifecycleManager = Depends(get_lifecycle_manager)
):
    api_logger.info("Creating new project", extra={
        "user_id": identity.user_id,
        "project_title": payload.title
    })

    try:
        project = lifecycle.create_project(
            identity,
            payload.title,
            payload.description,
            payload.budget_min,
            payload.budget_max,
            payload.deadline
        )
        return {"project": ProjectDetail.model_validate(project)}
    except BiddingError as e:
        api_logger.warning("Project creation rejected", extra={"user_id": identity.user_id, "reason": e.message})
        raise
    except Exception as e:
        lifecycle.db.rollback()
        api_logger.error("Failed to create project", extra={"error": str(e)}, exc_info=True)
        raise ServerError("Failed to create project")


@router.get("/", response_model=ProjectList)
async def list_projects(
        identity: TokenIdentity = Depends(get_current_identity),
        lifecycle: ProjectLifecycleManager = Depends(get_lifecycle_manager)
):
    """List all projects, newest first"""
    try:
        projects = lifecycle.list_projects()
        api_logger.info(f"Found {len(projects)} projects")
        return {"projects": [ProjectSchema.model_validate(p) for p in projects]}
    except Exception as e:
        api_logger.error("Failed to fetch projects", extra={"error": str(e)}, exc_info=True)
        raise ServerError("Failed to fetch projects")


@router.post("/select-bid", response_model=ProjectEnvelope)
async def select_bid(
        payload: SelectBidRequest,
        identity: TokenIdentity = Depends(get_current_identity),
        lifecycle: ProjectLifecycleManager = Depends(get_lifecycle_manager)
):
    api_logger.info("Selecting bid", extra={
        "project_id": payload.project_id,
        "bid_id": payload.bid_id,
        "user_id": identity.user_id
    })

    try:
        project = lifecycle.select_bid(identity, payload.project_id, payload.bid_id)
        return {"project": ProjectDetail.model_validate(project)}
    except BiddingError as e:
        api_logger.warning("Bid selection rejected", extra={"project_id": payload.project_id, "reason": e.message})
        raise
    except Exception as e:
        lifecycle.db.rollback()
        api_logger.error("Failed to select bid", extra={
            "project_id": payload.project_id,
            "error": str(e)
        }, exc_info=True)
        raise ServerError("Failed to select bid")


@router.post("/complete", response_model=ProjectEnvelope)
async def complete_project(
        payload: CompleteProjectRequest,
        identity: TokenIdentity = Depends(get_current_identity),
        lifecycle: ProjectLifecycleManager = Depends(get_lifecycle_manager)
):
    api_logger.info("Completing project", extra={
        "project_id": payload.project_id,
        "user_id": identity.user_id
    })

    try:
        project = lifecycle.complete_project(identity, payload.project_id)
        return {"project": ProjectDetail.model_validate(project)}
    except BiddingError as e:
        api_logger.warning("Project completion rejected", extra={"project_id": payload.project_id, "reason": e.message})
        raise
    except Exception as e:
        lifecycle.db.rollback()
        api_logger.error("Failed to complete project", extra={
            "project_id": payload.project_id,
            "error": str(e)
        }, exc_info=True)
        raise ServerError("Failed to complete project")


@router.get("/{project_id}", response_model=ProjectEnvelope)
async def get_project(
        project_id: str,
        identity: TokenIdentity = Depends(get_current_identity),
        lifecycle: ProjectLifecycleManager = Depends(get_lifecycle_manager)
):
    api_logger.info("Fetching project", extra={"project_id": project_id})

    try:
        project = lifecycle.get_project(project_id)
        return {"project": ProjectDetail.model_validate(project)}
    except BiddingError:
        raise
    except Exception as e:
        api_logger.error("Failed to fetch project", extra={
            "project_id": project_id,
            "error": str(e)
        }, exc_info=True)
        raise ServerError("Failed to fetch project")
