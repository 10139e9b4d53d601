# backend/bidding/api/deliverables.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from ..errors import BiddingError, ServerError
from ..schemas.deliverable import Deliverable as DeliverableSchema, DeliverableEnvelope
from ..services.auth import TokenIdentity, get_current_identity
from ..services.lifecycle import ProjectLifecycleManager, get_lifecycle_manager
from ..utils.files import stage_upload
from ..utils.logging import api_logger

router = APIRouter(prefix="/api/project", tags=["deliverables"])


@router.post("/deliver", response_model=DeliverableEnvelope, status_code=status.HTTP_201_CREATED)
async def submit_deliverable(
        project_id: Optional[str] = Form(None, alias="projectId"),
        file: Optional[UploadFile] = File(None),
        identity: TokenIdentity = Depends(get_current_identity),
        lifecycle: ProjectLifecycleManager = Depends(get_lifecycle_manager)
):
    """Accept a single PDF deliverable from the selected seller"""
    api_logger.info("Receiving deliverable", extra={
        "project_id": project_id,
        "seller_id": identity.user_id,
        "file_name": file.filename if file else None,
        "content_type": file.content_type if file else None
    })

    try:
        staged_path = await stage_upload(file)
        deliverable = lifecycle.submit_deliverable(identity, project_id, staged_path)
        return {"deliverable": DeliverableSchema.model_validate(deliverable)}
    except BiddingError as e:
        api_logger.warning("Deliverable rejected", extra={"project_id": project_id, "reason": e.message})
        raise
    except Exception as e:
        lifecycle.db.rollback()
        api_logger.error("Failed to submit deliverable", extra={
            "project_id": project_id,
            "error": str(e)
        }, exc_info=True)
        raise ServerError("Failed to submit deliverable")
