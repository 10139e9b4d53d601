# backend/bidding/api/bids.py
from fastapi import APIRouter, Depends, status

from ..errors import BiddingError, ServerError
from ..schemas.base import MessageResponse
from ..schemas.bid import Bid as BidSchema, BidCreate, BidDelete, BidEnvelope, BidUpdate
from ..services.auth import TokenIdentity, get_current_identity
from ..services.lifecycle import ProjectLifecycleManager, get_lifecycle_manager
from ..utils.logging import api_logger

router = APIRouter(prefix="/api/project/bid", tags=["bids"])


@router.post("", response_model=BidEnvelope, status_code=status.HTTP_201_CREATED)
async def create_bid(
        payload: BidCreate,
        identity: TokenIdentity = Depends(get_current_identity),
        lifecycle: ProjectLifecycleManager = Depends(get_lifecycle_manager)
):
    api_logger.info("Placing bid", extra={
        "project_id": payload.project_id,
        "seller_id": identity.user_id,
        "amount": payload.amount
    })

    try:
        bid = lifecycle.create_bid(identity, payload.project_id, payload.amount, payload.message)
        return {"bid": BidSchema.model_validate(bid)}
    except BiddingError as e:
        api_logger.warning("Bid rejected", extra={"project_id": payload.project_id, "reason": e.message})
        raise
    except Exception as e:
        lifecycle.db.rollback()
        api_logger.error("Failed to place bid", extra={"error": str(e)}, exc_info=True)
        raise ServerError("Failed to place bid")


@router.put("", response_model=BidEnvelope)
async def update_bid(
        payload: BidUpdate,
        identity: TokenIdentity = Depends(get_current_identity),
        lifecycle: ProjectLifecycleManager = Depends(get_lifecycle_manager)
):
    api_logger.info("Updating bid", extra={
        "bid_id": payload.bid_id,
        "update_fields": list(payload.model_dump(exclude_unset=True).keys())
    })

    try:
        bid = lifecycle.update_bid(identity, payload.bid_id, payload.amount, payload.message)
        return {"bid": BidSchema.model_validate(bid)}
    except BiddingError as e:
        api_logger.warning("Bid update rejected", extra={"bid_id": payload.bid_id, "reason": e.message})
        raise
    except Exception as e:
        lifecycle.db.rollback()
        api_logger.error("Failed to update bid", extra={"bid_id": payload.bid_id, "error": str(e)}, exc_info=True)
        raise ServerError("Failed to update bid")


@router.delete("", response_model=MessageResponse)
async def delete_bid(
        payload: BidDelete,
        identity: TokenIdentity = Depends(get_current_identity),
        lifecycle: ProjectLifecycleManager = Depends(get_lifecycle_manager)
):
    api_logger.info("Deleting bid", extra={"bid_id": payload.bid_id})

    try:
        lifecycle.delete_bid(identity, payload.bid_id)
        return {"message": "Bid deleted successfully"}
    except BiddingError as e:
        api_logger.warning("Bid deletion rejected", extra={"bid_id": payload.bid_id, "reason": e.message})
        raise
    except Exception as e:
        lifecycle.db.rollback()
        api_logger.error(f"Failed to delete bid: {str(e)}", exc_info=True)
        raise ServerError("Failed to delete bid")
