"""Claim verification API endpoints."""

import logging
from typing import List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ...domain.models.verification import ClaimVerificationResult
from ...infrastructure.dependencies import get_verification_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


class VerifyTextRequest(BaseModel):
    """Request model for text verification."""

    text: str = Field(..., min_length=1, max_length=5000, description="Text to verify")


class VerifyTextResponse(BaseModel):
    """Response model for text verification."""

    results: List[ClaimVerificationResult] = Field(..., description="One result per extracted claim")


@router.post("/verify", response_model=VerifyTextResponse)
async def verify_text(request: VerifyTextRequest) -> VerifyTextResponse:
    """Extract and verify every claim in the submitted text.

    Args:
        request: Text verification request

    Returns:
        Verification results in extraction order

    Raises:
        HTTPException: If the verification service cannot be set up
    """
    logger.info(f"Starting verification for text: {request.text[:100]}...")

    try:
        service = await get_verification_service()
    except Exception as e:
        logger.error(f"Verification service unavailable: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(status_code=503, detail=f"Verification service unavailable: {e}")

    results = await service.verify_claims_in_text(request.text)
    logger.info(f"Verification complete: {len(results)} results")
    return VerifyTextResponse(results=results)
