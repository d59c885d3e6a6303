"""Operator API: inspect and reset the failure governor."""

import logging

from fastapi import APIRouter, Depends

from accounts.api.v1.dependencies import GovernorDep, require_ops_secret
from accounts.schemas.ops import FailureCountResponse
from accounts.schemas.envelope import Envelope

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_ops_secret)])


@router.get("/failures", response_model=Envelope[FailureCountResponse])
async def get_failures(governor: GovernorDep):
    """Return the recovered-failure count and the termination threshold."""
    counter = governor.counter
    return Envelope(data=FailureCountResponse(count=counter.value, threshold=counter.threshold))


@router.post("/failures/reset", response_model=Envelope[FailureCountResponse])
async def reset_failures(governor: GovernorDep):
    """Zero the failure count."""
    previous = governor.counter.reset()
    logger.warning("Failure count reset by operator (was %d)", previous)
    return Envelope(
        message="failure count reset",
        data=FailureCountResponse(count=0, threshold=governor.counter.threshold),
    )
