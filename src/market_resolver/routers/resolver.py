"""Trigger route for resolution passes (called by an external scheduler)."""
import logging

from fastapi import APIRouter, Depends

from market_resolver.deps import ResolverDep, require_cron_secret
from market_resolver.services import PassSummary

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/resolver", tags=["resolver"])


@router.post(
    "/run",
    response_model=PassSummary,
    dependencies=[Depends(require_cron_secret)],
)
async def run_resolver(resolver: ResolverDep) -> PassSummary:
    """Run one resolution pass and return its summary.

    A call that arrives while a pass is running returns at once with
    ``skipped_overlap`` set.
    """
    logger.info("Resolution pass triggered over HTTP")
    return await resolver.run_pass()
