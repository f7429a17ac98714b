"""
Planning API endpoints
"""

import logging
from typing import Dict, List

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from ..core.config import settings
from ..planners.errors import UnknownPlannerError
from ..planners.models import ExecutionMode, ExecutionRequest

logger = logging.getLogger(__name__)

router = APIRouter()


# ==================== SCHEMAS ====================

class PlanRequest(BaseModel):
    problem: str
    domain: str
    actions: str = ""
    planners: List[str] = Field(default_factory=list)
    timeout: float = Field(default_factory=lambda: settings.DEFAULT_TIMEOUT, gt=0, allow_inf_nan=False)
    mode: ExecutionMode = ExecutionMode.PARALLEL


# ==================== ENDPOINTS ====================

@router.post("/")
@router.post("")
async def plan(body: PlanRequest, request: Request) -> Dict:
    """Run the requested planners on a problem and return their results"""
    orchestrator = request.app.state.orchestrator

    execution_request = ExecutionRequest(
        problem=body.problem,
        domain=body.domain,
        actions=body.actions,
        planners=tuple(body.planners),
        timeout=body.timeout,
        mode=body.mode,
    )

    try:
        report = await orchestrator.run(execution_request)
    except UnknownPlannerError as exc:
        logger.warning("Rejected planning request: %s", exc)
        raise HTTPException(
            status_code=400,
            detail={"message": str(exc), "known_planners": exc.known},
        )

    return report.to_dict()
