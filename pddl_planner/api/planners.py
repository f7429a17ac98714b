"""
Planners API endpoints
"""

from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request

router = APIRouter()


@router.get("/")
@router.get("")
async def list_planners(request: Request, status: Optional[str] = None) -> List[Dict]:
    """Get all registered planners"""
    registry = request.app.state.orchestrator.registry
    planners = [asdict(info) for info in registry.list_planners()]

    if status and status != "all":
        planners = [p for p in planners if p["status"] == status]

    return planners


@router.get("/available")
async def get_available_planners(request: Request) -> Dict:
    """Get the names of the planners installed on this host"""
    registry = request.app.state.orchestrator.registry
    return {
        "registered": registry.list_names(),
        "available": registry.available_names(),
    }


@router.get("/{key}")
async def get_planner(key: str, request: Request) -> Dict:
    """Get a planner by its key"""
    plugin = request.app.state.orchestrator.registry.get_plugin(key)
    if plugin is None:
        raise HTTPException(status_code=404, detail=f"Planner '{key}' not found")
    return asdict(plugin.to_info())
