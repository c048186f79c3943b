"""Drills module for the drill library."""

from planner.drills.router import router
from planner.drills.schemas import DeleteAllResponse, DrillCreate, DrillResponse, DrillUpdate
from planner.drills.service import (
    CategoryNotFoundError,
    DrillService,
    DuplicateDrillError,
    get_drill_service,
)

__all__ = [
    "router",
    "DrillCreate",
    "DrillUpdate",
    "DrillResponse",
    "DeleteAllResponse",
    "DrillService",
    "DuplicateDrillError",
    "CategoryNotFoundError",
    "get_drill_service",
]
