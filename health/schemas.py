# ============================================================================
# WATCHER API SCHEMAS
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Infrastructure - Response schemas
# PURPOSE: Pydantic models for the watcher endpoints
# CREATED: 19 OCT 2026
# ============================================================================
"""
Watcher API Schemas

Response models for the watcher router.
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from health.registry import WatcherRegistration


class WatcherInfo(BaseModel):
    """A registered watcher."""
    name: str = Field(..., description="Unique watcher name")
    group: Optional[str] = Field(None, description="Group the watcher belongs to")
    watcher_type: str = Field(..., description="Type tag, e.g. 'mongodb'")
    interval_seconds: float = Field(..., gt=0, description="Interval between checks")

    @classmethod
    def from_registration(cls, registration: WatcherRegistration) -> "WatcherInfo":
        return cls(**registration.to_dict())


class WatcherListResponse(BaseModel):
    """All registered watchers."""
    count: int = Field(..., ge=0)
    watchers: List[WatcherInfo] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "count": 1,
                    "watchers": [
                        {
                            "name": "MongoDB Watcher",
                            "group": None,
                            "watcher_type": "mongodb",
                            "interval_seconds": 5.0,
                        }
                    ],
                }
            ]
        }
    }


class ErrorResponse(BaseModel):
    """Error body for unknown watchers and failed checks."""
    error: str
    watcher_name: Optional[str] = None


__all__ = [
    "WatcherInfo",
    "WatcherListResponse",
    "ErrorResponse",
]
