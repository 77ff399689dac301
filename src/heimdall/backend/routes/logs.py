"""
Audit log endpoints for the admin screen
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from ..audit_store import AuditLogStore
from ..dependencies import get_audit_store, require_token

router = APIRouter(tags=["logs"], dependencies=[Depends(require_token)])


class AuditLogOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    scan_id: Optional[str] = None
    zone_id: str = Field(alias="zoneId")
    timestamp: str
    violation: bool
    message: str
    person_count: int = Field(alias="personCount")
    details: List[str] = Field(default_factory=list)


@router.get("/logs", response_model=List[AuditLogOut], response_model_by_alias=True)
def list_logs(
    search: Optional[str] = Query(None, description="Match message or zone"),
    violation: Optional[bool] = Query(None, description="Only violations / only compliant"),
    limit: int = Query(100, ge=1, le=1000, description="Max results to return"),
    audit_store: AuditLogStore = Depends(get_audit_store),
):
    """
    Newest scans first.

    **Examples:**
    - All logs: `/logs`
    - Violations only: `/logs?violation=true`
    - One zone: `/logs?search=zone-b`
    """
    return audit_store.list(search=search, violation=violation, limit=limit)


@router.get("/stats")
def get_statistics(audit_store: AuditLogStore = Depends(get_audit_store)):
    """Header counters of the admin screen"""
    return audit_store.stats()


@router.delete("/logs")
def clear_logs(audit_store: AuditLogStore = Depends(get_audit_store)):
    """Drop every audit record (memory and disk)"""
    try:
        removed = audit_store.clear()
    except OSError as e:
        raise HTTPException(status_code=500, detail=f"Could not clear audit log: {e}")
    return {"message": f"Cleared {removed} audit records", "removed": removed}
