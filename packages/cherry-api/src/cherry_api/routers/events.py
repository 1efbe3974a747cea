"""Read-only access to the event log for observers."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from cherry_core.events import records_to_dicts

from ..dependencies import Dependencies, get_deps

router = APIRouter(tags=["events"])


@router.get("")
async def list_events(
    kind: Optional[str] = Query(default=None),
    emitter: Optional[str] = Query(default=None),
    limit: int = Query(default=100, ge=1, le=1000),
    deps: Dependencies = Depends(get_deps),
) -> List[Dict[str, Any]]:
    """Most recent events, oldest first."""
    records = deps.host.events.records(kind=kind, emitter=emitter)
    return records_to_dicts(records[-limit:])
