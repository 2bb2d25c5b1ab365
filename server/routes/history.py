"""History endpoints: retrieve and delete stored generated content."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from server.database import ARTIFACT_KINDS, HistoryStore
from server.dependencies import get_api_key, get_history_store
from server.schemas.responses import HistoryEntryDTO

router = APIRouter(prefix="/v1", tags=["History"], dependencies=[Depends(get_api_key)])


def _require_store(history: HistoryStore | None = Depends(get_history_store)) -> HistoryStore:
    if history is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="History is disabled"
        )
    return history


@router.get("/history", response_model=List[HistoryEntryDTO])
async def list_history(
    limit: int = Query(100, ge=1, le=1000),
    kind: Optional[str] = None,
    history: HistoryStore = Depends(_require_store),
):
    """Return recent generated content (newest first)."""
    if kind is not None and kind not in ARTIFACT_KINDS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"kind must be one of {', '.join(ARTIFACT_KINDS)}",
        )
    return history.list(limit=limit, kind=kind)


@router.delete("/history/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(entry_id: int, history: HistoryStore = Depends(_require_store)):
    """Delete a single history entry by ID."""
    if not history.delete(entry_id):
        raise HTTPException(status_code=404, detail="History entry not found")


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
async def clear_history(history: HistoryStore = Depends(_require_store)):
    """Delete all history entries."""
    history.clear()
