"""
History endpoints.

Past analyses, newest first, bounded to the most recent 20.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.dependencies import get_history_store

router = APIRouter(tags=["history"])


@router.get("/history")
async def get_history():
    """
    Get analysis history.

    Response:
        {
            "items": [...],
            "count": N
        }
    """
    items = get_history_store().get_history()
    return {
        "items": [item.to_dict() for item in items],
        "count": len(items),
    }


@router.get("/history/{item_id}")
async def get_history_item(item_id: str):
    """Re-open a past analysis by ID."""
    item = get_history_store().get(item_id)
    if not item:
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "detail": f"History item {item_id} not found",
            },
        )

    return {"item": item.to_dict()}


@router.delete("/history")
async def clear_history():
    """Remove all history items."""
    get_history_store().clear_history()
    return {"success": True}
