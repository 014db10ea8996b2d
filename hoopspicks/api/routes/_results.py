from __future__ import annotations

from fastapi import HTTPException, status

from hoopspicks.services.action_state import ActionState


def unwrap(result: ActionState):
    """Return result.data or raise the matching HTTPException."""
    if result.is_success:
        return result.data
    if result.not_found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.message)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=result.message)
