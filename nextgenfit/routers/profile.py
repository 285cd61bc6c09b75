# routers/profile.py

from fastapi import APIRouter, Depends, HTTPException

from nextgenfit.crud.routine import RoutinePersistence
from nextgenfit.dependencies import get_current_user, get_persistence

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/me")
async def read_user_info(
    current_user: dict = Depends(get_current_user),
    persistence: RoutinePersistence = Depends(get_persistence),
):
    profile = await persistence.get_user_profile()
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found.")
    return {"user_id": current_user["user_id"], "profile": profile}
