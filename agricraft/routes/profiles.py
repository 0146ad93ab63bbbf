# agricraft/routes/profiles.py
from typing import List

from fastapi import APIRouter, Depends, Header, HTTPException

from .. import repository
from ..db import get_db
from ..schemas import Profile, RoleUpdate

router = APIRouter(prefix="/profiles", tags=["profiles"])


async def require_admin(x_user_id: str = Header(None), db=Depends(get_db)) -> Profile:
    """Caller identity comes from the auth layer in X-User-Id; only admins pass."""
    profile = await repository.get_profile(db, x_user_id) if x_user_id else None
    if profile is None or profile.role != "admin":
        raise HTTPException(status_code=403, detail="You do not have admin privileges.")
    return profile


@router.get("", response_model=List[Profile])
async def all_profiles(_admin: Profile = Depends(require_admin), db=Depends(get_db)):
    return await repository.list_profiles(db)


@router.get("/{user_id}", response_model=Profile)
async def profile_details(user_id: str, db=Depends(get_db)):
    profile = await repository.get_profile(db, user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.patch("/{user_id}", response_model=Profile)
async def change_role(
    user_id: str,
    req: RoleUpdate,
    _admin: Profile = Depends(require_admin),
    db=Depends(get_db),
):
    profile = await repository.update_profile_role(db, user_id, req.role)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile
