"""Profile endpoints for the signed-in user."""

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_user, get_db
from app.core.security import AuthUser
from app.schemas.base import ResponseSchema
from app.schemas.profile import ProfileUpdate
from app.services import cached_queries

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=ResponseSchema)
async def get_me(current_user: AuthUser = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Get the caller's profile, creating it on first sign-in."""
    profile = await cached_queries.get_or_create_profile(db, current_user.id, current_user.email)
    return ResponseSchema(status="success", data=profile.model_dump(mode="json"))


@router.patch("/me", response_model=ResponseSchema)
async def update_me(
    profile_data: ProfileUpdate = Body(...),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update the caller's own profile fields. The admin flag is not writable here."""
    await cached_queries.get_or_create_profile(db, current_user.id, current_user.email)
    profile = await cached_queries.update_user_profile(db, current_user.id, profile_data)
    return ResponseSchema(
        status="success", message="Profile updated successfully", data=profile.model_dump(mode="json")
    )
