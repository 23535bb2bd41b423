# app/domains/user/service.py
import logging
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.exceptions.base import NotFoundError
from app.schemas.profile import ProfileUpdate
from app.shared.filters import apply_sort
from app.shared.pagination import PaginationParams, paginate
from models.profile import Profile

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = ("email", "username", "name", "is_admin", "created_at")


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_profile(self, user_id: UUID) -> Optional[Profile]:
        """Get a profile by its auth user id."""
        result = await self.db.execute(select(Profile).where(Profile.id == user_id))
        return result.scalar_one_or_none()


    async def get_or_create_profile(self, user_id: UUID, email: Optional[str] = None) -> Profile:
        """Get the caller's profile, creating an empty one on first sight."""
        profile = await self.get_profile(user_id)
        if profile:
            return profile

        profile = Profile(id=user_id, email=email, is_admin=False)
        try:
            self.db.add(profile)
            await self.db.commit()
            await self.db.refresh(profile)
            logger.info(f"Created profile for user {user_id}")
            return profile
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to create profile for user {user_id}")
            raise

    async def is_admin(self, user_id: UUID) -> bool:
        result = await self.db.execute(select(Profile.is_admin).where(Profile.id == user_id))
        return bool(result.scalar_one_or_none())

    async def list_profiles(
        self,
        search: Optional[str] = None,
        pagination: Optional[PaginationParams] = None,
        sort: Optional[str] = None,
        order: str = "desc",
    ) -> Dict[str, Any]:
        stmt = select(Profile)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(Profile.email.ilike(pattern), Profile.username.ilike(pattern), Profile.name.ilike(pattern))
            )
        stmt = apply_sort(stmt, Profile, sort, order, SORTABLE_COLUMNS, Profile.created_at.desc())
        return await paginate(self.db, stmt, pagination or PaginationParams())

    async def update_profile(self, user_id: UUID, profile_data: ProfileUpdate) -> Profile:
        profile = await self.get_profile(user_id)
        if not profile:
            raise NotFoundError("User not found")

        for field, value in profile_data.model_dump(exclude_unset=True).items():
            setattr(profile, field, value)

        try:
            await self.db.commit()
            await self.db.refresh(profile)
            return profile
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to update profile {user_id}")
            raise

    async def set_admin(self, user_id: UUID, is_admin: bool) -> Profile:
        profile = await self.get_profile(user_id)
        if not profile:
            raise NotFoundError("User not found")
        profile.is_admin = is_admin
        await self.db.commit()
        await self.db.refresh(profile)
        logger.info(f"Admin flag for user {user_id} set to {is_admin}")
        return profile

    async def toggle_admin(self, user_id: UUID) -> Profile:
        profile = await self.get_profile(user_id)
        if not profile:
            raise NotFoundError("User not found")
        return await self.set_admin(user_id, not profile.is_admin)

    async def count_profiles(self, admins_only: bool = False) -> int:
        stmt = select(func.count(Profile.id))
        if admins_only:
            stmt = stmt.where(Profile.is_admin.is_(True))
        result = await self.db.execute(stmt)
        return result.scalar() or 0
