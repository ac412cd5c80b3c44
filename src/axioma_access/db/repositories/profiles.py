"""
axioma_access.db.repositories.profiles

Repository for `Profile` rows.

Responsibilities:
- Look up a profile by principal id.
- Create profiles (onboarding) and apply administrative changes: role, approval,
  and module grants.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from axioma_access.access.models import ModuleId, Role
from axioma_access.db.models import Profile


class ProfileRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_user_id(self, user_id: str) -> Profile | None:
        stmt = select(Profile).where(Profile.user_id == user_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def create(
        self,
        *,
        user_id: str,
        role: Role,
        approved: bool = False,
        active_modules: dict[ModuleId, bool] | None = None,
        full_name: str | None = None,
        company_id: uuid.UUID | None = None,
    ) -> Profile:
        profile = Profile(
            user_id=user_id,
            role=str(role),
            status_homologacao=approved,
            active_modules={str(k): v for k, v in (active_modules or {}).items()},
            full_name=full_name,
            company_id=company_id,
        )
        self._session.add(profile)
        await self._session.flush()
        return profile

    async def set_role(self, user_id: str, role: Role) -> Profile | None:
        profile = await self._locked(user_id)
        if profile is None:
            return None
        profile.role = str(role)
        return await self._touch(profile)

    async def set_approval(self, user_id: str, approved: bool) -> Profile | None:
        profile = await self._locked(user_id)
        if profile is None:
            return None
        profile.status_homologacao = approved
        return await self._touch(profile)

    async def set_module(self, user_id: str, module: ModuleId, entitled: bool) -> Profile | None:
        profile = await self._locked(user_id)
        if profile is None:
            return None
        # Reassign (not mutate) so the JSON column is flagged dirty.
        modules = dict(profile.active_modules or {})
        modules[str(module)] = entitled
        profile.active_modules = modules
        return await self._touch(profile)

    async def _locked(self, user_id: str) -> Profile | None:
        stmt = select(Profile).where(Profile.user_id == user_id).with_for_update()
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def _touch(self, profile: Profile) -> Profile:
        profile.updated_at = datetime.now(tz=UTC).replace(tzinfo=None)
        await self._session.flush()
        return profile


# --- Module Notes -----------------------------------------------------------
# Commits belong to the caller (API handlers); repositories only flush.
