"""
axioma_access.api.routers.admin

Profile administration (master only).

Responsibilities:
- Onboard a profile, change its role, approve it, grant/revoke modules.
- Every route is gated by the access engine with a master-only policy.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_404_NOT_FOUND, HTTP_409_CONFLICT

from axioma_access.access.models import ModuleId, Role
from axioma_access.access.routes import ROUTE_POLICIES
from axioma_access.api.deps import db_session
from axioma_access.auth.deps import require_access
from axioma_access.db.models import Profile
from axioma_access.db.repositories.profiles import ProfileRepo
from axioma_access.observability.logging import get_logger

log = get_logger(__name__)

# Same policy the front end declares for its admin page.
ADMIN_PATH = "/admin"
ADMIN_POLICY = ROUTE_POLICIES[ADMIN_PATH]

router = APIRouter(
    prefix="/v1/admin/profiles",
    tags=["admin"],
    dependencies=[Depends(require_access(ADMIN_POLICY, requested_path=ADMIN_PATH))],
)


class ProfileCreate(BaseModel):
    user_id: str = Field(min_length=1, max_length=256)
    role: Role
    approved: bool = False
    active_modules: dict[ModuleId, bool] = Field(default_factory=dict)
    full_name: str | None = None


class RoleUpdate(BaseModel):
    role: Role


class ApprovalUpdate(BaseModel):
    approved: bool


class ModuleUpdate(BaseModel):
    entitled: bool


class ProfileOut(BaseModel):
    user_id: str
    full_name: str | None
    role: str | None
    approved: bool
    active_modules: dict[str, Any]


def _out(profile: Profile) -> ProfileOut:
    return ProfileOut(
        user_id=profile.user_id,
        full_name=profile.full_name,
        role=profile.role,
        approved=profile.status_homologacao is True,
        active_modules=dict(profile.active_modules or {}),
    )


def _found(profile: Profile | None) -> Profile:
    if profile is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


@router.post("", response_model=ProfileOut, status_code=HTTP_201_CREATED)
async def create_profile(
    body: ProfileCreate, session: AsyncSession = Depends(db_session)
) -> ProfileOut:
    try:
        profile = await ProfileRepo(session).create(
            user_id=body.user_id,
            role=body.role,
            approved=body.approved,
            active_modules=body.active_modules,
            full_name=body.full_name,
        )
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise HTTPException(status_code=HTTP_409_CONFLICT, detail="Profile already exists") from e
    log.info("admin.profile_created", user_id=body.user_id, role=str(body.role))
    return _out(profile)


@router.get("/{user_id}", response_model=ProfileOut)
async def get_profile(user_id: str, session: AsyncSession = Depends(db_session)) -> ProfileOut:
    return _out(_found(await ProfileRepo(session).get_by_user_id(user_id)))


@router.put("/{user_id}/role", response_model=ProfileOut)
async def change_role(
    user_id: str, body: RoleUpdate, session: AsyncSession = Depends(db_session)
) -> ProfileOut:
    profile = _found(await ProfileRepo(session).set_role(user_id, body.role))
    await session.commit()
    log.info("admin.role_changed", user_id=user_id, role=str(body.role))
    return _out(profile)


@router.put("/{user_id}/approval", response_model=ProfileOut)
async def set_approval(
    user_id: str, body: ApprovalUpdate, session: AsyncSession = Depends(db_session)
) -> ProfileOut:
    profile = _found(await ProfileRepo(session).set_approval(user_id, body.approved))
    await session.commit()
    log.info("admin.approval_set", user_id=user_id, approved=body.approved)
    return _out(profile)


@router.put("/{user_id}/modules/{module}", response_model=ProfileOut)
async def set_module(
    user_id: str,
    module: ModuleId,
    body: ModuleUpdate,
    session: AsyncSession = Depends(db_session),
) -> ProfileOut:
    profile = _found(await ProfileRepo(session).set_module(user_id, module, body.entitled))
    await session.commit()
    log.info("admin.module_set", user_id=user_id, module=str(module), entitled=body.entitled)
    return _out(profile)
