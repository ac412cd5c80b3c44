"""
axioma_access.db.profile_store

SQL-backed `ProfileStore` for the access engine.

Responsibilities:
- Read exactly the authorization fields (role, approval, modules) for a principal.
- Convert raw rows into `ProfileRecord`, rejecting malformed data.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from axioma_access.access.errors import ProfileLookupError
from axioma_access.access.models import ModuleId, PrincipalId, ProfileRecord, Role
from axioma_access.db.models import Profile

_MODULE_IDS = frozenset(m.value for m in ModuleId)


def profile_record_from_row(
    *, role: str | None, approved: bool | None, modules: Any
) -> ProfileRecord:
    try:
        parsed_role = Role(role)
    except ValueError as e:
        raise ProfileLookupError(f"unknown role: {role!r}") from e

    if modules is None:
        modules = {}
    if not isinstance(modules, Mapping):
        raise ProfileLookupError("active_modules is not an object")

    # Unknown module keys are ignored; only literal True counts as entitled.
    entitled = {ModuleId(k): v is True for k, v in modules.items() if k in _MODULE_IDS}
    return ProfileRecord(role=parsed_role, approved=approved is True, entitled_modules=entitled)


class SqlProfileStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def fetch_profile(self, principal_id: PrincipalId) -> ProfileRecord | None:
        stmt = select(Profile.role, Profile.status_homologacao, Profile.active_modules).where(
            Profile.user_id == principal_id
        )
        try:
            row = (await self._session.execute(stmt)).one_or_none()
        except SQLAlchemyError as e:
            raise ProfileLookupError(f"profile query failed: {e.__class__.__name__}") from e

        if row is None:
            return None
        return profile_record_from_row(
            role=row.role, approved=row.status_homologacao, modules=row.active_modules
        )
