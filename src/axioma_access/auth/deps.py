"""
axioma_access.auth.deps

FastAPI dependency functions for access resolution.

Responsibilities:
- Build a request-scoped access engine from the bearer token and DB session.
- Gate routes with `require_access(policy)` using the same decision table as the
  front end's protected views.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from axioma_access.access.engine import AccessControlEngine
from axioma_access.access.models import Decision, ResourcePolicy, Verdict
from axioma_access.access.notifications import CollectingNotifier
from axioma_access.access.policy import RedirectPaths
from axioma_access.api.deps import db_session, settings_dep
from axioma_access.auth.jwt import JwtConfig
from axioma_access.auth.session import BearerSessionStore, IdentityResolver
from axioma_access.db.profile_store import SqlProfileStore
from axioma_access.settings import Settings

_bearer = HTTPBearer(auto_error=False)


@dataclass
class RequestAccess:
    engine: AccessControlEngine
    notifier: CollectingNotifier


def redirect_paths(settings: Settings) -> RedirectPaths:
    return RedirectPaths(
        login=settings.login_path,
        dashboard=settings.dashboard_path,
        upgrade=settings.upgrade_path,
    )


def bearer_token(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str | None:
    if creds is None or not creds.credentials:
        return None
    return creds.credentials


def request_access(
    token: str | None = Depends(bearer_token),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> RequestAccess:
    notifier = CollectingNotifier()
    store = BearerSessionStore(cfg=JwtConfig.from_settings(settings), token=token)
    engine = AccessControlEngine(
        identity=IdentityResolver(store),
        profiles=SqlProfileStore(session),
        notifier=notifier,
        paths=redirect_paths(settings),
    )
    return RequestAccess(engine=engine, notifier=notifier)


def _denial_detail(decision: Decision) -> dict[str, str | None]:
    redirect = decision.redirect
    return {
        "verdict": str(decision.verdict),
        "redirect": redirect.path if redirect else None,
        "return_to": redirect.return_to if redirect else None,
    }


def require_access(policy: ResourcePolicy, *, requested_path: str | None = None):
    async def _dep(access: RequestAccess = Depends(request_access)) -> Decision:
        decision = await access.engine.evaluate(policy, requested_path=requested_path)
        # A request-scoped engine is never superseded; treat None as a denial anyway.
        if decision is None:
            raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Evaluation superseded")
        if decision.verdict is Verdict.deny_no_session:
            raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=_denial_detail(decision))
        if not decision.allowed:
            raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail=_denial_detail(decision))
        return decision

    return _dep


# --- Module Notes -----------------------------------------------------------
# Admin routes use the `/admin` page policy, so the master bypass and approval rules
# apply to the API as well. Denial details carry the same redirect the front end
# would follow; a 401 keeps the login `return_to`.
