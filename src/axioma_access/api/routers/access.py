"""
axioma_access.api.routers.access

Access evaluation endpoints consumed by the front end's protected views.

Responsibilities:
- Evaluate an ad-hoc resource policy for the calling session.
- Evaluate the registered policy of a product route by path.
- Return verdict, redirect target and the notification to display (if any).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from starlette.status import HTTP_404_NOT_FOUND

from axioma_access.access.models import Decision, ModuleId, RedirectKind, ResourcePolicy, Role
from axioma_access.access.routes import SAFE_PATH_PATTERN, policy_for_path
from axioma_access.auth.deps import RequestAccess, request_access

router = APIRouter(prefix="/v1/access", tags=["access"])


class EvaluateRequest(BaseModel):
    allowed_roles: list[Role] | None = None
    required_module: ModuleId | None = None
    requested_path: str | None = Field(default=None, pattern=SAFE_PATH_PATTERN, max_length=2048)


class RedirectOut(BaseModel):
    kind: RedirectKind
    path: str
    return_to: str | None = None


class NotificationOut(BaseModel):
    category: str
    message: str


class DecisionOut(BaseModel):
    verdict: str
    allowed: bool
    redirect: RedirectOut | None = None
    notification: NotificationOut | None = None


def _to_out(decision: Decision | None, access: RequestAccess) -> DecisionOut:
    if decision is None:
        # Request-scoped engines run a single evaluation, so this is unreachable in
        # practice; still never report access for a dropped evaluation.
        raise HTTPException(status_code=409, detail="Evaluation superseded")

    redirect = None
    if decision.redirect is not None:
        redirect = RedirectOut(
            kind=decision.redirect.kind,
            path=decision.redirect.path,
            return_to=decision.redirect.return_to,
        )
    note = access.notifier.last
    return DecisionOut(
        verdict=str(decision.verdict),
        allowed=decision.allowed,
        redirect=redirect,
        notification=NotificationOut(category=str(note.category), message=note.message)
        if note
        else None,
    )


@router.post("/evaluate", response_model=DecisionOut)
async def evaluate_policy(
    body: EvaluateRequest,
    access: RequestAccess = Depends(request_access),
) -> DecisionOut:
    policy = ResourcePolicy(
        allowed_roles=body.allowed_roles, required_module=body.required_module
    )
    decision = await access.engine.evaluate(policy, requested_path=body.requested_path)
    return _to_out(decision, access)


@router.get("/routes", response_model=DecisionOut)
async def evaluate_route(
    path: str = Query(pattern=SAFE_PATH_PATTERN, max_length=2048),
    access: RequestAccess = Depends(request_access),
) -> DecisionOut:
    policy = policy_for_path(path)
    if policy is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Unknown route")
    decision = await access.engine.evaluate(policy, requested_path=path)
    return _to_out(decision, access)


# --- Module Notes -----------------------------------------------------------
# Denials are 200 responses here: the caller asked for a verdict, not for the
# protected resource. `auth.deps.require_access` is the variant that rejects.
