"""
axioma_access.access.policy

Decision table for access resolution.

Responsibilities:
- Apply the ordered profile rules (master bypass, approval, role, module).
- Map a verdict to its redirect target and its user-visible notification.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from axioma_access.access.models import (
    ProfileRecord,
    RedirectKind,
    RedirectTarget,
    ResourcePolicy,
    Role,
    Verdict,
)


class NotificationCategory(enum.StrEnum):
    access_denied = "access_denied"
    awaiting_approval = "awaiting_approval"
    module_not_purchased = "module_not_purchased"


@dataclass(frozen=True, slots=True)
class RedirectPaths:
    login: str = "/auth"
    dashboard: str = "/dashboard"
    upgrade: str = "/upgrade"


_REDIRECT_KINDS: dict[Verdict, RedirectKind] = {
    Verdict.deny_no_session: RedirectKind.login,
    Verdict.deny_not_approved: RedirectKind.dashboard,
    Verdict.deny_role_mismatch: RedirectKind.dashboard,
    Verdict.deny_lookup_failed: RedirectKind.dashboard,
    Verdict.deny_module_not_entitled: RedirectKind.upgrade,
}

# Lookup failures share the role-mismatch message so the visitor cannot tell which
# check failed.
_NOTIFICATIONS: dict[Verdict, tuple[NotificationCategory, str]] = {
    Verdict.deny_role_mismatch: (
        NotificationCategory.access_denied,
        "Acesso negado para esta modalidade.",
    ),
    Verdict.deny_lookup_failed: (
        NotificationCategory.access_denied,
        "Acesso negado para esta modalidade.",
    ),
    Verdict.deny_not_approved: (
        NotificationCategory.awaiting_approval,
        "Acesso negado. Aguardando homologação do usuário.",
    ),
    Verdict.deny_module_not_entitled: (
        NotificationCategory.module_not_purchased,
        "Módulo não contratado. Faça upgrade do seu plano.",
    ),
}


def decide(policy: ResourcePolicy, profile: ProfileRecord | None) -> Verdict:
    """
    Rules after a session is known to exist, first match wins:
    missing profile, master bypass, approval, role membership, module entitlement.

    Master is checked before approval: an unapproved master is still allowed.
    """

    if profile is None:
        return Verdict.deny_lookup_failed
    if profile.role is Role.master:
        return Verdict.allow
    if not profile.approved:
        return Verdict.deny_not_approved
    if policy.allowed_roles is not None and profile.role not in policy.allowed_roles:
        return Verdict.deny_role_mismatch
    if policy.required_module is not None and not profile.is_entitled(policy.required_module):
        return Verdict.deny_module_not_entitled
    return Verdict.allow


def redirect_for(
    verdict: Verdict,
    *,
    paths: RedirectPaths,
    requested_path: str | None = None,
) -> RedirectTarget | None:
    kind = _REDIRECT_KINDS.get(verdict)
    match kind:
        case None:
            return None
        case RedirectKind.login:
            return RedirectTarget(kind=kind, path=paths.login, return_to=requested_path)
        case RedirectKind.dashboard:
            return RedirectTarget(kind=kind, path=paths.dashboard)
        case RedirectKind.upgrade:
            return RedirectTarget(kind=kind, path=paths.upgrade)


def notification_for(verdict: Verdict) -> tuple[NotificationCategory, str] | None:
    # No-session denials redirect silently; allow never notifies.
    return _NOTIFICATIONS.get(verdict)


# --- Module Notes -----------------------------------------------------------
# Keep these functions pure: the engine owns I/O, staleness and side effects.
