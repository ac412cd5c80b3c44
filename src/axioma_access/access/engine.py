"""
axioma_access.access.engine

Access control resolution engine.

Responsibilities:
- Resolve the visitor's session, then (only when the policy needs it) the profile.
- Apply the decision table and build the redirect target for denials.
- Surface only the latest evaluation: superseded or discarded ones are dropped.
- Emit exactly one notification per surfaced denial (none for no-session).

Lookup failures never escape `evaluate`; they become denial verdicts.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from axioma_access.access.errors import ProfileLookupError, ProfileMissing, StaleEvaluation
from axioma_access.access.models import (
    Decision,
    PrincipalId,
    ProfileRecord,
    ResourcePolicy,
    Verdict,
)
from axioma_access.access.notifications import Notifier
from axioma_access.access.policy import (
    RedirectPaths,
    decide,
    notification_for,
    redirect_for,
)
from axioma_access.auth.session import IdentityResolver
from axioma_access.observability.logging import get_logger

log = get_logger(__name__)


class ProfileStore(Protocol):
    async def fetch_profile(self, principal_id: PrincipalId) -> ProfileRecord | None: ...


class AccessControlEngine:
    """
    One engine per protected view (or per request in the API layer).

    `evaluate` may be called repeatedly; calls may overlap. Each call mints a new
    evaluation token and only a call whose token is still current when it settles
    is surfaced. `discard()` abandons whatever is in flight.
    """

    def __init__(
        self,
        *,
        identity: IdentityResolver,
        profiles: ProfileStore,
        notifier: Notifier,
        paths: RedirectPaths | None = None,
    ) -> None:
        self._identity = identity
        self._profiles = profiles
        self._notifier = notifier
        self._paths = paths or RedirectPaths()

        self._generation = 0
        self._pending = False
        self._last_decision: Decision | None = None

    @property
    def pending(self) -> bool:
        return self._pending

    @property
    def last_decision(self) -> Decision | None:
        return self._last_decision

    def discard(self) -> None:
        # Caller is gone: nothing currently in flight may surface.
        self._generation += 1
        self._pending = False

    async def evaluate(
        self,
        policy: ResourcePolicy,
        *,
        requested_path: str | None = None,
    ) -> Decision | None:
        """
        Returns the decision, or None when this evaluation was superseded/discarded.
        """

        self._generation += 1
        token = self._generation
        self._pending = True

        try:
            verdict = await self._resolve(policy, token)
            self._ensure_current(token)
        except StaleEvaluation:
            log.debug("access.evaluation_superseded", requested_path=requested_path)
            return None
        except asyncio.CancelledError:
            # The awaiting caller went away: abandon, unless a newer call already did.
            if token == self._generation:
                self.discard()
            raise

        decision = Decision(
            verdict=verdict,
            redirect=redirect_for(verdict, paths=self._paths, requested_path=requested_path),
        )
        self._pending = False
        self._last_decision = decision
        log.info(
            "access.evaluated",
            verdict=str(verdict),
            redirect=str(decision.redirect.kind) if decision.redirect else None,
            requested_path=requested_path,
        )

        notification = notification_for(verdict)
        if notification is not None:
            category, message = notification
            self._notifier.notify(category, message)
        return decision

    async def _resolve(self, policy: ResourcePolicy, token: int) -> Verdict:
        principal_id = await self._identity.resolve_session()
        if principal_id is None:
            return Verdict.deny_no_session
        if not policy.requires_profile:
            return Verdict.allow

        # Superseded evaluations skip the profile fetch.
        self._ensure_current(token)
        profile = await self._fetch_profile(principal_id)
        return decide(policy, profile)

    async def _fetch_profile(self, principal_id: PrincipalId) -> ProfileRecord | None:
        try:
            profile = await self._profiles.fetch_profile(principal_id)
            if profile is None:
                raise ProfileMissing(f"no profile for principal {principal_id}")
            return profile
        except ProfileLookupError as e:
            log.debug("access.profile_lookup_failed", principal_id=principal_id, error=str(e))
            return None
        except Exception as e:
            log.warning(
                "access.profile_lookup_failed", principal_id=principal_id, error=repr(e)
            )
            return None

    def _ensure_current(self, token: int) -> None:
        if token != self._generation:
            raise StaleEvaluation()


# --- Module Notes -----------------------------------------------------------
# There is no internal timeout: a hung lookup leaves the engine pending and the
# caller keeps showing its loading state. Cancelling the awaiting task discards the
# evaluation and re-raises `CancelledError`.
