"""
tests.conftest

Shared fakes for the session and profile collaborators.
"""

from __future__ import annotations

import asyncio

from axioma_access.access.engine import AccessControlEngine
from axioma_access.access.errors import SessionLookupError
from axioma_access.access.models import ModuleId, PrincipalId, ProfileRecord, Role, Session
from axioma_access.access.notifications import CollectingNotifier
from axioma_access.auth.session import IdentityResolver, StaticSessionStore


class FailingSessionStore:
    def __init__(self, exc: Exception | None = None) -> None:
        self._exc = exc or SessionLookupError("session store unavailable")

    async def get_session(self) -> Session | None:
        raise self._exc


class GatedSessionStore:
    """
    Session store whose first lookup blocks until the test releases `gate`.
    """

    def __init__(self, principal_id: PrincipalId = "user-123") -> None:
        self.principal_id = principal_id
        self.gate = asyncio.Event()
        self.entered = asyncio.Event()
        self.calls = 0

    async def get_session(self) -> Session | None:
        self.calls += 1
        if self.calls == 1:
            self.entered.set()
            await self.gate.wait()
        return Session(principal_id=self.principal_id)


class FakeProfileStore:
    """
    In-memory profile store. Calls are recorded; `gates` lets a test hold the
    n-th call open until it releases the matching event.
    """

    def __init__(
        self,
        profiles: dict[PrincipalId, ProfileRecord] | None = None,
        *,
        error: Exception | None = None,
    ) -> None:
        self.profiles = dict(profiles or {})
        self.error = error
        self.calls: list[PrincipalId] = []
        self.gates: dict[int, asyncio.Event] = {}
        self.entered: dict[int, asyncio.Event] = {}

    def hold(self, call_index: int) -> tuple[asyncio.Event, asyncio.Event]:
        gate, entered = asyncio.Event(), asyncio.Event()
        self.gates[call_index] = gate
        self.entered[call_index] = entered
        return gate, entered

    async def fetch_profile(self, principal_id: PrincipalId) -> ProfileRecord | None:
        index = len(self.calls)
        self.calls.append(principal_id)
        if index in self.entered:
            self.entered[index].set()
        if index in self.gates:
            await self.gates[index].wait()
        if self.error is not None:
            raise self.error
        return self.profiles.get(principal_id)


def profile(
    role: Role,
    *,
    approved: bool = True,
    modules: dict[ModuleId, bool] | None = None,
) -> ProfileRecord:
    return ProfileRecord(role=role, approved=approved, entitled_modules=modules or {})


def build_engine(
    *,
    principal_id: PrincipalId | None = "user-123",
    profiles: FakeProfileStore | None = None,
    session_store=None,
) -> tuple[AccessControlEngine, FakeProfileStore, CollectingNotifier]:
    store = profiles if profiles is not None else FakeProfileStore()
    notifier = CollectingNotifier()
    if session_store is None:
        session_store = StaticSessionStore(
            Session(principal_id=principal_id) if principal_id is not None else None
        )
    engine = AccessControlEngine(
        identity=IdentityResolver(session_store),
        profiles=store,
        notifier=notifier,
    )
    return engine, store, notifier
