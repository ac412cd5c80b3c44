"""
axioma_access.auth.session

Identity resolution.

Responsibilities:
- Define the `SessionStore` boundary (may fail).
- Decode bearer session tokens into a `Session`.
- Wrap a store in `IdentityResolver`, which reports any failure as "no session".
"""

from __future__ import annotations

from typing import Protocol

from axioma_access.access.errors import SessionLookupError
from axioma_access.access.models import PrincipalId, Session
from axioma_access.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from axioma_access.observability.logging import get_logger

log = get_logger(__name__)


class SessionStore(Protocol):
    async def get_session(self) -> Session | None: ...


class BearerSessionStore:
    """
    Session store backed by a bearer token presented with the request.
    """

    def __init__(self, *, cfg: JwtConfig, token: str | None) -> None:
        self._cfg = cfg
        self._token = token

    async def get_session(self) -> Session | None:
        if not self._token:
            return None
        try:
            payload = decode_and_validate(cfg=self._cfg, token=self._token)
        except JwtValidationError as e:
            raise SessionLookupError(f"invalid session token: {e}") from e

        subject = str(payload.get("sub", ""))
        if not subject:
            raise SessionLookupError("session token has no subject")
        return Session(principal_id=subject)


class StaticSessionStore:
    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    async def get_session(self) -> Session | None:
        return self._session


class IdentityResolver:
    def __init__(self, store: SessionStore) -> None:
        self._store = store

    async def resolve_session(self) -> PrincipalId | None:
        # No retries: a failed lookup is reported as an anonymous visitor.
        try:
            session = await self._store.get_session()
        except SessionLookupError as e:
            log.debug("access.session_lookup_failed", error=str(e))
            return None
        except Exception as e:
            log.warning("access.session_lookup_failed", error=repr(e))
            return None
        if session is None or not session.principal_id:
            return None
        return session.principal_id


# --- Module Notes -----------------------------------------------------------
# The resolver is created per evaluation context; it caches nothing because
# sessions can expire or change between navigations.
