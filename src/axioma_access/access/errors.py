"""
axioma_access.access.errors

Error taxonomy for access resolution.

None of these reach a protected view: the engine converts lookup failures into
denial verdicts and drops stale evaluations silently.
"""

from __future__ import annotations


class AccessError(Exception):
    pass


class SessionLookupError(AccessError):
    """Session store failed or returned an unusable session (treated as no session)."""


class ProfileLookupError(AccessError):
    """Profile store failed or returned malformed data."""


class ProfileMissing(ProfileLookupError):
    """No profile exists for a principal that has a session."""


class StaleEvaluation(AccessError):
    """A newer evaluation started (or the caller was discarded) mid-flight."""
