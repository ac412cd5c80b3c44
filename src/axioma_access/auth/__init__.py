"""
axioma_access.auth

Session/identity package.

Responsibilities:
- Session token helpers and validation.
- Identity resolution (session store -> principal id).
- FastAPI dependencies that gate routes with the access engine.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Credential verification lives outside this service; we only read sessions.
