"""
axioma_access.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide the profile ORM model, engine/session setup, and repositories.
- Adapt the profile table to the engine's `ProfileStore` boundary.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The engine only sees `ProfileStore`; swapping this package for a remote profile
# service must not touch `axioma_access.access`.
