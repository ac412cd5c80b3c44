"""
axioma_access.access

Access-control resolution package.

Responsibilities:
- Domain types (roles, modules, profile records, policies, verdicts).
- The ordered decision table and redirect mapping.
- The async resolution engine with its evaluation-token race guard.
"""

# Package marker; import from submodules directly.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package performs navigation or rendering; it returns data.
