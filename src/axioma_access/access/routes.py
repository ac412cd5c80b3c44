"""
axioma_access.access.routes

Static resource policies declared by the product's protected views.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from axioma_access.access.models import ModuleId, ResourcePolicy, Role

# Same-site relative path: one leading slash, not followed by another slash or a
# backslash (browsers read both as a scheme-relative URL).
SAFE_PATH_PATTERN = r"^/([^/\\].*)?$"

ROUTE_POLICIES: Mapping[str, ResourcePolicy] = MappingProxyType(
    {
        # Declared by the front end. Session alone suffices for the first two.
        "/dashboard": ResourcePolicy(),
        "/upgrade": ResourcePolicy(),
        "/admin": ResourcePolicy(allowed_roles={Role.master}),
        "/auditoria": ResourcePolicy(allowed_roles={Role.auditor, Role.total_quality_iso}),
        "/configuracoes": ResourcePolicy(allowed_roles={Role.total_quality_iso}),
        "/documentos": ResourcePolicy(allowed_roles={Role.empresa, Role.total_quality_iso}),
        # Below: no front-end declaration yet. Role sets follow the role and module names.
        # Purchasable modules.
        "/riscos": ResourcePolicy(
            allowed_roles={Role.master, Role.proprietario},
            required_module=ModuleId.gestao_riscos,
        ),
        "/nps": ResourcePolicy(
            allowed_roles={Role.master, Role.proprietario},
            required_module=ModuleId.nps,
        ),
        "/manutencao": ResourcePolicy(
            allowed_roles={Role.master, Role.proprietario, Role.manutencao},
            required_module=ModuleId.manutencao,
        ),
        # Operational screens.
        "/secretaria": ResourcePolicy(
            allowed_roles={Role.proprietario, Role.secretaria, Role.recepcionista}
        ),
        "/treinador": ResourcePolicy(allowed_roles={Role.proprietario, Role.treinador}),
        "/estacionamento": ResourcePolicy(
            allowed_roles={Role.proprietario, Role.estacionamento, Role.recepcionista}
        ),
    }
)


def policy_for_path(path: str) -> ResourcePolicy | None:
    normalized = "/" + path.strip("/") if path.strip("/") else "/"
    return ROUTE_POLICIES.get(normalized)
